from config.settings import configure_logging
from ui.main_window import MainWindow

if __name__ == "__main__":
    configure_logging()
    MainWindow().run()
