from tkinter import ttk
import matplotlib.pyplot as plt
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg

# ========================================================
#  GRÁFICA DE VALIDACIÓN (filas válidas vs inválidas)
# ========================================================
class ValidationChartView(ttk.Frame):
    def __init__(self, parent, controller=None, *args, **kwargs):
        super().__init__(parent, *args, **kwargs)
        self.controller = controller

        ttk.Label(self, text="Resultado de la validación", font=("Arial", 11, "bold")).pack(side="top", anchor="w", padx=5, pady=5)
        self.figure, self.ax = plt.subplots(figsize=(4, 3), dpi=100)
        self.canvas = FigureCanvasTkAgg(self.figure, master=self)
        self.canvas.get_tk_widget().pack(fill="both", expand=True, padx=5, pady=5)
        self.refresh()

    def refresh(self, palette=None):
        summary = self.controller.get_summary() if self.controller else {'valid': 0, 'invalid': 0, 'total': 0}
        p = palette or {"bg": "#ffffff", "fg": "#000000"}

        self.ax.clear()
        self.figure.set_facecolor(p["bg"])
        self.ax.set_facecolor(p["bg"])
        labels = ["Válidas", "Inválidas"]
        values = [summary['valid'], summary['invalid']]
        bars = self.ax.bar(labels, values, color=["#22c55e", "#ef4444"])
        for bar, v in zip(bars, values):
            self.ax.annotate(str(v), xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
                             xytext=(0, 3), textcoords="offset points", ha="center", color=p["fg"], fontsize=9)
        self.ax.set_title(f"Filas leídas: {summary['total']}", color=p["fg"])
        self.ax.tick_params(colors=p["fg"])
        self.ax.set_ylim(0, max(values + [1]) * 1.2)
        self.figure.tight_layout()
        self.canvas.draw()
