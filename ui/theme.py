import json
import logging
from pathlib import Path

from config.settings import SETTINGS_PATH

logger = logging.getLogger(__name__)

PALETTES = {
    False: {"bg": "#f8fafc", "fg": "#0f172a", "field": "#ffffff", "muted": "#64748b", "error": "#b91c1c"},
    True: {"bg": "#020617", "fg": "#f8fafc", "field": "#0f172a", "muted": "#94a3b8", "error": "#f87171"},
}


class ThemeState:
    """
    Preferencia de tema (claro / oscuro).
    Se guarda en SETTINGS_PATH como {"dark_mode": bool}; sin archivo se usa el claro.
    """

    def __init__(self, path: Path | str = SETTINGS_PATH):
        self.path = Path(path)
        self.dark = self._load()

    def _load(self) -> bool:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                value = json.load(f).get("dark_mode")
        except FileNotFoundError:
            return False
        except (OSError, ValueError, AttributeError) as e:
            logger.warning("Preferencias ilegibles en %s: %s", self.path, e)
            return False
        return value if isinstance(value, bool) else False

    def _save(self):
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump({"dark_mode": self.dark}, f)
        except OSError as e:
            logger.warning("No se pudo guardar la preferencia de tema: %s", e)

    def toggle(self) -> bool:
        self.dark = not self.dark
        self._save()
        return self.dark

    @property
    def palette(self) -> dict:
        return PALETTES[self.dark]

    @property
    def toggle_label(self) -> str:
        return "☀️ Tema claro" if self.dark else "🌙 Tema oscuro"

    def apply(self, style, root=None):
        p = self.palette
        style.theme_use("clam")
        style.configure(".", background=p["bg"], foreground=p["fg"], fieldbackground=p["field"])
        style.configure("Treeview", background=p["field"], foreground=p["fg"], fieldbackground=p["field"])
        style.configure("Treeview.Heading", background=p["bg"], foreground=p["fg"])
        style.configure("Muted.TLabel", foreground=p["muted"])
        style.configure("Error.TLabel", foreground=p["error"])
        if root is not None:
            root.configure(background=p["bg"])
