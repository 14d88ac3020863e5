"""
Configuración central del visor de CSV.

Todos los valores se pueden sobreescribir con variables de entorno:
  CSV_PREVIEW_API_BASE, CSV_PREVIEW_UPLOAD_TIMEOUT, CSV_PREVIEW_MAX_ROWS,
  CSV_PREVIEW_SETTINGS, LOG_LEVEL
"""

from pathlib import Path
import os
import logging

# ---------------------------
# Backend de validación
# ---------------------------
API_BASE: str = os.getenv("CSV_PREVIEW_API_BASE", "http://localhost:8000/api")
UPLOAD_TIMEOUT: int = int(os.getenv("CSV_PREVIEW_UPLOAD_TIMEOUT", "30"))

# ---------------------------
# Vista previa
# ---------------------------
MAX_PREVIEW_ROWS: int = int(os.getenv("CSV_PREVIEW_MAX_ROWS", "50"))

# Preferencias de la interfaz (solo el tema, nunca datos del CSV)
SETTINGS_PATH = Path(os.getenv("CSV_PREVIEW_SETTINGS", str(Path.home() / ".csv_preview.json")))

# ---------------------------
# Logging
# ---------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int = None):
    """Configura el logger raíz (llamar una sola vez al iniciar)."""
    lvl = level or getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=lvl, format=LOG_FORMAT)
