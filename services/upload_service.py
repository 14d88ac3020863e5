"""
Cliente del backend de validación.
Envía el archivo a POST {API_BASE}/upload y convierte la respuesta en un CSVPreview.
"""

import logging
import os
from typing import Optional

import requests

from config.settings import API_BASE, UPLOAD_TIMEOUT
from models.csv_model import CSVPreview
from services.csv_service import CSVServiceError

logger = logging.getLogger(__name__)


class UploadError(CSVServiceError):
    pass


class UploadService:
    """Cliente HTTP del endpoint /upload"""

    GENERIC_ERROR = "La carga falló."

    def __init__(self, api_base: str = API_BASE, timeout: int = UPLOAD_TIMEOUT, session: Optional[requests.Session] = None):
        self.api_base = api_base
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def upload_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/upload"

    def upload(self, path: str) -> CSVPreview:
        filename = os.path.basename(path)
        try:
            with open(path, "rb") as f:
                files = {"file": (filename, f, "text/csv")}
                logger.info("POST %s (%s)", self.upload_url, filename)
                response = self.session.post(self.upload_url, files=files, timeout=self.timeout)
        except OSError as e:
            raise UploadError(f"Error de lectura: {e}")
        except requests.exceptions.RequestException as e:
            logger.warning("Error de conexión con %s: %s", self.upload_url, e)
            raise UploadError(f"Error de conexión: {e}")

        if not response.ok:
            raise UploadError(self._error_message(response))

        try:
            payload = response.json()
        except ValueError:
            raise UploadError("Respuesta del backend inválida (no es JSON).")

        try:
            preview = CSVPreview.from_upload_payload(payload, filename=filename)
        except CSVServiceError as e:
            raise UploadError(str(e))
        logger.info("Backend validó %s: %d válidas / %d total", filename, preview.data.valid_rows, preview.data.total_rows)
        return preview

    def _error_message(self, response) -> str:
        logger.warning("Backend respondió %s", response.status_code)
        try:
            payload = response.json()
        except ValueError:
            return response.text or self.GENERIC_ERROR
        if isinstance(payload, dict):
            return payload.get("message") or payload.get("error") or self.GENERIC_ERROR
        return self.GENERIC_ERROR
