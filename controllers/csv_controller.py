from services.csv_service import CSVService, CSVServiceError
from services.upload_service import UploadService, UploadError
from models.csv_model import CSVPreview, Provenance
from config.settings import API_BASE
from typing import Dict, List, Optional, Any, Callable
import logging
import os
import pandas as pd
import openpyxl
from openpyxl.drawing.image import Image as ExcelImage
from openpyxl.styles import Font
import io

logger = logging.getLogger(__name__)

SAMPLE_FILENAME = "ejemplo.csv"
SAMPLE_CSV = """id;nombre;ciudad;monto
1;Ana Torres;Bogotá;120,50
2;Luis Gómez;Medellín;89,90
3;"Pérez; Carlos";Cali;45,00
4;Marta Ruiz;Barranquilla
5;Jorge Díaz;Cartagena;310,00
6;"Sofía ""La Jefa"" León";Bucaramanga;77,25
"""


class SelectionState:
    """Archivo elegido por el usuario (o ninguno)."""
    def __init__(self):
        self.path: str | None = None

    @property
    def filename(self) -> str | None:
        return os.path.basename(self.path) if self.path else None


class PreviewState:
    """Vista previa actual, último error y si hay una acción en curso."""
    def __init__(self):
        self.preview: CSVPreview | None = None
        self.error: str | None = None
        self.loading: bool = False


class CSVController:
    def __init__(self, upload_service: UploadService | None = None, strict_quotes: bool = False):
        self.upload_service = upload_service or UploadService()
        self.strict_quotes = strict_quotes
        self.selection = SelectionState()
        self.state = PreviewState()

    @property
    def api_base(self) -> str:
        return getattr(self.upload_service, "api_base", API_BASE)

    @property
    def preview(self) -> CSVPreview | None:
        return self.state.preview

    @property
    def last_error(self) -> str | None:
        return self.state.error

    # =========================================================================
    #  ACCIONES
    # =========================================================================
    def select_file(self, path: str):
        if not path: return
        self.selection.path = path
        self.state.error = None
        logger.info("Archivo seleccionado: %s", path)

    def load_local_preview(self) -> CSVPreview | None:
        if not self._require_selection(): return None
        path = self.selection.path

        def _load():
            data = CSVService.read_csv(path, self.strict_quotes)
            return CSVPreview(data=data, source=Provenance.CLIENT, filename=self.selection.filename)
        return self._run(_load, "No se pudo leer el archivo.")

    def upload_selected(self) -> CSVPreview | None:
        if not self._require_selection(): return None
        path = self.selection.path

        def _upload():
            try:
                return self.upload_service.upload(path)
            except UploadError as e:
                raise UploadError(f"{e} (¿Backend accesible en {self.api_base}?)")
        return self._run(_upload, "Error desconocido.")

    def load_sample(self) -> CSVPreview | None:
        def _sample():
            data = CSVService.parse_text(SAMPLE_CSV, self.strict_quotes)
            return CSVPreview(data=data, source=Provenance.SAMPLE, filename=SAMPLE_FILENAME)
        return self._run(_sample, "No se pudo cargar el ejemplo.")

    def _require_selection(self) -> bool:
        if self.selection.path: return True
        self.state.error = "Por favor seleccione un archivo CSV."
        return False

    def _run(self, action: Callable[[], CSVPreview], generic_message: str) -> CSVPreview | None:
        # Una acción a la vez; si falla se conserva la vista previa anterior
        if self.state.loading: return None
        self.state.loading = True
        self.state.error = None
        try:
            preview = action()
        except CSVServiceError as e:
            self.state.error = str(e)
            logger.warning("Acción fallida: %s", e)
            return None
        except Exception:
            logger.exception("Error inesperado")
            self.state.error = generic_message
            return None
        finally:
            self.state.loading = False

        self.state.preview = preview
        logger.info("Vista previa (%s) %s: %d válidas / %d total, %d inválidas",
                    preview.source.value, preview.filename, preview.data.valid_rows,
                    preview.data.total_rows, preview.data.invalid_rows)
        return preview

    # =========================================================================
    #  CONSULTAS
    # =========================================================================
    def get_summary(self) -> Dict[str, Any]:
        p = self.state.preview
        if p is None:
            return {'valid': 0, 'invalid': 0, 'total': 0, 'delimiter': None, 'source': None, 'filename': None}
        return {
            'valid': p.data.valid_rows,
            'invalid': p.data.invalid_rows,
            'total': p.data.total_rows,
            'delimiter': p.data.delimiter,
            'source': p.source_label,
            'filename': p.filename,
        }

    @staticmethod
    def _unique_columns(columns) -> List[str]:
        # Encabezados vacíos o repetidos no sirven como columnas de un DataFrame
        seen: Dict[str, int] = {}
        result = []
        for idx, col in enumerate(columns, start=1):
            name = col or f"Columna {idx}"
            if name in seen:
                seen[name] += 1
                name = f"{name} ({seen[name]})"
            else:
                seen[name] = 1
            result.append(name)
        return result

    def preview_dataframe(self, limit: Optional[int] = None) -> pd.DataFrame:
        p = self.state.preview
        if p is None: return pd.DataFrame()
        rows = p.data.rows if limit is None else p.visible_rows(limit)
        # Filas del backend pueden venir con otro largo: se rellenan o recortan al encabezado
        width = len(p.data.columns)
        fitted = [(list(r) + [""] * width)[:width] for r in rows]
        return pd.DataFrame(fitted, columns=self._unique_columns(p.data.columns))

    # ========================================================
    #  EXPORTACIÓN A EXCEL
    # ========================================================
    def export_report(self, filename: str, figures: Dict[str, Any] = None):
        p = self.state.preview
        if p is None: raise CSVServiceError("No hay datos cargados para exportar.")
        self.state.error = None

        df_preview = self.preview_dataframe()
        summary = self.get_summary()
        df_summary = pd.DataFrame({
            "Concepto": ["Archivo", "Origen", "Delimitador", "Filas válidas", "Filas inválidas", "Filas totales"],
            "Valor": [summary['filename'] or "desconocido", summary['source'], summary['delimiter'],
                      summary['valid'], summary['invalid'], summary['total']],
        })
        df_errors = pd.DataFrame({"Mensaje": list(p.errors)}) if p.errors else None

        try:
            with pd.ExcelWriter(filename, engine='openpyxl') as writer:
                df_preview.to_excel(writer, sheet_name='Vista previa', index=False)
                df_summary.to_excel(writer, sheet_name='Resumen', index=False)
                if df_errors is not None:
                    df_errors.to_excel(writer, sheet_name='Diagnósticos', index=False)

                for sheet_name in writer.sheets:
                    sheet = writer.sheets[sheet_name]
                    for column in sheet.columns:
                        column = [cell for cell in column]
                        max_length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
                        sheet.column_dimensions[column[0].column_letter].width = max_length + 2

            if figures:
                wb = openpyxl.load_workbook(filename)
                ws = wb['Resumen']
                row_idx = len(df_summary) + 4
                for name, fig in figures.items():
                    if fig:
                        buf = io.BytesIO()
                        fig.savefig(buf, format='png', dpi=100, bbox_inches='tight')
                        buf.seek(0)
                        img = ExcelImage(buf)
                        img.anchor = f'B{row_idx}'
                        ws.add_image(img)
                        ws[f'B{row_idx-1}'] = name
                        ws[f'B{row_idx-1}'].font = Font(bold=True)
                        row_idx += 25
                wb.save(filename)
        except OSError as e:
            raise CSVServiceError(f"No se pudo guardar el reporte: {e}")

        logger.info("Reporte exportado: %s", filename)
