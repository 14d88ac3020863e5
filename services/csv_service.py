import logging
import re
from typing import List
from models.csv_model import CSVData

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")


class CSVServiceError(Exception):
    pass


class EmptyInputError(CSVServiceError):
    def __init__(self, message: str = "El archivo CSV está vacío."):
        super().__init__(message)


class UnreadableHeaderError(CSVServiceError):
    def __init__(self, message: str = "No se pudo leer el encabezado."):
        super().__init__(message)


class CSVService:
    """
    Lector de CSV para la vista previa.
    - Delimitador ';' si el encabezado tiene al menos un ';', si no ','.
    - Comillas dobles agrupan celdas; "" dentro de comillas es una comilla literal.
    - Las filas con distinta cantidad de columnas que el encabezado se descartan
      y solo se cuentan (invalid_rows). No se rellenan ni se recortan.
    """

    # cp1252 antes que latin-1: latin-1 decodifica cualquier byte
    ENCODINGS = ['utf-8-sig', 'utf-8', 'cp1252', 'latin-1']

    @staticmethod
    def split_line(line: str, delimiter: str, strict_quotes: bool = False) -> List[str]:
        """
        Divide una línea en celdas (siempre devuelve al menos una).

        Con strict_quotes=True una comilla suelta en medio de una celda
        (ej: 3" tubo) se toma como carácter literal en vez de abrir comillas.
        """
        cells: List[str] = []
        current = ""
        inside_quotes = False
        i = 0
        n = len(line)

        while i < n:
            char = line[i]

            if char == '"':
                if inside_quotes and i + 1 < n and line[i + 1] == '"':
                    current += '"'
                    i += 2
                    continue
                if strict_quotes and not inside_quotes and current.strip():
                    current += char
                else:
                    inside_quotes = not inside_quotes
            elif char == delimiter and not inside_quotes:
                cells.append(current.strip())
                current = ""
            else:
                current += char
            i += 1

        # Comilla sin cerrar: se acepta tal cual
        cells.append(current.strip())
        return cells

    @staticmethod
    def detect_delimiter(header_line: str) -> str:
        return ";" if ";" in header_line else ","

    @staticmethod
    def parse_text(text: str, strict_quotes: bool = False) -> CSVData:
        # 1. Separar líneas y descartar las vacías
        lines = [line for line in _LINE_BREAK.split(text) if line.strip()]
        if not lines:
            raise EmptyInputError()

        # 2. Delimitador: solo se mira el encabezado, una vez
        delimiter = CSVService.detect_delimiter(lines[0])

        # 3. Encabezado
        columns = CSVService.split_line(lines[0], delimiter, strict_quotes)
        if not columns:
            raise UnreadableHeaderError()
        expected_cols = len(columns)

        # 4. Clasificar filas
        rows: List[List[str]] = []
        invalid_rows = 0
        for line in lines[1:]:
            cells = CSVService.split_line(line, delimiter, strict_quotes)
            if len(cells) != expected_cols:
                invalid_rows += 1
                continue
            rows.append(cells)

        if invalid_rows:
            logger.warning("%d fila(s) descartadas: no tienen %d columnas", invalid_rows, expected_cols)
        logger.debug("CSV leído: delimitador=%r columnas=%d válidas=%d inválidas=%d",
                     delimiter, expected_cols, len(rows), invalid_rows)

        return CSVData.build(columns, rows, invalid_rows, delimiter)

    @staticmethod
    def read_text(path: str) -> str:
        # Intentar leer con diferentes codificaciones
        for enc in CSVService.ENCODINGS:
            try:
                with open(path, "r", encoding=enc, newline="") as f:
                    return f.read()
            except UnicodeDecodeError:
                continue
            except OSError as e:
                raise CSVServiceError(f"Error de lectura: {e}")
        raise CSVServiceError("No se pudo leer el archivo (revise codificación).")

    @staticmethod
    def read_csv(path: str, strict_quotes: bool = False) -> CSVData:
        return CSVService.parse_text(CSVService.read_text(path), strict_quotes)
