from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple


class Provenance(Enum):
    BACKEND = "backend"
    CLIENT = "client"
    SAMPLE = "sample"


SOURCE_LABELS = {
    Provenance.BACKEND: "Backend",
    Provenance.SAMPLE: "Archivo de ejemplo",
    Provenance.CLIENT: "Local",
}


@dataclass(frozen=True)
class CSVData:
    """
    Representa el CSV ya validado:
      - columns: nombres del encabezado (define el largo esperado de cada fila)
      - rows: solo las filas cuyo largo coincide con columns
      - total_rows: filas de datos leídas (válidas + descartadas)
      - invalid_rows: filas descartadas por cantidad de columnas
      - delimiter: ';' o ','
    """
    columns: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...] = ()
    total_rows: int = 0
    invalid_rows: int = 0
    delimiter: str = ","

    @classmethod
    def build(cls, columns: Sequence[str], rows: Sequence[Sequence[str]], invalid_rows: int, delimiter: str) -> "CSVData":
        frozen_rows = tuple(tuple(r) for r in rows)
        return cls(
            columns=tuple(columns),
            rows=frozen_rows,
            total_rows=len(frozen_rows) + invalid_rows,
            invalid_rows=invalid_rows,
            delimiter=delimiter,
        )

    @property
    def valid_rows(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class CSVPreview:
    """
    Lo que se muestra en pantalla: el resultado del parser más su origen.
    El resultado local y el del backend comparten CSVData; solo cambia `source`.
    """
    data: CSVData
    source: Provenance
    filename: Optional[str] = None
    errors: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def source_label(self) -> str:
        return SOURCE_LABELS[self.source]

    def visible_rows(self, limit: int) -> List[Tuple[str, ...]]:
        return list(self.data.rows[:max(limit, 0)])

    def hidden_rows(self, limit: int) -> int:
        return max(len(self.data.rows) - max(limit, 0), 0)

    @classmethod
    def from_upload_payload(cls, payload: Dict[str, Any], filename: Optional[str] = None) -> "CSVPreview":
        """Convierte la respuesta JSON del backend en un CSVPreview con origen BACKEND."""
        # Import local: csv_service depende de este módulo
        from services.csv_service import CSVServiceError

        if not isinstance(payload, dict):
            raise CSVServiceError("Respuesta del backend inválida.")

        columns = payload.get("columns") or []
        rows = payload.get("rows") or []
        errors = payload.get("errors") or []
        if not isinstance(columns, list) or not isinstance(rows, list) or not isinstance(errors, list):
            raise CSVServiceError("Respuesta del backend inválida: se esperaban listas.")
        if any(not isinstance(r, (list, tuple)) for r in rows):
            raise CSVServiceError("Respuesta del backend inválida: cada fila debe ser una lista.")

        def _cell(value) -> str:
            return "" if value is None else str(value)

        clean_columns = tuple(_cell(c) for c in columns)
        clean_rows = tuple(tuple(_cell(c) for c in r) for r in rows)
        clean_errors = tuple(str(e) for e in errors)

        total = payload.get("totalRows")
        invalid = payload.get("invalidRows")
        try:
            total_rows = int(total) if total is not None else len(clean_rows)
            invalid_rows = int(invalid) if invalid is not None else len(clean_errors)
        except (TypeError, ValueError) as e:
            raise CSVServiceError(f"Respuesta del backend inválida: {e}")

        data = CSVData(
            columns=clean_columns,
            rows=clean_rows,
            total_rows=total_rows,
            invalid_rows=invalid_rows,
            delimiter=str(payload.get("delimiter") or ";"),
        )
        return cls(data=data, source=Provenance.BACKEND, filename=filename, errors=clean_errors)
