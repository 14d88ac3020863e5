from __future__ import annotations

import pytest

from models.csv_model import CSVData, CSVPreview, Provenance
from services.csv_service import CSVServiceError


def _preview(n_rows: int) -> CSVPreview:
    data = CSVData.build(["n"], [[str(i)] for i in range(n_rows)], invalid_rows=0, delimiter=",")
    return CSVPreview(data=data, source=Provenance.CLIENT, filename="n.csv")


def test_build_computes_total_rows() -> None:
    data = CSVData.build(["a", "b"], [["1", "2"]], invalid_rows=3, delimiter=";")

    assert data.total_rows == 4
    assert data.valid_rows == 1
    assert data.rows == (("1", "2"),)


def test_visible_and_hidden_rows() -> None:
    preview = _preview(60)

    assert len(preview.visible_rows(50)) == 50
    assert preview.hidden_rows(50) == 10
    assert preview.hidden_rows(100) == 0
    assert preview.visible_rows(0) == []


def test_source_labels() -> None:
    data = CSVData.build(["a"], [], 0, ",")
    assert CSVPreview(data, Provenance.BACKEND).source_label == "Backend"
    assert CSVPreview(data, Provenance.SAMPLE).source_label == "Archivo de ejemplo"
    assert CSVPreview(data, Provenance.CLIENT).source_label == "Local"


def test_from_upload_payload_full() -> None:
    payload = {
        "columns": ["a", "b"],
        "rows": [["1", "2"], ["3", None]],
        "totalRows": 5,
        "invalidRows": 3,
        "delimiter": ",",
        "errors": ["Zeile 4: falsche Spaltenanzahl"],
    }

    preview = CSVPreview.from_upload_payload(payload, filename="x.csv")

    assert preview.source is Provenance.BACKEND
    assert preview.filename == "x.csv"
    assert preview.data.columns == ("a", "b")
    assert preview.data.rows == (("1", "2"), ("3", ""))
    assert preview.data.total_rows == 5
    assert preview.data.invalid_rows == 3
    assert preview.data.delimiter == ","
    assert preview.errors == ("Zeile 4: falsche Spaltenanzahl",)


def test_from_upload_payload_defaults() -> None:
    payload = {"columns": ["a"], "rows": [["1"], ["2"]], "errors": ["e1"]}

    preview = CSVPreview.from_upload_payload(payload)

    assert preview.data.total_rows == 2
    assert preview.data.invalid_rows == 1
    assert preview.data.delimiter == ";"
    assert preview.filename is None


def test_from_upload_payload_missing_everything() -> None:
    preview = CSVPreview.from_upload_payload({})

    assert preview.data.columns == ()
    assert preview.data.rows == ()
    assert preview.data.total_rows == 0
    assert preview.data.invalid_rows == 0
    assert preview.errors == ()


@pytest.mark.parametrize(
    "payload",
    [
        ["not", "a", "dict"],
        {"columns": "a,b", "rows": []},
        {"columns": ["a"], "rows": ["1"]},
        {"columns": ["a"], "rows": [], "totalRows": "many"},
    ],
)
def test_from_upload_payload_rejects_bad_shapes(payload) -> None:
    with pytest.raises(CSVServiceError):
        CSVPreview.from_upload_payload(payload)


def test_from_upload_payload_delimiter_is_text() -> None:
    preview = CSVPreview.from_upload_payload({"columns": ["a"], "rows": [], "delimiter": 5})
    assert preview.data.delimiter == "5"
