from __future__ import annotations

import pytest

from services.csv_service import (
    CSVService,
    CSVServiceError,
    EmptyInputError,
    UnreadableHeaderError,
)


# ----- split_line -----


@pytest.mark.parametrize(
    "line",
    ["", "   ", "a", ",", ";;", '"', '""', '"abc', "a,b,c", '"a""'],
)
def test_split_line_always_returns_at_least_one_cell(line: str) -> None:
    assert len(CSVService.split_line(line, ",")) >= 1


def test_split_line_empty_line_is_single_empty_cell() -> None:
    assert CSVService.split_line("", ",") == [""]


def test_split_line_escaped_quote() -> None:
    assert CSVService.split_line('a,"b""c",d', ",") == ["a", 'b"c', "d"]


def test_split_line_delimiter_inside_quotes_is_not_a_boundary() -> None:
    assert CSVService.split_line('"a;b";c', ";") == ["a;b", "c"]
    assert CSVService.split_line('"a;b",c', ",") == ["a;b", "c"]
    # Sin ';' fuera de las comillas la línea entera es una sola celda
    assert CSVService.split_line('"a;b",c', ";") == ["a;b,c"]


def test_split_line_trims_cells() -> None:
    assert CSVService.split_line(" x , y ", ",") == ["x", "y"]


def test_split_line_keeps_empty_cells() -> None:
    assert CSVService.split_line("a,,c,", ",") == ["a", "", "c", ""]


def test_split_line_unterminated_quote_is_accepted() -> None:
    assert CSVService.split_line('a,"b,c', ",") == ["a", "b,c"]


def test_split_line_lone_quote_toggles_by_default() -> None:
    # El '"' de 3" abre comillas y se come el resto de la línea
    assert CSVService.split_line('3" tubo,acero,10', ",") == ["3 tubo,acero,10"]


def test_split_line_strict_quotes_keeps_lone_quote_literal() -> None:
    assert CSVService.split_line('3" tubo,acero,10', ",", strict_quotes=True) == ['3" tubo', "acero", "10"]
    # Al inicio de la celda las comillas siguen agrupando
    assert CSVService.split_line(' "a,b",c', ",", strict_quotes=True) == ["a,b", "c"]


def test_split_line_quote_only_cell_yields_empty_string() -> None:
    assert CSVService.split_line('"",x', ",") == ["", "x"]


# ----- detect_delimiter -----


@pytest.mark.parametrize(
    "header, expected",
    [("a;b;c", ";"), ("a,b,c", ","), ("a;b,c", ";"), ("abc", ","), ("a\tb", ",")],
)
def test_detect_delimiter(header: str, expected: str) -> None:
    assert CSVService.detect_delimiter(header) == expected


# ----- parse_text -----


def test_parse_text_classifies_rows() -> None:
    result = CSVService.parse_text("a,b,c\n1,2,3\n1,2\n1,2,3,4\n")

    assert result.columns == ("a", "b", "c")
    assert result.rows == (("1", "2", "3"),)
    assert result.invalid_rows == 2
    assert result.total_rows == 3
    assert result.delimiter == ","


def test_parse_text_semicolon_file_with_crlf() -> None:
    result = CSVService.parse_text('id;name\r\n1;"Doe; John"\r\n2;Ana\r\n')

    assert result.delimiter == ";"
    assert result.rows == (("1", "Doe; John"), ("2", "Ana"))
    assert result.invalid_rows == 0


def test_parse_text_delimiter_comes_from_header_only() -> None:
    # Los datos usan ';' pero el encabezado no: se parte por ','
    result = CSVService.parse_text("a,b\n1;2\n3,4\n")

    assert result.delimiter == ","
    assert result.rows == (("3", "4"),)
    assert result.invalid_rows == 1


def test_parse_text_ignores_blank_lines() -> None:
    text = "\n  \na,b\n\n1,2\n   \n3,4\n\n\t\n"
    result = CSVService.parse_text(text)

    assert result.rows == (("1", "2"), ("3", "4"))
    assert result.total_rows == 2
    assert result.invalid_rows == 0


def test_parse_text_header_only() -> None:
    result = CSVService.parse_text("a;b;c\n")

    assert result.columns == ("a", "b", "c")
    assert result.rows == ()
    assert result.total_rows == 0


def test_parse_text_preserves_row_order() -> None:
    result = CSVService.parse_text("n\n3\n1\n2\n")
    assert [r[0] for r in result.rows] == ["3", "1", "2"]


@pytest.mark.parametrize("text", ["", "\n", "  \n\t\n", "\r\n\r\n"])
def test_parse_text_blank_input_raises_empty_input(text: str) -> None:
    with pytest.raises(EmptyInputError):
        CSVService.parse_text(text)


def test_parse_errors_are_service_errors() -> None:
    assert issubclass(EmptyInputError, CSVServiceError)
    assert issubclass(UnreadableHeaderError, CSVServiceError)
    assert str(EmptyInputError()) == "El archivo CSV está vacío."


def test_parse_text_is_idempotent() -> None:
    text = 'a;b\n1;"x""y"\n2\n'
    assert CSVService.parse_text(text) == CSVService.parse_text(text)


def test_parse_result_is_immutable() -> None:
    result = CSVService.parse_text("a\n1\n")
    with pytest.raises(AttributeError):
        result.invalid_rows = 5  # type: ignore[misc]


# ----- read_csv -----


def test_read_csv_from_utf8_file(tmp_path) -> None:
    path = tmp_path / "datos.csv"
    path.write_text("ciudad;población\nBogotá;7\n", encoding="utf-8")

    result = CSVService.read_csv(str(path))

    assert result.columns == ("ciudad", "población")
    assert result.rows == (("Bogotá", "7"),)


def test_read_csv_strips_bom(tmp_path) -> None:
    path = tmp_path / "bom.csv"
    path.write_bytes("a,b\n1,2\n".encode("utf-8-sig"))

    assert CSVService.read_csv(str(path)).columns == ("a", "b")


def test_read_csv_falls_back_to_single_byte_encodings(tmp_path) -> None:
    path = tmp_path / "latin.csv"
    path.write_bytes("año;mes\n2024;enero\n".encode("latin-1"))
    assert CSVService.read_csv(str(path)).columns == ("año", "mes")

    # 0x81 no existe en cp1252: solo latin-1 lo decodifica
    path.write_bytes(b"a;b\n1;\x81\n")
    assert CSVService.read_csv(str(path)).rows == (("1", "\x81"),)


def test_read_csv_missing_file_raises_service_error(tmp_path) -> None:
    with pytest.raises(CSVServiceError):
        CSVService.read_csv(str(tmp_path / "no_existe.csv"))


def test_read_csv_prefers_cp1252_over_latin1(tmp_path) -> None:
    path = tmp_path / "win.csv"
    path.write_bytes("precio;moneda\n10;€\n".encode("cp1252"))

    assert CSVService.read_csv(str(path)).rows == (("10", "€"),)
