from __future__ import annotations

import csv
import json
from collections.abc import Iterable, Mapping
from pathlib import Path

from ruleflow.models import FormData


class InputFormatError(ValueError):
    """Error de formato de entrada: el archivo no se puede leer como lista de formularios."""


def _build_form(row: Mapping[str, object | None]) -> FormData:
    """
    Convierte una fila en FormData (str -> str).

    Los valores None se descartan: para el validador eso es "Field not found",
    no un string vacío.
    """
    return {str(k): str(v) for k, v in row.items() if k is not None and v is not None}


def _assert_file_exists(path: Path) -> None:
    if not path.exists():
        raise InputFormatError(f"Input file not found: {path}")


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise InputFormatError(f"Input is not valid UTF-8: {path}") from exc


def read_csv(path: Path, delimiter: str = ",") -> list[FormData]:
    _assert_file_exists(path)

    try:
        with path.open("r", encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f, delimiter=delimiter)
            if reader.fieldnames is None:
                raise InputFormatError(f"{path.name} has no header row")
            return [_build_form(row) for row in reader]
    except UnicodeDecodeError as exc:
        raise InputFormatError(f"Input is not valid UTF-8: {path}") from exc


def read_json(path: Path) -> list[FormData]:
    _assert_file_exists(path)

    try:
        payload = json.loads(_read_text(path))
    except json.JSONDecodeError as exc:
        raise InputFormatError(f"Invalid JSON file: {path}") from exc

    # Aceptamos:
    # - lista directa: [ {...}, {...} ]
    # - wrapper: { "records": [ {...}, ... ] }
    records: object
    if isinstance(payload, dict) and "records" in payload:
        records = payload.get("records")
    else:
        records = payload

    if not isinstance(records, list):
        raise InputFormatError("JSON root must be a list or object with 'records' list")

    forms: list[FormData] = []
    for i, item in enumerate(records):
        if not isinstance(item, dict):
            raise InputFormatError(f"JSON record at index {i} is not an object")
        forms.append(_build_form(item))
    return forms


def _detect_delimiter(header_line: str) -> str | None:
    for candidate in ("|", "\t", ";", ","):
        if candidate in header_line:
            return candidate
    return None


def read_txt_delimited(path: Path) -> list[FormData]:
    _assert_file_exists(path)

    non_empty = [ln for ln in _read_text(path).splitlines() if ln.strip()]
    if not non_empty:
        raise InputFormatError("TXT input is empty")

    delim = _detect_delimiter(non_empty[0])
    if delim is None:
        raise InputFormatError("TXT header has no recognizable delimiter (|, TAB, ;, ,)")
    return read_csv(path, delimiter=delim)


def read_forms(path: Path, input_format: str = "auto") -> list[FormData]:
    """
    Fachada única de ingesta.
    input_format:
      - auto (por extensión)
      - csv | json | txt
    """
    fmt = input_format.lower().strip()

    if fmt == "auto":
        suffix = path.suffix.lower()
        if suffix == ".csv":
            fmt = "csv"
        elif suffix == ".json":
            fmt = "json"
        elif suffix == ".txt":
            fmt = "txt"
        else:
            raise InputFormatError(
                f"Unsupported input extension '{suffix}'. Use --format csv|json|txt"
            )

    if fmt == "csv":
        return read_csv(path)
    if fmt == "json":
        return read_json(path)
    if fmt == "txt":
        return read_txt_delimited(path)

    raise InputFormatError(f"Unsupported format '{input_format}'. Use csv|json|txt")


def write_csv(path: Path, rows: Iterable[Mapping[str, object]]) -> None:
    """Escritura estable a CSV; el header es la unión de claves en orden de aparición."""
    rows_list = list(rows)
    path.parent.mkdir(parents=True, exist_ok=True)

    if not rows_list:
        path.write_text("", encoding="utf-8")
        return

    fieldnames: list[str] = []
    for row in rows_list:
        fieldnames.extend(k for k in row if k not in fieldnames)

    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows_list)
