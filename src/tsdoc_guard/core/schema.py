from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


def load_json(path: Path) -> dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))


def schema_errors(payload: object, schema_path: Path) -> list[str]:
    schema = load_json(schema_path)
    validator = jsonschema.Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(payload), key=lambda e: list(e.absolute_path))
    rows: list[str] = []
    for err in errors:
        where = "/".join(str(p) for p in err.absolute_path) or "<root>"
        rows.append(f"{where}: {err.message}")
    return rows
