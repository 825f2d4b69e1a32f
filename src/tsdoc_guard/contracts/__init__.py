from __future__ import annotations

from pathlib import Path

from ..core.schema import schema_errors
from ..errors import ScriptError
from ..exit_codes import ERR_INTERNAL

CONTRACTS_DIR = Path(__file__).resolve().parent
REPORT_SCHEMA = CONTRACTS_DIR / "report.schema.json"


def validate_report_payload(payload: dict[str, object]) -> None:
    errors = schema_errors(payload, REPORT_SCHEMA)
    if errors:
        raise ScriptError(f"report payload violates schema: {'; '.join(errors)}", ERR_INTERNAL, "contract_error")


__all__ = ["REPORT_SCHEMA", "validate_report_payload"]
