"""Run context, logging and process helpers."""

from .context import RunContext
from .logging import log_event
from .process import CommandResult, run_command

__all__ = ["CommandResult", "RunContext", "log_event", "run_command"]
