from __future__ import annotations

from .builder import build_payload
from .render import render_text

__all__ = ["build_payload", "render_text"]
