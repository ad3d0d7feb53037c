"""Vercel serverless entrypoint for the server directory API."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from server_directory.api.asgi import app  # noqa: E402

__all__ = ["app"]
