"""
ASGI entrypoint: `uvicorn api.index:app`.

The form service keeps its own event loop running for the lifetime of the
process, so run this as a single long-lived worker.
"""

from __future__ import annotations

import sys
from pathlib import Path

_SRC = Path(__file__).resolve().parents[1] / "src"
if _SRC.is_dir() and str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from report_issue.api.main import create_app  # noqa: E402

app = create_app()
