"""Serverless entry: serves the lecture API under both ``/api`` and ``/``."""
import os
import sys

from fastapi import FastAPI
from fastapi.responses import JSONResponse

API_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "apps", "api")
if API_DIR not in sys.path:
    sys.path.append(API_DIR)

try:
    from app.main import app as lectures_app  # type: ignore
except Exception as exc:  # pragma: no cover
    import_error = f"{type(exc).__name__}: {exc}"
    print("Lecture API import failed:", import_error, file=sys.stderr)
    app = FastAPI(title="Lecture Tracker (import error)")

    @app.api_route("/{path:path}", methods=["GET", "POST", "PATCH"])
    async def unavailable(path: str) -> JSONResponse:
        return JSONResponse(status_code=500, content={"error": import_error})
else:
    app = FastAPI(title="Lecture Tracker")
    app.mount("/api", lectures_app)
    app.mount("/", lectures_app)
