"""
main.py — FastAPI Application Entrypoint

Purpose:
- Initialize logging from settings.
- Register API routers.
- Provide `app` object used by ASGI server (uvicorn).

This file should stay free of business logic.

Run:
    uvicorn incomeview.main:app --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from incomeview import __version__
from incomeview.api.v1 import income_statement
from incomeview.core.config import get_settings
from incomeview.core.logging import configure_logging

# -----------------------------------------------------------------------------
# App Initialization
# -----------------------------------------------------------------------------

configure_logging(get_settings().LOG_LEVEL)

app = FastAPI(
    title="Income Statement Viewer",
    description="Sortable, filterable annual income statements from FMP",
    version=__version__,
)

# -----------------------------------------------------------------------------
# CORS (the table page is usually served from a different origin)
# -----------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# -----------------------------------------------------------------------------
# Router Registration
# -----------------------------------------------------------------------------

app.include_router(income_statement.router, prefix="/api/v1")

# -----------------------------------------------------------------------------
# Health Check
# -----------------------------------------------------------------------------

@app.get("/")
def root():
    return {"status": "ok", "message": "Income statement viewer running"}
