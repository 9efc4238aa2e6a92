from __future__ import annotations
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pipeline_monitor import __version__

router = APIRouter()


@router.get("/health")
async def health() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse({"status": "ok", "version": __version__})
