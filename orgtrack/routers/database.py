"""Raw collection access: whole stored lists in, whole stored lists out."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, HTTPException, Request
from fastapi.responses import JSONResponse

from orgtrack.core.logging_factory import get_logger
from orgtrack.db.models import COLLECTIONS
from orgtrack.repositories.sql_storage import StorageError
from orgtrack.routers.deps import get_services

router = APIRouter(prefix="/api/database", tags=["database"])
logger = get_logger(__name__)


def _check_collection(collection: str) -> None:
    if collection not in COLLECTIONS:
        raise HTTPException(404, f"Colecao desconhecida: {collection}")


@router.get("")
def read_database(request: Request):
    return get_services(request).storage.read_all()


@router.get("/{collection}")
def read_collection(collection: str, request: Request):
    _check_collection(collection)
    return get_services(request).storage.read_collection(collection)


@router.post("/{collection}")
def write_collection(collection: str, request: Request, data: Any = Body(None)):
    _check_collection(collection)
    if not isinstance(data, list):
        return JSONResponse({"error": "Data must be an array"}, status_code=400)
    try:
        get_services(request).storage.replace_collection(collection, data)
    except StorageError as exc:
        logger.error("Error saving %s: %s", collection, exc)
        return JSONResponse({"error": f"Failed to save {collection}: {exc}"}, status_code=500)
    return {"success": True, "message": f"{collection} saved successfully"}
