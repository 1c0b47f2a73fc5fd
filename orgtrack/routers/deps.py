"""Service lookup and the CRUD routes shared by the collection routers."""
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, HTTPException, Query, Request

from orgtrack.services.registry import ServiceRegistry


def get_services(request: Request) -> ServiceRegistry:
    services = getattr(getattr(request.app, "state", None), "services", None)
    if not services:
        raise RuntimeError("Servicos nao configurados")
    return services


def found(view: Optional[Any], message: str) -> Any:
    """Translate a soft miss (None) into a 404."""
    if view is None:
        raise HTTPException(404, message)
    return view


def register_crud(router: APIRouter, attr: str, not_found: str, *, scoped: bool = True) -> None:
    """
    Attach list/create/get/patch/delete to ``router`` for the service named
    ``attr`` on the registry. Call it after the router's own fixed-path routes
    so that ``/{record_id}`` does not shadow them.
    """

    def _service(request: Request):
        return getattr(get_services(request), attr)

    if scoped:

        @router.get("")
        def list_records(request: Request, organization_id: str = Query(..., alias="organizationId")):
            return _service(request).get_all(organization_id)

    else:

        @router.get("")
        def list_records(request: Request):
            return _service(request).get_all()

    @router.post("", status_code=201)
    def create_record(request: Request, payload: dict = Body(...)):
        return _service(request).create(payload)

    @router.get("/{record_id}")
    def get_record(record_id: str, request: Request):
        return found(_service(request).get_by_id(record_id), not_found)

    @router.patch("/{record_id}")
    def update_record(record_id: str, request: Request, payload: dict = Body(...)):
        return found(_service(request).update(record_id, payload), not_found)

    @router.delete("/{record_id}")
    def delete_record(record_id: str, request: Request):
        if not _service(request).delete(record_id):
            raise HTTPException(404, not_found)
        return {"success": True}
