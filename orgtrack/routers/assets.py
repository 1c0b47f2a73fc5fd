from fastapi import APIRouter, Body, Query, Request

from orgtrack.routers.deps import get_services, register_crud

router = APIRouter(prefix="/api/assets", tags=["assets"])


@router.get("/available")
def available_assets(request: Request, organization_id: str = Query(..., alias="organizationId")):
    return get_services(request).assets.get_available(organization_id)


@router.post("/{asset_id}/assign")
def assign_asset(asset_id: str, request: Request, payload: dict = Body(...)):
    person_id = str(payload.get("personId") or "")
    return {"success": get_services(request).assets.assign_to_user(asset_id, person_id)}


@router.post("/{asset_id}/unassign")
def unassign_asset(asset_id: str, request: Request):
    return {"success": get_services(request).assets.unassign_from_user(asset_id)}


register_crud(router, "assets", "Ativo nao encontrado")
