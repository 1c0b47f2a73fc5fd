from fastapi import APIRouter, Body, Request

from orgtrack.routers.deps import get_services, register_crud

router = APIRouter(prefix="/api/licenses", tags=["licenses"])


def _person_id(payload: dict) -> str:
    return str(payload.get("personId") or "")


@router.post("/{license_id}/assign")
def assign_license(license_id: str, request: Request, payload: dict = Body(...)):
    return {"success": get_services(request).licenses.assign_to_user(license_id, _person_id(payload))}


@router.post("/{license_id}/unassign")
def unassign_license(license_id: str, request: Request, payload: dict = Body(...)):
    return {"success": get_services(request).licenses.unassign_from_user(license_id, _person_id(payload))}


@router.put("/{license_id}/code")
def set_license_code(license_id: str, request: Request, payload: dict = Body(...)):
    return {"success": get_services(request).licenses.update_license_code(license_id, payload.get("licenseCode"))}


@router.put("/{license_id}/codes/{person_id}")
def set_individual_code(license_id: str, person_id: str, request: Request, payload: dict = Body(...)):
    licenses = get_services(request).licenses
    return {"success": licenses.update_individual_code(license_id, person_id, payload.get("code"))}


register_crud(router, "licenses", "Licenca nao encontrada")
