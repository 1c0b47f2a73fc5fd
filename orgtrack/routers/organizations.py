from fastapi import APIRouter, Request

from orgtrack.routers.deps import found, get_services, register_crud

router = APIRouter(prefix="/api/organizations", tags=["organizations"])


@router.get("/{organization_id}/summary")
def organization_summary(organization_id: str, request: Request):
    return found(get_services(request).organizations.summary(organization_id), "Organizacao nao encontrada")


register_crud(router, "organizations", "Organizacao nao encontrada", scoped=False)
