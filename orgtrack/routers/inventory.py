from fastapi import APIRouter, Body, Query, Request

from orgtrack.routers.deps import found, get_services, register_crud

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.get("/low-stock")
def low_stock(request: Request, organization_id: str = Query(..., alias="organizationId")):
    return get_services(request).inventory.get_low_stock(organization_id)


@router.put("/{item_id}/quantity")
def set_quantity(item_id: str, request: Request, payload: dict = Body(...)):
    item = get_services(request).inventory.update_quantity(item_id, payload.get("quantity"))
    return found(item, "Item nao encontrado")


register_crud(router, "inventory", "Item nao encontrado")
