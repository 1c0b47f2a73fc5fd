from fastapi import APIRouter

from orgtrack.routers.deps import register_crud

router = APIRouter(prefix="/api/people", tags=["people"])

register_crud(router, "people", "Pessoa nao encontrada")
