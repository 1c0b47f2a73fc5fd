from fastapi import APIRouter, HTTPException, Request

from orgtrack.routers.deps import get_services, register_crud

router = APIRouter(prefix="/api/teams", tags=["teams"])


@router.get("/{team_id}/members")
def team_members(team_id: str, request: Request):
    services = get_services(request)
    if services.teams.get_by_id(team_id) is None:
        raise HTTPException(404, "Time nao encontrado")
    return services.teams.get_team_members(team_id)


@router.post("/{team_id}/members/{person_id}")
def add_member(team_id: str, person_id: str, request: Request):
    return {"success": get_services(request).teams.add_person(team_id, person_id)}


@router.delete("/{team_id}/members/{person_id}")
def remove_member(team_id: str, person_id: str, request: Request):
    return {"success": get_services(request).teams.remove_person(person_id, team_id)}


register_crud(router, "teams", "Time nao encontrado")
