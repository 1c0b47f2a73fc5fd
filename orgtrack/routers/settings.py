"""Settings page actions: export, import, restore the backup, clear everything."""
from __future__ import annotations

from fastapi import APIRouter, Body, HTTPException, Request
from fastapi.responses import JSONResponse

from orgtrack.routers.deps import get_services

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("/export")
def export_data(request: Request):
    snapshots = get_services(request).snapshots
    filename = snapshots.export_filename()
    return JSONResponse(
        snapshots.export_snapshot(),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import")
def import_data(request: Request, payload: dict = Body(...)):
    get_services(request).snapshots.import_snapshot(payload)
    return {"success": True, "message": "Dados importados com sucesso"}


@router.post("/restore-backup")
def restore_backup(request: Request):
    if not get_services(request).snapshots.restore_backup():
        raise HTTPException(404, "Nenhum backup encontrado")
    return {"success": True, "message": "Backup restaurado com sucesso"}


@router.post("/clear")
def clear_data(request: Request, confirm: bool = False):
    if not confirm:
        raise HTTPException(400, "Confirmacao obrigatoria: use confirm=true")
    get_services(request).snapshots.clear_all_data()
    return {"success": True, "message": "Todos os dados foram removidos"}


@router.get("/backup")
def backup_info(request: Request):
    return get_services(request).snapshots.backup_info()
