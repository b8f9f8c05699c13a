from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from jornada.core.storage import DurableStore, get_store
from jornada.features.backup.auto_backup import get_last_backup_at, run_auto_backup
from jornada.features.backup.manual import export_backup, import_backup, render_backup_text
from jornada.features.backup.restore import has_auto_backup, restore_auto_backup_now

router = APIRouter()


class ImportBody(BaseModel):
    text: str = ""


@router.get("/v1/backup/auto")
def get_auto_backup_status(store: DurableStore = Depends(get_store)):
    return {
        "has_auto_backup": has_auto_backup(store),
        "last_backup_at": get_last_backup_at(store),
    }


@router.post("/v1/backup/auto/run")
def run_auto_backup_now(store: DurableStore = Depends(get_store)):
    """Cadence-gated: only writes when the last backup is old enough."""
    written = run_auto_backup(store)
    return {"written": written, "last_backup_at": get_last_backup_at(store)}


@router.post("/v1/backup/auto/restore")
def restore_auto_backup(store: DurableStore = Depends(get_store)):
    return restore_auto_backup_now(store).to_dict()


@router.get("/v1/backup/export")
def export_manual_backup(
    include_profile: bool = Query(True),
    store: DurableStore = Depends(get_store),
):
    payload = export_backup(store)
    return {
        "payload": payload.to_export_dict(include_profile),
        "text": render_backup_text(payload, include_profile),
    }


@router.post("/v1/backup/import")
def import_manual_backup(body: ImportBody, store: DurableStore = Depends(get_store)):
    """Replace local progress with a pasted backup; rejects bad input with invalid_backup."""
    return asdict(import_backup(store, body.text))
