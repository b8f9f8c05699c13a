from fastapi import APIRouter, Depends

from jornada.core.storage import DurableStore, get_store
from jornada.features.lifecycle.service import on_launch, on_resume

router = APIRouter()


@router.post("/v1/lifecycle/launch")
def app_launched(store: DurableStore = Depends(get_store)):
    """Client cold start: one-time auto restore, then auto backup."""
    return on_launch(store).to_dict()


@router.post("/v1/lifecycle/resume")
def app_resumed(store: DurableStore = Depends(get_store)):
    """Client returned to the foreground."""
    return {"backup_written": on_resume(store)}
