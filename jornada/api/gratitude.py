from fastapi import APIRouter, Depends
from pydantic import BaseModel

from jornada.core.errors import NotFoundError
from jornada.core.storage import DurableStore, get_store
from jornada.features.gratitude.service import GratitudeJournal

router = APIRouter()


class GratitudeBody(BaseModel):
    text: str


@router.get("/v1/gratitude")
def list_gratitude(store: DurableStore = Depends(get_store)):
    return {"gratitude_by_date": GratitudeJournal(store).get_all()}


@router.put("/v1/gratitude/{day}")
def put_gratitude(day: str, body: GratitudeBody, store: DurableStore = Depends(get_store)):
    note = GratitudeJournal(store).set_entry(day, body.text)
    return {"date": day, "text": note}


@router.delete("/v1/gratitude/{day}")
def delete_gratitude(day: str, store: DurableStore = Depends(get_store)):
    if not GratitudeJournal(store).remove_entry(day):
        raise NotFoundError(f"No gratitude note for {day}")
    return {"deleted": True}
