from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, model_validator
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_identity
from backend.auth.identity import Identity
from backend.core.clock import Clock, get_clock
from backend.database import get_db
from backend.routes.schemas import OwnWindowResponse, PublicWindowResponse, WindowResponse
from backend.services.availability_manager import AvailabilityManager

router = APIRouter(tags=['availability'])


class CreateWindowRequest(BaseModel):
    start_time: datetime
    end_time: datetime

    @model_validator(mode='before')
    @classmethod
    def accept_camel_case(cls, data):
        # Older clients post startTime/endTime.
        if isinstance(data, dict):
            data = dict(data)
            if 'startTime' in data and 'start_time' not in data:
                data['start_time'] = data.pop('startTime')
            if 'endTime' in data and 'end_time' not in data:
                data['end_time'] = data.pop('endTime')
        return data


@router.post('', response_model=WindowResponse, status_code=status.HTTP_201_CREATED)
def create_window(
    data: CreateWindowRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    window = AvailabilityManager(db, clock).create_window(identity, data.start_time, data.end_time)
    return WindowResponse.model_validate(window)


@router.get('/professor/{professor_id}', response_model=list[PublicWindowResponse])
def list_available_windows(
    professor_id: int,
    after: datetime | None = Query(default=None),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    windows = AvailabilityManager(db, clock).list_available(identity, professor_id, after=after)
    return [PublicWindowResponse.model_validate(window) for window in windows]


@router.get('/my-availability', response_model=list[OwnWindowResponse])
def list_my_windows(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    windows = AvailabilityManager(db, clock).list_own(identity)
    return [OwnWindowResponse.model_validate(window) for window in windows]


@router.delete('/{window_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_window(
    window_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    AvailabilityManager(db, clock).delete_window(identity, window_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
