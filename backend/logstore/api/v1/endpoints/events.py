from fastapi import APIRouter, Depends, status

from logstore.api.v1.deps import get_manager
from logstore.schemas.event import EventAccepted, ModuleEvent
from logstore.services.log_manager import LogManager

router = APIRouter()


@router.post("/", response_model=EventAccepted, status_code=status.HTTP_202_ACCEPTED)
def receive_event(event_in: ModuleEvent, manager: LogManager = Depends(get_manager)):
    handled = manager.dispatch(event_in)
    return EventAccepted(event_name=event_in.event_name, kind=event_in.kind, handled=handled)
