from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Optional
from src.orchestration.controller import LifecycleController

router = APIRouter(prefix="/system", tags=["system"])

_controller: LifecycleController | None = None

class Health(BaseModel):
    status: str

class RelayStatus(BaseModel):
    phase: str
    creator: str
    connected: bool
    room_id: Optional[str]
    last_video_id: Optional[str]
    upload_check_enabled: bool

@router.get('/health', response_model=Health)
async def health():
    return Health(status='ok')

@router.get('/status', response_model=RelayStatus)
async def status():
    if _controller is None:
        raise HTTPException(503, "Relay not started")
    state = _controller.state.to_dict()
    return RelayStatus(
        creator=_controller.username,
        upload_check_enabled=_controller.poller is not None,
        **state,
    )

def set_controller(controller: LifecycleController | None):
    global _controller
    _controller = controller
