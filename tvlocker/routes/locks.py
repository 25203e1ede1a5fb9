# tvlocker/routes/locks.py
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, StrictBool

from tvlocker.lifecycle import DeviceLifecycle
from tvlocker.routes.deps import get_lifecycle

router = APIRouter(prefix="/api", tags=["locks"])


class RemoteLockRequest(BaseModel):
    serial_number: str
    is_locked: StrictBool


class UnlockRequest(BaseModel):
    serial_number: str


@router.post("/remote-lock")
def set_remote_lock(req: RemoteLockRequest, lifecycle: DeviceLifecycle = Depends(get_lifecycle)):
    is_locked = lifecycle.set_remote_lock(req.serial_number, req.is_locked)
    return {
        "success": True,
        "message": f"Remote lock set to {str(is_locked).lower()}",
        "is_locked": is_locked,
    }


@router.get("/check-lock")
def check_remote_lock(serial_number: Optional[str] = None, lifecycle: DeviceLifecycle = Depends(get_lifecycle)):
    # polled by the TV on power-on
    return {"is_locked": lifecycle.check_lock(serial_number)}


@router.post("/unlock")
def unlock_device(req: UnlockRequest, lifecycle: DeviceLifecycle = Depends(get_lifecycle)):
    lifecycle.unlock(req.serial_number)
    return {"success": True, "message": "Device unlocked successfully"}
