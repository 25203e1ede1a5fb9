# tvlocker/routes/devices.py
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, StrictInt

from tvlocker.lifecycle import DeviceLifecycle
from tvlocker.routes.deps import get_lifecycle

router = APIRouter(prefix="/api", tags=["devices"])


class RegisterRequest(BaseModel):
    serial_number: str
    customer_name: str
    phone_number: str
    emi_term: StrictInt
    emi_start_date: str  # YYYY-MM-DD
    term_duration: StrictInt  # 7, 15 or 30


class ActivateRequest(BaseModel):
    activation_code: str


class TermOut(BaseModel):
    term: int
    lock_date: str
    activation_code: str


class RegisterResponse(BaseModel):
    success: bool
    message: str
    device_id: str
    terms: List[TermOut]


class ActivationResponse(BaseModel):
    success: bool
    message: str
    terms: List[TermOut]


@router.post("/register", response_model=RegisterResponse)
def register_device(req: RegisterRequest, lifecycle: DeviceLifecycle = Depends(get_lifecycle)):
    device_id, terms = lifecycle.register(
        serial_number=req.serial_number,
        customer_name=req.customer_name,
        phone_number=req.phone_number,
        emi_term=req.emi_term,
        emi_start_date=req.emi_start_date,
        term_duration=req.term_duration,
    )
    return RegisterResponse(success=True, message="Device registered successfully", device_id=device_id, terms=terms)


@router.post("/activate", response_model=ActivationResponse)
def activate_device(req: ActivateRequest, lifecycle: DeviceLifecycle = Depends(get_lifecycle)):
    terms = lifecycle.activate(req.activation_code)
    return ActivationResponse(success=True, message="Device activated successfully", terms=terms)


@router.get("/check", response_model=ActivationResponse)
def check_activation(serial_number: Optional[str] = None, lifecycle: DeviceLifecycle = Depends(get_lifecycle)):
    """
    Called by the TV on startup.  An inactive device is activated here
    without a code.
    """
    terms = lifecycle.check(serial_number)
    return ActivationResponse(success=True, message="Device activated successfully", terms=terms)
