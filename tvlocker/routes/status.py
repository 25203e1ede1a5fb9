# tvlocker/routes/status.py
from fastapi import APIRouter

from tvlocker.lifecycle import health

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health_check():
    return health()
