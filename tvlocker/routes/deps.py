# tvlocker/routes/deps.py
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from tvlocker.lifecycle import DeviceLifecycle
from tvlocker.store import DeviceStore


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_lifecycle(db: Session = Depends(get_db)) -> DeviceLifecycle:
    return DeviceLifecycle(DeviceStore(db))
