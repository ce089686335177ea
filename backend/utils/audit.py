from typing import Optional
from sqlalchemy.orm import Session
from models.log import Log

def write_log(db: Session, *, action, resource, status="SUCCESS", ip=None, meta=None, commit=True):
    # commit=False lets the caller keep the entry inside its own transaction
    entry = Log(action=action, resource=resource, status=status, ip=ip, meta=meta or {})
    db.add(entry)
    if commit:
        db.commit()
    return entry

def client_ip(request) -> Optional[str]:
    return request.client.host if request.client else None
