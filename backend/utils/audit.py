import logging
from sqlalchemy.orm import Session
from models.log import Log

logger = logging.getLogger(__name__)

def write_log(db: Session, *, username, action, resource, status="SUCCESS", ip=None, meta=None):
    entry = Log(username=username, action=action, resource=resource, status=status, ip=ip, meta=meta or {})
    db.add(entry)
    db.commit()
    logger.info("%s %s/%s by %s", status, action, resource, username or "-")
