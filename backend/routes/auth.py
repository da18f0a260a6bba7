# backend/routes/auth.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session

from database import get_db
from schemas import user as schemas
from services.cart import discard_billing_session
from store import Store, get_store
from utils.audit import write_log
from utils.tokenJWT import create_access_token, find_user, get_current_user, capabilities_for

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


# Log in with one of the fixed usernames; any password is accepted
@router.post("/login", response_model=schemas.Token)
def login(
    payload: schemas.UserLogin,
    request: Request,
    db: Session = Depends(get_db),
    store: Store = Depends(get_store),
):
    user = find_user(payload.username)
    ip = request.client.host if request.client else None

    if user is None:
        logger.warning("Rejected login for unknown username %r", payload.username)
        write_log(db, username=None, action="LOGIN", resource="auth",
                  status="FAIL", ip=ip, meta={"username": payload.username})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail='Invalid username. Try "admin" or "staff"')

    # The session survives restarts until an explicit logout
    store.save_session(user)
    access_token = create_access_token(data={"sub": user.username, "role": user.role})

    write_log(db, username=user.username, action="LOGIN", resource="auth",
              status="SUCCESS", ip=ip, meta={"role": user.role})

    return {"access_token": access_token, "token_type": "bearer", "user": user}


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    request: Request,
    db: Session = Depends(get_db),
    store: Store = Depends(get_store),
    current_user: schemas.User = Depends(get_current_user),
):
    store.clear_session()
    discard_billing_session(current_user.username)
    write_log(db, username=current_user.username, action="LOGOUT", resource="auth",
              status="SUCCESS", ip=request.client.host if request.client else None)


# Current user plus what the UI may show (Reports and Settings are admin-only)
@router.get("/me")
def me(current_user: schemas.User = Depends(get_current_user)):
    return {**current_user.model_dump(), "capabilities": sorted(capabilities_for(current_user))}
