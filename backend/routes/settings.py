# backend/routes/settings.py
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from database import get_db
from schemas.shop import ShopSettings
from schemas.user import User
from store import Store, get_store
from utils.audit import write_log
from utils.tokenJWT import get_current_user, capability_required

router = APIRouter(tags=["Settings"])

# Shop identity, message templates, and backup / restore of the whole store


# Retrieve shop settings (needed by every user to print receipts)
@router.get("/settings", response_model=ShopSettings)
def get_settings(
    store: Store = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return store.get_settings()


# Replace shop settings (Admin only)
@router.put("/settings", response_model=ShopSettings)
def update_settings(
    payload: ShopSettings,
    request: Request,
    db: Session = Depends(get_db),
    store: Store = Depends(get_store),
    current_user: User = Depends(capability_required("settings:write")),
):
    store.save_settings(payload)

    write_log(
        db,
        username=current_user.username,
        action="SETTINGS_UPDATE",
        resource="settings",
        status="SUCCESS",
        ip=request.client.host if request.client else None,
        meta={"shop_name": payload.shop_name},
    )
    return store.get_settings()


# Download the full backup document
@router.get("/backup")
def download_backup(
    request: Request,
    db: Session = Depends(get_db),
    store: Store = Depends(get_store),
    current_user: User = Depends(capability_required("backup")),
):
    data = store.create_backup()
    filename = f"shopflow_backup_{datetime.now(timezone.utc).date().isoformat()}.json"

    write_log(db, username=current_user.username, action="BACKUP_CREATE", resource="backup",
              status="SUCCESS", ip=request.client.host if request.client else None)
    return Response(
        content=data,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# Restore from an uploaded backup document (raw JSON request body)
@router.post("/backup/restore")
async def restore_backup(
    request: Request,
    db: Session = Depends(get_db),
    store: Store = Depends(get_store),
    current_user: User = Depends(capability_required("backup")),
):
    ip = request.client.host if request.client else None
    try:
        raw = (await request.body()).decode("utf-8")
    except UnicodeDecodeError:
        raw = None

    if raw is None or not store.restore_backup(raw):
        write_log(db, username=current_user.username, action="BACKUP_RESTORE", resource="backup",
                  status="FAIL", ip=ip)
        raise HTTPException(status_code=400, detail="Failed to restore backup. Invalid file format.")

    write_log(db, username=current_user.username, action="BACKUP_RESTORE", resource="backup",
              status="SUCCESS", ip=ip, meta={"bytes": len(raw)})
    return {"message": "Restore successful"}
