# chatplatform/api/routers/admin.py
"""
Admin API routes. Every route requires an admin bearer token.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from chatplatform.api.deps import CurrentUser, get_db, require_admin
from chatplatform.api.schemas import ResetPasswordRequest, serialize_user
from chatplatform.auth import reset_password
from chatplatform.auth.service import MIN_PASSWORD_LENGTH
from chatplatform.core.exceptions import NotFoundError, ValidationError
from chatplatform.db import storage
from chatplatform.db.models import User
from chatplatform.services.file_service import file_service
from chatplatform.utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/stats")
async def get_stats(admin: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    """Platform-wide entity counts."""
    return storage.platform_stats(db)


@router.get("/users")
async def list_users(admin: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    users = db.query(User).order_by(User.created_at.desc()).all()
    counts = storage.user_project_counts(db, [u.id for u in users])
    return {"users": [serialize_user(u, project_count=counts[u.id]) for u in users]}


@router.put("/users/{user_id}/reset-password")
async def reset_user_password(
    user_id: str,
    request: ResetPasswordRequest,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    if not request.new_password or len(request.new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User")

    reset_password(db, user, request.new_password)
    logger.info(f"Admin {admin.id} reset the password of user {user.id}")
    return {"message": "Password reset successfully"}


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Delete a user with all of their projects and everything under them."""
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User")

    if user.id == admin.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete your own account")

    stored_files = storage.delete_user_cascade(db, user)
    file_service.remove_many(stored_files)

    logger.info(f"Admin {admin.id} deleted user {user.id}")
    return {"message": "User deleted successfully"}
