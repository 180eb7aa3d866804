# chatplatform/api/routers/auth.py
"""
Authentication API endpoints.
Provides /register, /login, /me and the admin bootstrap route.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from chatplatform.api.deps import CurrentUser, get_current_user, get_db
from chatplatform.api.schemas import CreateAdminRequest, LoginRequest, RegisterRequest, serialize_user
from chatplatform.auth import authenticate_user, create_admin, issue_token, register_user
from chatplatform.core.exceptions import AuthenticationError, NotFoundError
from chatplatform.db import storage
from chatplatform.db.models import User
from chatplatform.utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: Session = Depends(get_db)):
    """
    Register a new user account.

    **Request body:**
    - email: Valid email address
    - password: Minimum 6 characters
    - name: Minimum 2 characters

    **Errors:**
    - 400: Email already registered or validation failed
    """
    user = register_user(db, email=request.email, password=request.password, name=request.name)
    return {
        "message": "User registered successfully",
        "user": serialize_user(user),
        "token": issue_token(user),
    }


@router.post("/login")
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    """
    Login with email and password.

    Unknown email and wrong password produce the same 401 response.
    """
    try:
        user = authenticate_user(db, request.email, request.password)
    except AuthenticationError:
        logger.warning("Failed login attempt")
        raise

    logger.info(f"User logged in: {user.id}")
    return {
        "message": "Login successful",
        "user": serialize_user(user),
        "token": issue_token(user),
    }


@router.get("/me")
async def me(current_user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Current user with their project count."""
    user = db.get(User, current_user.id)
    if not user:
        raise NotFoundError("User")

    count = storage.user_project_counts(db, [user.id])[user.id]
    return {"user": serialize_user(user, project_count=count)}


@router.post("/create-admin", status_code=status.HTTP_201_CREATED)
async def create_admin_user(request: CreateAdminRequest, db: Session = Depends(get_db)):
    """
    Create an admin account. Requires the configured admin secret key;
    refused outright when no secret is configured.
    """
    user = create_admin(
        db,
        email=request.email,
        password=request.password,
        name=request.name,
        secret_key=request.secret_key,
    )
    logger.info(f"Admin account created: {user.id}")
    return {
        "message": "Admin user created successfully",
        "user": serialize_user(user),
        "token": issue_token(user),
    }
