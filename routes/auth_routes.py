# auth_routes.py
from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from datetime import datetime, timedelta
import logging
import bcrypt
import jwt as pyjwt
import pytz
from typing import Optional

import config
from models.enums import UserRole
from models.user import User, UserCreate, LoginRequest, TokenResponse
from services.errors import NotFound
from services.workflow import WorkflowService, get_workflow

router = APIRouter(tags=["Authentication"])
security = HTTPBearer()
logger = logging.getLogger(__name__)


# -------------------- Password utils -------------------- #
def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode(), hashed.encode())


# -------------------- JWT -------------------- #
def create_jwt(uid: str, role: UserRole) -> str:
    payload = {
        "sub": uid,
        "role": role.value,
        "exp": datetime.now(pytz.utc) + timedelta(minutes=config.JWT_EXPIRATION_MINUTES),
    }
    return pyjwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_jwt(token: str) -> Optional[dict]:
    try:
        return pyjwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except pyjwt.PyJWTError:
        return None


# -------------------- Dependency for the authenticated user -------------------- #
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    workflow: WorkflowService = Depends(get_workflow),
) -> User:
    payload = decode_jwt(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token")

    try:
        return workflow.get_user(payload["sub"])
    except NotFound:
        raise HTTPException(status_code=401, detail="User no longer exists")


# -------------------- Registration -------------------- #
@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, workflow: WorkflowService = Depends(get_workflow)):
    if workflow.find_user_by_email(user_data.email):
        raise HTTPException(status_code=400, detail="Email is already registered")

    user = workflow.register_user(
        fullname=user_data.fullname,
        role=user_data.role,
        email=user_data.email,
        barangay=user_data.barangay,
        password_hash=hash_password(user_data.password),
    )
    return TokenResponse(access_token=create_jwt(user.id, user.role), user=user)


# -------------------- Login -------------------- #
@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, workflow: WorkflowService = Depends(get_workflow)):
    found = workflow.find_user_by_email(credentials.email)
    if not found:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    user, password_hash = found
    if not password_hash or not verify_password(credentials.password, password_hash):
        logger.warning("[AUTH] Failed login for %s", credentials.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    logger.info("[AUTH] %s logged in", user.id)
    return TokenResponse(access_token=create_jwt(user.id, user.role), user=user)
