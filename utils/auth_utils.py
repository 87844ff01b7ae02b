import os, jwt, logging
from datetime import datetime, timedelta
from fastapi import Depends, Header, HTTPException
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from db import get_session
from utils.crud_profile import get_profile_by_id, ProfileStoreError

logger = logging.getLogger("auth")

JWT_SECRET = os.getenv("JWT_SECRET", "dev_secret_change_me")
JWT_ALG = "HS256"
JWT_EXP_DAYS = int(os.getenv("JWT_EXP_DAYS", "7"))


class CurrentProfile(BaseModel):
    id: str
    full_name: str
    status: str
    role: str
    model_config = ConfigDict(from_attributes=True)


def create_token(sub: str, expires_delta: timedelta | None = None) -> str:
    now = datetime.utcnow()
    to_encode = {
        "sub": sub,
        "iat": now,
        "exp": now + (expires_delta or timedelta(days=JWT_EXP_DAYS)),
    }
    return jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALG)

def decode_token(token: str) -> dict:
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])


def get_current_profile(authorization: str | None = Header(default=None), db: Session = Depends(get_session)) -> CurrentProfile:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing token")
    token = authorization.split(" ", 1)[1]
    try:
        data = decode_token(token)
    except jwt.PyJWTError as e:
        logger.warning("Token decode failed: %s", e)
        raise HTTPException(status_code=401, detail=f"Invalid token: {e}")
    profile_id = data.get("sub")
    if not profile_id:
        raise HTTPException(status_code=401, detail="Token has no subject")
    try:
        profile = get_profile_by_id(db, profile_id)
    except ProfileStoreError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if not profile:
        logger.warning("Profile not found for id: %s", profile_id)
        raise HTTPException(status_code=401, detail=f"Profile not found for id: {profile_id}")
    return CurrentProfile.model_validate(profile)


def require_active_profile(current: CurrentProfile = Depends(get_current_profile)) -> CurrentProfile:
    if current.status == "pending":
        raise HTTPException(status_code=403, detail="Profile is pending approval")
    if current.status == "suspended":
        raise HTTPException(status_code=403, detail="Profile is suspended")
    return current


def require_admin(current: CurrentProfile = Depends(require_active_profile)) -> CurrentProfile:
    if current.role != "admin":
        raise HTTPException(status_code=403, detail="Not authorized")
    return current
