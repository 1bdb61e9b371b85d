"""
Security utilities
Handles JWT token creation and verification for recorders and administrators
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt

from aquamonitor.config import settings

ROLE_ADMIN = "admin"
ROLE_RECORDER = "recorder"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller; subject becomes the recorder of a measurement"""
    subject: str
    role: str = ROLE_RECORDER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def create_principal_token(subject: str, role: str = ROLE_RECORDER, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a token identifying a recorder (or administrator)
    """
    if role not in (ROLE_ADMIN, ROLE_RECORDER):
        raise ValueError(f"Unknown role: {role}")
    return create_access_token({"sub": subject, "role": role}, expires_delta)


def verify_token(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token
    Returns token payload if valid, None if invalid
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return payload
    except JWTError:
        return None
