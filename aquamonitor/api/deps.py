"""
Dependency injection utilities
Common dependencies for API endpoints
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from aquamonitor.core.security import ROLE_RECORDER, Principal, verify_token
from aquamonitor.services.monitoring import MonitoringService


# Bearer scheme for token authentication; tokens are minted with issue_token.py
bearer_scheme = HTTPBearer(
    auto_error=False,
    description="JWT issued out of band by the operator script issue_token.py",
)


def get_monitoring_service(request: Request) -> MonitoringService:
    """
    The MonitoringService built during application startup
    """
    service = getattr(request.app.state, "monitoring", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Monitoring service is not ready"
        )
    return service


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Principal:
    """
    Get current principal from JWT token
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    # Verify token
    payload = verify_token(credentials.credentials)
    if payload is None:
        raise credentials_exception

    # Extract subject
    subject = payload.get("sub")
    if not subject:
        raise credentials_exception

    return Principal(subject=str(subject), role=payload.get("role", ROLE_RECORDER))
