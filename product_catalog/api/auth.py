"""
Authentication and caller identity dependencies
"""

from typing import Optional
from fastapi import Depends, Header, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt

from ..audit import AuditContext
from ..catalog import ProductCatalog
from ..config import get_config


# JWT Security
security = HTTPBearer(auto_error=False)

# Global product catalog instance, created on first use
_catalog: Optional[ProductCatalog] = None


# Dependency to get the product catalog
def get_catalog() -> ProductCatalog:
    global _catalog
    if _catalog is None:
        _catalog = ProductCatalog()
    return _catalog


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_user_id: Optional[str] = Header(None)
) -> Optional[str]:
    """User id from the bearer token, or the X-User-Id header when auth is disabled"""
    config = get_config()
    if not config.auth_enabled:
        return x_user_id

    if not credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        payload = jwt.decode(credentials.credentials, config.jwt_secret,
                             algorithms=[config.jwt_algorithm])
        user_id = payload.get("sub")
        if not user_id:
            raise HTTPException(status_code=401, detail="Invalid token")
        return user_id
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")


def get_audit_context(
    user_id: Optional[str] = Depends(get_current_user),
    x_workstation_id: Optional[str] = Header(None),
    x_program_id: Optional[str] = Header(None)
) -> AuditContext:
    """Identity stamped on every version the request appends"""
    return AuditContext.build(
        user_id=user_id,
        workstation_id=x_workstation_id,
        program_id=x_program_id,
    )
