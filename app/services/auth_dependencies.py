from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from jose import JWTError, jwt

from app.config import settings
from app.logging import get_logger

logger = get_logger(__name__)

DIRECTOR = "director"
HR_HEAD = "hr_head"
MANAGER = "manager"
EMPLOYEE = "employee"


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def require_user_auth(request: Request) -> dict:
    """Verify the bearer token and return the caller's identity.

    Returns a dict with employee_id and roles.
    """
    token = _bearer_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated", headers={"WWW-Authenticate": "Bearer"})
    try:
        payload = decode_access_token(token)
    except JWTError as exc:
        logger.info("Rejected access token: %s", exc)
        raise HTTPException(
            status_code=401, detail="Invalid or expired token", headers={"WWW-Authenticate": "Bearer"}
        ) from exc

    employee_id = payload.get("sub")
    if not employee_id:
        raise HTTPException(status_code=401, detail="Invalid token subject")
    roles = payload.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    return {"employee_id": str(employee_id), "roles": [str(role).lower() for role in roles]}


def require_role(*allowed: str):
    allowed_set = {role.lower() for role in allowed}

    def _dependency(auth: dict = Depends(require_user_auth)) -> dict:
        if not allowed_set.intersection(auth.get("roles", [])):
            raise HTTPException(status_code=403, detail="Forbidden")
        return auth

    return _dependency
