"""FastAPI dependencies for identity and membership checks."""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from meatup.config import settings
from meatup.database import get_db
from meatup.exceptions import UnauthorizedError
from meatup.models.user import User
from meatup.schemas.user import Identity
from meatup.services import access_service


def get_identity(request: Request) -> Identity:
    """Read the verified identity forwarded by the authenticating proxy.

    Raises 401 when the request carries no identity.
    """
    email = (request.headers.get(settings.IDENTITY_EMAIL_HEADER) or "").strip()
    if not email:
        raise UnauthorizedError("Unauthorized")
    return Identity(
        email=email,
        name=request.headers.get(settings.IDENTITY_NAME_HEADER) or None,
        picture=request.headers.get(settings.IDENTITY_PICTURE_HEADER) or None,
    )


def get_current_user(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> User:
    """The member behind the request, whatever their status."""
    return access_service.authenticate(db, identity)


def require_active_member(user: User = Depends(get_current_user)) -> User:
    """Require an activated membership (403 for invited members)."""
    access_service.require_active(user)
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Require the admin flag (403 otherwise)."""
    access_service.require_admin(user)
    return user
