"""Shared API dependencies for authentication and error translation."""

from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from gridchat.core.errors import ConflictError, DiscussionError, NotFoundError, ValidationError
from gridchat.core.security import decode_access_token
from gridchat.db.session import SessionLocal
from gridchat.schemas.profile import ProfileView
from gridchat.services.discussion import DiscussionStore

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

_store: DiscussionStore | None = None


def get_store() -> DiscussionStore:
    """Return the process-wide discussion store, creating it on first use."""
    global _store
    if _store is None:
        _store = DiscussionStore(SessionLocal)
    return _store


# Type alias for store dependency
StoreDep = Annotated[DiscussionStore, Depends(get_store)]


def get_current_profile(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    store: StoreDep,
) -> ProfileView:
    """Get the profile identified by the bearer token.

    Raises:
        HTTPException: If the token is invalid or the profile no longer exists.
    """
    try:
        profile_id = decode_access_token(credentials.credentials)
    except JWTError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err
    try:
        return store.get_profile(profile_id)
    except NotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Profile not found",
        ) from err


# Type alias for current profile dependency
CurrentProfileDep = Annotated[ProfileView, Depends(get_current_profile)]

_STATUS_BY_ERROR: dict[type[DiscussionError], int] = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
}


async def discussion_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Translate store errors into JSON responses."""
    status_code = status.HTTP_400_BAD_REQUEST
    for error_type, code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            status_code = code
            break
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DiscussionError, discussion_error_handler)
