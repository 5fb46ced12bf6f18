"""Request dependencies shared by the routers."""

from uuid import UUID

from fastapi import Header, HTTPException, status


async def require_user_id(x_user_id: str | None = Header(default=None)) -> UUID:
    """Resolve the caller from the ``X-User-Id`` header set by the gateway."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        return UUID(x_user_id)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="invalid X-User-Id"
        ) from exc


def bad_request(exc: ValueError) -> HTTPException:
    """Translate a service validation error into a 400 response."""
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def not_found(exc: LookupError) -> HTTPException:
    """Translate a missing resource into a 404 response."""
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
