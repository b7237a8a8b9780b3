"""HTTP glue shared by the domain routers.

The platform gateway authenticates the caller and forwards the resolved
identity as ``X-User-Id`` / ``X-User-Rank`` headers. Error kinds raised by
the core are mapped to status codes here.
"""

from dataclasses import dataclass

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError
from protean.integrations.fastapi import register_exception_handlers

from shared.errors import AuthorizationError, ConflictError, PersistenceError
from shared.ranks import Rank, parse_rank


@dataclass(frozen=True)
class Requester:
    user_id: str
    rank: Rank


def current_requester(
    x_user_id: str | None = Header(default=None),
    x_user_rank: str | None = Header(default=None),
) -> Requester:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing resolved identity")
    return Requester(user_id=x_user_id, rank=parse_rank(x_user_rank))


def _handler(status_code: int):
    async def handle(request: Request, exc):
        messages = getattr(exc, "messages", None) or {"_entity": [str(exc)]}
        return JSONResponse(status_code=status_code, content={"error": messages})

    return handle


def register_error_handlers(app: FastAPI) -> None:
    """Register Protean's handlers plus the marketplace error kinds."""
    register_exception_handlers(app)
    app.add_exception_handler(ObjectNotFoundError, _handler(404))
    app.add_exception_handler(ConflictError, _handler(409))
    app.add_exception_handler(AuthorizationError, _handler(403))
    app.add_exception_handler(PersistenceError, _handler(503))
