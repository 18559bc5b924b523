from __future__ import annotations

import logging
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.core.config import SETTINGS
from learnpath.db.engine import get_optional_session
from learnpath.models.principal import Principal
from learnpath.repos.course_repo import InMemoryCourseRepo, seed_sample_course
from learnpath.repos.pg_progress_repo import PgProgressRepo
from learnpath.repos.progress_repo import InMemoryProgressRepo
from learnpath.repos.quiz_repo import InMemoryQuizRepo, seed_sample_quiz
from learnpath.services import token_service
from learnpath.services.errors import (
    ItemTypeError,
    LockedError,
    NotFoundError,
    ProgressError,
)
from learnpath.services.tracker import ProgressTracker

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/oauth/token")

# --- Module-level repo singletons ---
# Course and quiz content is read-only here.  Progress falls back to the
# in-memory repo when DATABASE_URL is not configured.
course_repo = InMemoryCourseRepo()
quiz_repo = InMemoryQuizRepo()
progress_repo = InMemoryProgressRepo()

if SETTINGS.seed_sample_course:
    seed_sample_course(course_repo)
    seed_sample_quiz(quiz_repo)


def require_user(
    raw_token: Annotated[str, Depends(oauth2_scheme)],
) -> Principal:
    """Extract and validate the JWT bearer token. Returns a Principal."""
    try:
        claims = token_service.decode_access_token(raw_token)
    except jwt.ExpiredSignatureError:
        logger.warning("Expired token rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    return Principal(
        user_id=claims["sub"],
        roles=frozenset(claims.get("roles", [])),
    )


def require_role(role: str):
    """Dependency factory: demand a specific role.

    Usage: Depends(require_role("admin"))
    """

    def _guard(
        principal: Annotated[Principal, Depends(require_user)],
    ) -> Principal:
        if not principal.has_role(role):
            logger.warning(
                "Access denied: user=%s missing role=%s",
                principal.user_id,
                role,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return principal

    return _guard


def get_tracker(
    session: Annotated[AsyncSession | None, Depends(get_optional_session)],
) -> ProgressTracker:
    if session is None:
        return ProgressTracker(course_repo, quiz_repo, progress_repo)
    return ProgressTracker(course_repo, quiz_repo, PgProgressRepo(session))


def to_http_error(exc: ProgressError) -> HTTPException:
    """Map a domain failure to the HTTP status the client sees."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, LockedError):
        return HTTPException(
            status_code=status.HTTP_423_LOCKED,
            detail="Complete previous items first",
        )
    if isinstance(exc, ItemTypeError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
