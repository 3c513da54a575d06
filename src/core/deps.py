from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from db.database import get_db
from db.repositories.post_repository import PostRepository
from services.post_service import PostService


def get_post_repository(db: Annotated[AsyncSession, Depends(get_db)]) -> PostRepository:
    """Build a repository bound to the request-scoped session."""
    return PostRepository(db)


def get_post_service(
    repository: Annotated[PostRepository, Depends(get_post_repository)],
) -> PostService:
    return PostService(repository)
