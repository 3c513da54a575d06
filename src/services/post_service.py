import logging

from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import EntityNotFoundError
from db.models.post import Post
from db.repositories.post_repository import PostRepository
from db.utils import transactional
from schemas.posts import PostResponse, PostSaveRequest, PostUpdateRequest

logger = logging.getLogger(__name__)


class PostService:
    """Post use cases on top of a PostRepository.

    Write operations run inside one transaction each: the session is committed
    when the method returns and rolled back if it raises.
    """

    def __init__(self, repository: PostRepository) -> None:
        self.repository = repository

    @property
    def session(self) -> AsyncSession:
        return self.repository.session

    async def _get_or_raise(self, post_id: int) -> Post:
        post = await self.repository.find_by_id(post_id)
        if post is None:
            raise EntityNotFoundError("Post", post_id)
        return post

    @transactional
    async def save(self, request: PostSaveRequest) -> int:
        post = Post(title=request.title, content=request.content, author=request.author)
        saved = await self.repository.save(post)
        return saved.id

    @transactional
    async def update(self, request: PostUpdateRequest) -> int:
        post = await self._get_or_raise(request.id)
        # Dirty tracking writes the change on commit; no repository.save() needed
        post.update(request.title, request.content, request.author)
        logger.info("Updated post %s", post.id)
        return post.id

    async def find_by_id(self, post_id: int) -> PostResponse:
        post = await self._get_or_raise(post_id)
        return PostResponse.from_entity(post)

    async def find_all(self) -> list[PostResponse]:
        posts = await self.repository.find_all()
        return [PostResponse.from_entity(p) for p in posts]

    @transactional
    async def delete(self, post_id: int) -> None:
        post = await self._get_or_raise(post_id)
        await self.repository.delete(post)

    async def count(self) -> int:
        return await self.repository.count()
