import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models.post import MAX_POST_ID, Post
from db.repositories.decorators import handle_db_errors, with_retry

logger = logging.getLogger(__name__)


class PostRepository:
    """Persistence access for posts, bound to one AsyncSession.

    The repository flushes but never commits; transaction boundaries belong
    to the caller.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @handle_db_errors("post")
    async def save(self, post: Post) -> Post:
        if post.id is None:
            self.session.add(post)
            await self.session.flush()
            await self.session.refresh(post)
            logger.info("Created new post with id %s", post.id)
            return post

        if post in self.session:
            await self.session.flush()
            logger.info("Saved post %s", post.id)
            return post

        merged = await self.session.merge(post)
        await self.session.flush()
        logger.info("Merged detached post %s", merged.id)
        return merged

    @with_retry(log_prefix="fetching post")
    async def find_by_id(self, post_id: int) -> Post | None:
        if post_id <= 0 or post_id > MAX_POST_ID:
            logger.warning("Invalid post_id: %s (out of range 1..%s)", post_id, MAX_POST_ID)
            return None

        post = await self.session.get(Post, post_id)
        if post is None:
            logger.info("Post with id %s not found", post_id)
        return post

    @with_retry(log_prefix="fetching all posts")
    async def find_all(self) -> list[Post]:
        stmt = select(Post).order_by(Post.id)
        res = await self.session.execute(stmt)
        return list(res.scalars().all())

    @handle_db_errors("post")
    async def delete(self, post: Post) -> None:
        await self.session.delete(post)
        await self.session.flush()
        logger.info("Deleted post with id %s", post.id)

    @with_retry(log_prefix="counting posts")
    async def count(self) -> int:
        stmt = select(func.count(Post.id))
        res = await self.session.execute(stmt)
        return int(res.scalar_one())
