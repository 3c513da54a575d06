from sqlalchemy import BigInteger, Column, Integer, String, Text

from ..database import Base

MAX_TITLE_LENGTH = 500
MAX_AUTHOR_LENGTH = 255
# Upper bound of a signed 64-bit BIGINT, also the SQLite INTEGER limit
MAX_POST_ID = 2**63 - 1

# SQLite only autoincrements a plain INTEGER primary key
PostId = BigInteger().with_variant(Integer(), "sqlite")


class Post(Base):
    """SQLAlchemy model representing a blog post.

    Attributes:
        id (int): Unique post identifier, assigned by the database on first flush.
        title (str): Post title, max 500 characters.
        content (str): Full post content (unbounded text).
        author (str | None): Free-form author name, optional.
    """

    __tablename__ = "posts"

    id = Column(
        PostId,
        primary_key=True,
        autoincrement=True,
        index=True,
        doc="Unique post identifier",
    )
    title = Column(
        String(MAX_TITLE_LENGTH),
        nullable=False,
        doc="Post title with maximum 500 characters",
    )
    content = Column(
        Text,
        nullable=False,
        doc="Full post content",
    )
    author = Column(
        String(MAX_AUTHOR_LENGTH),
        nullable=True,
        doc="Name of the post author",
    )

    def __repr__(self) -> str:
        """Return the formal string representation for debugging."""
        title_value = getattr(self, "title", None)
        if isinstance(title_value, str) and title_value:
            title_repr = title_value[:30] + "..." if len(title_value) > 30 else title_value
        else:
            title_repr = ""
        return f"<Post(id={self.id}, title={title_repr!r}, author={self.author!r})>"

    def update(self, title: str, content: str, author: str | None) -> None:
        """Replace title, content and author in one step.

        The three attributes are marked dirty together, so the unit of work
        writes them in a single UPDATE when the surrounding transaction flushes.
        """
        self.title = title
        self.content = content
        self.author = author
