from pydantic import BaseModel, ConfigDict, Field, field_validator

from db.models.post import MAX_AUTHOR_LENGTH, MAX_TITLE_LENGTH, Post


class PostBase(BaseModel):
    title: str = Field(
        ...,
        min_length=1,
        max_length=MAX_TITLE_LENGTH,
        description="Post title up to 500 characters",
    )
    content: str = Field(..., min_length=1, description="Post content")
    author: str | None = Field(
        default=None,
        max_length=MAX_AUTHOR_LENGTH,
        description="Author name",
    )

    @field_validator("title", "content")
    @classmethod
    def reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("author")
    @classmethod
    def blank_author_is_none(cls, author: str | None) -> str | None:
        # HTML forms submit an empty string for an untouched input
        if author is None or not author.strip():
            return None
        return author


class PostSaveRequest(PostBase):
    """Fields needed to create a post."""


class PostUpdateRequest(PostBase):
    """Replacement values for an existing post."""

    id: int = Field(..., description="ID of the post to update")


class PostResponse(BaseModel):
    id: int = Field(..., description="Post ID")
    title: str = Field(..., description="Post title")
    content: str = Field(..., description="Post content")
    author: str | None = Field(None, description="Author name")

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, post: Post) -> "PostResponse":
        return cls.model_validate(post)
