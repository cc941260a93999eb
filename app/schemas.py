from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Response models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RequestBody(CamelModel):
    """Request bodies reject any field they do not declare."""

    model_config = ConfigDict(extra="forbid")


def _not_null(value):
    # Omitting a field leaves it unchanged; an explicit null is rejected.
    if value is None:
        raise ValueError("must not be null")
    return value


# --- User ---

class UserResponse(CamelModel):
    id: int
    email: str
    nickname: str
    image: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class RegisterBody(RequestBody):
    email: EmailStr
    nickname: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=8, max_length=72)


class LoginBody(RequestBody):
    email: EmailStr
    password: str = Field(min_length=1)


class UpdateMeBody(RequestBody):
    email: EmailStr | None = None
    nickname: str | None = Field(None, min_length=1, max_length=50)
    image: str | None = None

    @field_validator("email", "nickname")
    @classmethod
    def reject_null(cls, value):
        return _not_null(value)


class UpdatePasswordBody(RequestBody):
    password: str = Field(min_length=1)
    new_password: str = Field(min_length=8, max_length=72)


# --- Article ---

class CreateArticleBody(RequestBody):
    title: str = Field(min_length=1, max_length=100)
    content: str = Field(min_length=1)
    image: str | None = None


class UpdateArticleBody(RequestBody):
    title: str | None = Field(None, min_length=1, max_length=100)
    content: str | None = Field(None, min_length=1)
    image: str | None = None

    @field_validator("title", "content")
    @classmethod
    def reject_null(cls, value):
        return _not_null(value)


class ArticleResponse(CamelModel):
    id: int
    title: str
    content: str
    image: str | None = None
    user_id: int
    created_at: datetime
    updated_at: datetime | None = None


class ArticleWithLikes(ArticleResponse):
    like_count: int
    is_liked: bool | None = None


class ArticleListResponse(CamelModel):
    list: list[ArticleWithLikes]
    total_count: int


# --- Comment ---

class CreateCommentBody(RequestBody):
    content: str = Field(min_length=1)


class UpdateCommentBody(RequestBody):
    content: str | None = Field(None, min_length=1)

    @field_validator("content")
    @classmethod
    def reject_null(cls, value):
        return _not_null(value)


class CommentResponse(CamelModel):
    id: int
    content: str
    article_id: int
    user_id: int
    created_at: datetime
    updated_at: datetime | None = None


class CommentListResponse(CamelModel):
    list: list[CommentResponse]
    next_cursor: int | None = None


# --- Product ---

class CreateProductBody(RequestBody):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1)
    price: int = Field(ge=0)
    tags: list[str] = []
    images: list[str] = []


class UpdateProductBody(RequestBody):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=1)
    price: int | None = Field(None, ge=0)
    tags: list[str] | None = None
    images: list[str] | None = None

    @field_validator("name", "description", "price", "tags", "images")
    @classmethod
    def reject_null(cls, value):
        return _not_null(value)


class ProductResponse(CamelModel):
    id: int
    name: str
    description: str
    price: int
    tags: list[str] = []
    images: list[str] = []
    user_id: int
    created_at: datetime
    updated_at: datetime | None = None


class ProductWithFavorites(ProductResponse):
    favorite_count: int
    is_favorited: bool | None = None


class ProductListResponse(CamelModel):
    list: list[ProductWithFavorites]
    total_count: int


# --- Image ---

class ImageUploadResponse(CamelModel):
    url: str
