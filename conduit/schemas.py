import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

from conduit.config import settings


# --- Actor ---

class Actor(BaseModel):
    """Authenticated principal supplied by the upstream auth layer."""

    id: int
    model_config = ConfigDict(frozen=True)


# --- User ---

class UserCreate(BaseModel):
    email: str = Field(max_length=255)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)

    @field_validator("email")
    @classmethod
    def _lower_case_email(cls, value: str) -> str:
        return value.strip().lower()


# --- Tag ---

class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


# --- Comment ---

class CommentCreate(BaseModel):
    body: str = Field(min_length=1)


# --- Article ---

class ArticleCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    body: str
    tag_list: list[str] = []  # tag names, reconciled against existing tags


class ArticleUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=300)
    body: str | None = None
    tag_list: list[str] | None = None


# --- Pagination ---

class PaginationOptions(BaseModel):
    """
    1-based page number and page size.

    ``limit`` is clamped to ``settings.MAX_PAGE_SIZE`` regardless of
    the value supplied by the caller.
    """

    page: int = Field(1, ge=1)
    limit: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1)

    @field_validator("limit")
    @classmethod
    def _clamp_limit(cls, value: int) -> int:
        return min(value, settings.MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        """SQL OFFSET value computed from the current page and limit."""
        return (self.page - 1) * self.limit


class PaginatedResult(BaseModel):
    items: list  # ORM instances; serialisation belongs to the caller
    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def build(cls, items: list, total: int, options: PaginationOptions) -> "PaginatedResult":
        return cls(
            items=items,
            total=total,
            page=options.page,
            limit=options.limit,
            pages=math.ceil(total / options.limit) if total > 0 else 0,
        )
