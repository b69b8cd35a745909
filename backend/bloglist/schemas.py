"""Pydantic request/response schemas used by the API.

Request models leave every field optional where the service layer owns
validation, so a missing `title` is reported as a domain validation
error rather than a framework one.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class LoginIn(BaseModel):
    """Payload for the login endpoint."""
    username: str
    password: str


class TokenOut(BaseModel):
    """Login response. Serialised with `userId` on the wire."""
    model_config = ConfigDict(populate_by_name=True)

    token: str
    username: str
    user_id: int = Field(alias='userId')


class UserIn(BaseModel):
    """Registration payload."""
    username: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class OwnerOut(BaseModel):
    """Public identity of a blog's owner."""
    id: int
    username: str


class BlogSummaryOut(BaseModel):
    id: int
    title: str
    author: Optional[str] = None
    url: str
    likes: int


class BlogOut(BlogSummaryOut):
    user: Optional[OwnerOut] = None


class UserOut(BaseModel):
    id: int
    username: str
    name: Optional[str] = None
    blogs: List[BlogSummaryOut] = []


class BlogIn(BaseModel):
    """Blog creation payload.

    `likes` defaults to 0 when absent or null; `author` is optional;
    `title` and `url` are checked by `BlogService.create`.
    """
    title: Optional[str] = None
    author: Optional[str] = None
    url: Optional[str] = None
    likes: Optional[int] = None


class BlogUpdate(BaseModel):
    """Partial update. Only fields present in the request are applied.

    Unknown keys (clients often echo back `id` and `user`) are ignored.
    """
    title: Optional[str] = None
    author: Optional[str] = None
    url: Optional[str] = None
    likes: Optional[int] = None


class AuthorBlogsOut(BaseModel):
    author: Optional[str]
    blogs: int


class AuthorLikesOut(BaseModel):
    author: Optional[str]
    likes: int


class FavoriteBlogOut(BaseModel):
    title: str
    author: Optional[str] = None
    likes: int


class StatsOut(BaseModel):
    """Aggregate figures over every stored blog."""
    total_likes: int
    favorite_blog: Optional[FavoriteBlogOut] = None
    most_blogs: Optional[AuthorBlogsOut] = None
    most_likes: Optional[AuthorLikesOut] = None
