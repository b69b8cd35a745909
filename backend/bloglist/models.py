"""SQLModel data models.

This module defines the application's database tables using SQLModel.
A `User` owns any number of `Blog` rows through `Blog.user_id`.
"""

from typing import List, Optional
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, timezone

# largest value an INTEGER column can hold
SQL_INT_MAX = 2**63 - 1


class User(SQLModel, table=True):
    """A registered user.

    Fields:
    - `username`: unique login name
    - `name`: optional display name
    - `password_hash`: hashed password string (never store plaintext)
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, nullable=False, unique=True)
    name: Optional[str] = None
    password_hash: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    blogs: List['Blog'] = Relationship(back_populates='user')


class Blog(SQLModel, table=True):
    """A blog link added by a user.

    `user_id` is the owner and is set once, at creation.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    author: Optional[str] = None
    url: str
    likes: int = 0
    user_id: int = Field(foreign_key='user.id', index=True, nullable=False)
    user: Optional[User] = Relationship(back_populates='blogs')
