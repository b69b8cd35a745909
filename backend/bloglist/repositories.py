"""Repository classes encapsulating database operations.

Each repository is small and focused on a single aggregate (users,
blogs). Repositories return SQLModel objects and perform
commits/refreshes where appropriate.
"""

from typing import List, Optional
from sqlmodel import Session, select
from sqlalchemy import func
from sqlalchemy.orm import selectinload
from . import models


class UserRepository:
    """CRUD operations for `User` objects."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, user: models.User) -> models.User:
        """Persist a new user and return the managed instance."""
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def get_by_username(self, username: str) -> Optional[models.User]:
        """Return a `User` by username or `None` if not found."""
        stmt = select(models.User).where(models.User.username == username)
        return self.session.exec(stmt).first()

    def get(self, user_id: int) -> Optional[models.User]:
        """Get a `User` by primary key."""
        return self.session.get(models.User, user_id)

    def list_all(self) -> List[models.User]:
        """Return every user with their blogs eagerly loaded."""
        stmt = select(models.User).options(selectinload(models.User.blogs)).order_by(models.User.id)
        return self.session.exec(stmt).all()


class BlogRepository:
    """CRUD operations for `Blog` records."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, blog: models.Blog) -> models.Blog:
        """Persist a new blog and return it with its generated id."""
        self.session.add(blog)
        self.session.commit()
        self.session.refresh(blog)
        return blog

    def list_all(self) -> List[models.Blog]:
        """Return all blogs in insertion order, owners eagerly loaded."""
        stmt = select(models.Blog).options(selectinload(models.Blog.user)).order_by(models.Blog.id)
        return self.session.exec(stmt).all()

    def count(self) -> int:
        """Number of stored blogs."""
        return self.session.exec(select(func.count()).select_from(models.Blog)).one()

    def get(self, blog_id: int) -> Optional[models.Blog]:
        """Fetch a blog by id."""
        return self.session.get(models.Blog, blog_id)

    def update(self, blog: models.Blog, changes: dict) -> models.Blog:
        """Apply `changes` to `blog` in a single commit."""
        for field, value in changes.items():
            setattr(blog, field, value)
        self.session.add(blog)
        self.session.commit()
        self.session.refresh(blog)
        return blog

    def delete(self, blog: models.Blog) -> None:
        self.session.delete(blog)
        self.session.commit()
