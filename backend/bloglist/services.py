"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate repositories
and domain rules. Services are intentionally thin: they validate input,
check ownership and persist aggregates via repositories. Failures are
raised as `errors.BlogListError` subclasses and never leave a partial
write behind.
"""

from datetime import datetime, timezone
import logging
from typing import List, Optional
from passlib.context import CryptContext
import jwt
from sqlmodel import Session
from . import models, repositories, schemas
from .config import TokenConfig
from .errors import Forbidden, InvalidCredentials, NotFound, Unauthorized, ValidationError

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 3
CONTENT_FIELDS = ('title', 'author', 'url')

logger = logging.getLogger("bloglist.services")


def hash_password(password: str) -> str:
    return PWD_CTX.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return PWD_CTX.verify(password, password_hash)


class AuthService:
    """Verify credentials and issue signed, time-bounded access tokens."""
    def __init__(self, session: Session, token_config: TokenConfig):
        self.session = session
        self.token_config = token_config
        self.user_repo = repositories.UserRepository(session)

    def login(self, username: str, password: str) -> schemas.TokenOut:
        """Return a token for valid credentials.

        Raises `InvalidCredentials` for both an unknown username and a
        wrong password so callers cannot probe for existing accounts.
        """
        user = self.user_repo.get_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            logger.info("login rejected")
            raise InvalidCredentials()
        return schemas.TokenOut(token=self.issue_token(user), username=user.username, user_id=user.id)

    def issue_token(self, user: models.User) -> str:
        expire = datetime.now(timezone.utc) + self.token_config.expires_in
        payload = {"user_id": user.id, "username": user.username, "exp": int(expire.timestamp())}
        return jwt.encode(payload, self.token_config.secret, algorithm=self.token_config.algorithm)


class UserService:
    """Registration and listing of users."""
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)

    def register(self, username: Optional[str], password: Optional[str], name: Optional[str] = None) -> models.User:
        """Create a new user with a hashed password.

        Both `username` and `password` must be at least three characters
        and the username must not be taken.
        """
        if not username or len(username) < MIN_USERNAME_LENGTH:
            raise ValidationError(f"username must be at least {MIN_USERNAME_LENGTH} characters long")
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"password must be at least {MIN_PASSWORD_LENGTH} characters long")
        if self.user_repo.get_by_username(username):
            raise ValidationError("username must be unique")
        user = models.User(username=username, name=name, password_hash=hash_password(password))
        return self.user_repo.create(user)

    def list_all(self) -> List[models.User]:
        return self.user_repo.list_all()


def _require_text(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    return value


def _check_likes(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError("likes must be a non-negative integer")
    if value > models.SQL_INT_MAX:
        raise ValidationError(f"likes must not exceed {models.SQL_INT_MAX}")
    return value


class BlogService:
    """Create, update, delete and list blogs.

    Creation and deletion need an authenticated `User`; deletion is
    restricted to the blog's owner. Updates that only touch `likes` are
    open to anyone, while edits to the content fields require the owner.
    """
    def __init__(self, session: Session):
        self.session = session
        self.blog_repo = repositories.BlogRepository(session)

    def list_all(self) -> List[models.Blog]:
        return self.blog_repo.list_all()

    def get(self, blog_id: int) -> models.Blog:
        # ids outside the column range cannot exist
        if not 1 <= blog_id <= models.SQL_INT_MAX:
            raise NotFound(f"blog not found: {blog_id}")
        blog = self.blog_repo.get(blog_id)
        if not blog:
            raise NotFound(f"blog not found: {blog_id}")
        return blog

    def create(self, user: Optional[models.User], payload: schemas.BlogIn) -> models.Blog:
        """Validate `payload` and store a new blog owned by `user`."""
        if user is None:
            raise Unauthorized()
        title = _require_text(payload.title, 'title')
        url = _require_text(payload.url, 'url')
        likes = 0 if payload.likes is None else _check_likes(payload.likes)
        blog = models.Blog(title=title, author=payload.author, url=url, likes=likes, user_id=user.id)
        created = self.blog_repo.create(blog)
        logger.info("blog %s created by user %s", created.id, user.id)
        return created

    def delete(self, user: Optional[models.User], blog_id: int) -> None:
        """Delete a blog owned by `user`.

        Raises `NotFound` when the id is unknown (including a repeated
        delete) and `Forbidden` when another user owns the blog.
        """
        if user is None:
            raise Unauthorized()
        blog = self.get(blog_id)
        if blog.user_id != user.id:
            logger.warning("user %s refused delete of blog %s owned by %s", user.id, blog.id, blog.user_id)
            raise Forbidden()
        self.blog_repo.delete(blog)
        logger.info("blog %s deleted by user %s", blog_id, user.id)

    def update(self, blog_id: int, payload: schemas.BlogUpdate, user: Optional[models.User] = None) -> models.Blog:
        """Apply the fields present in `payload` to an existing blog.

        Every check runs before the write, so the update is applied
        entirely or not at all.
        """
        blog = self.get(blog_id)
        changes = payload.model_dump(exclude_unset=True)
        if 'title' in changes:
            _require_text(changes['title'], 'title')
        if 'url' in changes:
            _require_text(changes['url'], 'url')
        if 'likes' in changes:
            _check_likes(changes['likes'])
        # clients echo back the whole blog when liking; only real changes count
        changes = {k: v for k, v in changes.items() if getattr(blog, k) != v}
        if any(field in changes for field in CONTENT_FIELDS):
            if user is None:
                raise Unauthorized()
            if blog.user_id != user.id:
                raise Forbidden()
        if not changes:
            return blog
        return self.blog_repo.update(blog, changes)
