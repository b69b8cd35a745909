"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the blog list backend.
Controllers are intentionally thin: they accept requests, delegate to
services, and return JSON responses. Domain errors raised by services
are mapped to status codes by a single exception handler.

Endpoints implemented:
- POST /api/login
- POST /api/users
- GET /api/users
- GET /api/blogs
- GET /api/blogs/stats
- GET /api/blogs/{id}
- POST /api/blogs
- DELETE /api/blogs/{id}
- PUT /api/blogs/{id}
- GET /health
"""

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session
from typing import List, Optional
import json
import logging
import time
import uuid
from .database import create_db_and_tables, get_session
from . import list_helper, models, services
from .auth import get_current_user, get_optional_user, get_token_config
from .config import TokenConfig, settings
from .errors import BlogListError
from .schemas import BlogIn, BlogOut, BlogUpdate, LoginIn, StatsOut, TokenOut, UserIn, UserOut

app = FastAPI(title="Blog List API")
logger = logging.getLogger("bloglist.api")
if not logging.getLogger().handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

# Wide-open CORS keeps the local front-end dev servers working without extra config.
if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    fields = {
        "request_id": req_id,
        "path": request.url.path,
        "method": request.method,
        "client": request.client.host if request.client else "unknown",
    }
    try:
        response = await call_next(request)
    except Exception:
        fields["duration_ms"] = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception("request_failed %s", json.dumps(fields, ensure_ascii=True))
        raise
    response.headers["X-Request-ID"] = req_id
    fields["status_code"] = response.status_code
    fields["duration_ms"] = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info("request_done %s", json.dumps(fields, ensure_ascii=True))
    return response


@app.exception_handler(BlogListError)
async def blog_list_error_handler(request: Request, exc: BlogListError):
    return JSONResponse(status_code=exc.status_code, content={'error': exc.message}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # malformed bodies are client errors like any other validation failure
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={'error': details or 'malformed request'})


def _owner_out(user: Optional[models.User]):
    if user is None:
        return None
    return {'id': user.id, 'username': user.username}


def _blog_out(blog: models.Blog, with_owner: bool = True) -> dict:
    out = {
        'id': blog.id,
        'title': blog.title,
        'author': blog.author,
        'url': blog.url,
        'likes': blog.likes,
    }
    if with_owner:
        out['user'] = _owner_out(blog.user)
    return out


def _user_out(user: models.User, with_blogs: bool = False) -> dict:
    out = {'id': user.id, 'username': user.username, 'name': user.name}
    if with_blogs:
        out['blogs'] = [_blog_out(b, with_owner=False) for b in user.blogs]
    return out


@app.post('/api/login', response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_session), token_config: TokenConfig = Depends(get_token_config)):
    """Authenticate a user and return a short-lived JWT token.

    The returned token carries `user_id` and `username` and is signed
    with the configured secret. Bad credentials give 401.
    """
    return services.AuthService(db, token_config).login(payload.username, payload.password)


@app.post('/api/users', status_code=201, response_model=UserOut)
def register(payload: UserIn, db: Session = Depends(get_session)):
    """Register a new user. Username and password need at least 3 characters."""
    user = services.UserService(db).register(payload.username, payload.password, payload.name)
    return _user_out(user, with_blogs=True)


@app.get('/api/users', response_model=List[UserOut])
def list_users(db: Session = Depends(get_session)):
    """List users together with the blogs they created."""
    return [_user_out(u, with_blogs=True) for u in services.UserService(db).list_all()]


@app.get('/api/blogs', response_model=List[BlogOut])
def list_blogs(db: Session = Depends(get_session)):
    """List every blog with its owner's id and username."""
    return [_blog_out(b) for b in services.BlogService(db).list_all()]


@app.get('/api/blogs/stats', response_model=StatsOut)
def blog_stats(db: Session = Depends(get_session)):
    """Aggregate figures (likes, favourite blog, top authors) over all blogs."""
    blogs = services.BlogService(db).list_all()
    return list_helper.summarize(blogs)


@app.get('/api/blogs/{blog_id}', response_model=BlogOut)
def get_blog(blog_id: int, db: Session = Depends(get_session)):
    return _blog_out(services.BlogService(db).get(blog_id))


@app.post('/api/blogs', status_code=201, response_model=BlogOut)
def create_blog(payload: BlogIn, db: Session = Depends(get_session), user: models.User = Depends(get_current_user)):
    """Create a blog owned by the authenticated user.

    `title` and `url` are required; `likes` defaults to 0.
    """
    blog = services.BlogService(db).create(user, payload)
    return _blog_out(blog)


@app.delete('/api/blogs/{blog_id}', status_code=204)
def delete_blog(blog_id: int, db: Session = Depends(get_session), user: models.User = Depends(get_current_user)):
    """Delete a blog. Only its creator may do this."""
    services.BlogService(db).delete(user, blog_id)
    return Response(status_code=204)


@app.put('/api/blogs/{blog_id}', response_model=BlogOut)
def update_blog(
    blog_id: int,
    payload: BlogUpdate,
    db: Session = Depends(get_session),
    user: Optional[models.User] = Depends(get_optional_user),
):
    """Update a blog.

    Anyone may change `likes`; changing `title`, `author` or `url`
    requires the creator's token.
    """
    blog = services.BlogService(db).update(blog_id, payload, user)
    return _blog_out(blog)


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}
