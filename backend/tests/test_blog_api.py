import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from bloglist import database, models
from bloglist.main import app

client = TestClient(app)

INITIAL_BLOGS = [
    {'title': 'HTML is easy', 'author': 'Test Author', 'url': 'http://example.com', 'likes': 5},
    {'title': 'Browser can execute only JavaScript', 'author': 'Test Author 2', 'url': 'http://example.com', 'likes': 10},
]


def blogs_in_db():
    with Session(database.engine) as s:
        return s.exec(select(models.Blog)).all()


def login(username, password):
    r = client.post('/api/login', json={'username': username, 'password': password})
    assert r.status_code == 200
    return {'Authorization': f"Bearer {r.json()['token']}"}


@pytest.fixture
def root(make_user, session):
    user = make_user("root", "sekret")
    for b in INITIAL_BLOGS:
        session.add(models.Blog(**b, user_id=user.id))
    session.commit()
    return user


@pytest.fixture
def headers(root):
    return login("root", "sekret")


def test_blogs_are_returned_as_json(root):
    r = client.get('/api/blogs')
    assert r.status_code == 200
    assert r.headers['content-type'].startswith('application/json')
    body = r.json()
    assert len(body) == len(INITIAL_BLOGS)
    assert all(b['id'] is not None for b in body)
    assert all(b['user'] == {'id': root.id, 'username': 'root'} for b in body)


def test_get_single_blog(root):
    first = client.get('/api/blogs').json()[0]
    r = client.get(f"/api/blogs/{first['id']}")
    assert r.status_code == 200
    assert r.json() == first
    assert client.get('/api/blogs/99999').status_code == 404


def test_create_blog_round_trip(root, headers):
    new_blog = {'title': 'New Blog Post', 'author': 'Test Author', 'url': 'http://example.com/new', 'likes': 3}
    r = client.post('/api/blogs', json=new_blog, headers=headers)
    assert r.status_code == 201
    created = r.json()
    assert created['id'] is not None
    listed = next(b for b in client.get('/api/blogs').json() if b['id'] == created['id'])
    for field in ('title', 'author', 'url', 'likes'):
        assert listed[field] == new_blog[field]
    assert listed['user'] == {'id': root.id, 'username': 'root'}
    assert len(blogs_in_db()) == len(INITIAL_BLOGS) + 1


def test_likes_default_to_zero(headers):
    r = client.post('/api/blogs', json={'title': 'No likes', 'author': 'A', 'url': 'http://x'}, headers=headers)
    assert r.status_code == 201
    assert r.json()['likes'] == 0
    r = client.post('/api/blogs', json={'title': 'Null likes', 'url': 'http://x', 'likes': None}, headers=headers)
    assert r.status_code == 201
    assert r.json()['likes'] == 0
    assert r.json()['author'] is None


@pytest.mark.parametrize('payload', [
    {'author': 'A', 'url': 'http://x'},
    {'title': 'No url', 'author': 'A'},
    {'title': '', 'url': 'http://x'},
    {'title': 'Blank url', 'url': '   '},
    {'title': 'Negative', 'url': 'http://x', 'likes': -1},
    {'title': 'Not a number', 'url': 'http://x', 'likes': 'many'},
])
def test_invalid_blog_is_rejected_with_400(headers, payload):
    r = client.post('/api/blogs', json=payload, headers=headers)
    assert r.status_code == 400
    assert 'error' in r.json()
    assert len(blogs_in_db()) == len(INITIAL_BLOGS)


@pytest.mark.parametrize('auth', [None, 'Bearer invalid.token.here', 'Basic cm9vdDpzZWtyZXQ='])
def test_create_without_valid_token_is_401(root, auth):
    hdrs = {'Authorization': auth} if auth else {}
    r = client.post('/api/blogs', json={'title': 'x', 'url': 'http://x'}, headers=hdrs)
    assert r.status_code == 401
    assert len(blogs_in_db()) == len(INITIAL_BLOGS)


def test_delete_by_creator_then_again_is_404(headers):
    target = blogs_in_db()[0]
    r = client.delete(f'/api/blogs/{target.id}', headers=headers)
    assert r.status_code == 204
    assert r.content == b''
    remaining = blogs_in_db()
    assert len(remaining) == len(INITIAL_BLOGS) - 1
    assert target.title not in [b.title for b in remaining]
    again = client.delete(f'/api/blogs/{target.id}', headers=headers)
    assert again.status_code == 404


def test_delete_by_other_user_is_403(root, make_user):
    make_user("mallory", "secret")
    other = login("mallory", "secret")
    target = blogs_in_db()[0]
    r = client.delete(f'/api/blogs/{target.id}', headers=other)
    assert r.status_code == 403
    assert len(blogs_in_db()) == len(INITIAL_BLOGS)


def test_delete_without_token_is_401(root):
    target = blogs_in_db()[0]
    assert client.delete(f'/api/blogs/{target.id}').status_code == 401
    assert len(blogs_in_db()) == len(INITIAL_BLOGS)


def test_like_is_open_to_anyone(root):
    blog = client.get('/api/blogs').json()[0]
    # the front-end echoes the whole blog back with likes bumped
    r = client.put(f"/api/blogs/{blog['id']}", json={**blog, 'likes': blog['likes'] + 1})
    assert r.status_code == 200
    assert r.json()['likes'] == blog['likes'] + 1
    stored = next(b for b in blogs_in_db() if b.id == blog['id'])
    assert stored.likes == blog['likes'] + 1
    assert stored.user_id == root.id


def test_content_edit_requires_owner(root, headers, make_user):
    blog = client.get('/api/blogs').json()[0]
    anonymous = client.put(f"/api/blogs/{blog['id']}", json={'title': 'Renamed'})
    assert anonymous.status_code == 401
    make_user("mallory", "secret")
    other = client.put(f"/api/blogs/{blog['id']}", json={'title': 'Renamed', 'likes': 99}, headers=login("mallory", "secret"))
    assert other.status_code == 403
    stored = next(b for b in blogs_in_db() if b.id == blog['id'])
    assert stored.title == blog['title']
    assert stored.likes == blog['likes']
    owner = client.put(f"/api/blogs/{blog['id']}", json={'title': 'Renamed'}, headers=headers)
    assert owner.status_code == 200
    assert owner.json()['title'] == 'Renamed'


def test_update_validation_and_missing_blog(root):
    blog = client.get('/api/blogs').json()[0]
    assert client.put(f"/api/blogs/{blog['id']}", json={'likes': -5}).status_code == 400
    assert client.put('/api/blogs/99999', json={'likes': 1}).status_code == 404
    assert client.put('/api/blogs/not-a-number', json={'likes': 1}).status_code == 400


def test_stats_endpoint(root, headers):
    client.post('/api/blogs', json={'title': 'Third', 'author': 'Test Author', 'url': 'http://x', 'likes': 1}, headers=headers)
    r = client.get('/api/blogs/stats')
    assert r.status_code == 200
    assert r.json() == {
        'total_likes': 16,
        'favorite_blog': {'title': 'Browser can execute only JavaScript', 'author': 'Test Author 2', 'likes': 10},
        'most_blogs': {'author': 'Test Author', 'blogs': 2},
        'most_likes': {'author': 'Test Author 2', 'likes': 10},
    }


def test_stats_on_empty_collection():
    r = client.get('/api/blogs/stats')
    assert r.status_code == 200
    assert r.json() == {'total_likes': 0, 'favorite_blog': None, 'most_blogs': None, 'most_likes': None}


def test_request_id_header_exists():
    r = client.get('/health')
    assert r.status_code == 200
    assert 'X-Request-ID' in r.headers
    echoed = client.get('/health', headers={'X-Request-ID': 'abc123'})
    assert echoed.headers['X-Request-ID'] == 'abc123'


HUGE = 10**20


@pytest.mark.parametrize('likes', [HUGE, 2**63])
def test_likes_beyond_integer_column_is_400(headers, likes):
    r = client.post('/api/blogs', json={'title': 't', 'url': 'http://x', 'likes': likes}, headers=headers)
    assert r.status_code == 400
    assert len(blogs_in_db()) == len(INITIAL_BLOGS)
    blog_id = blogs_in_db()[0].id
    r = client.put(f'/api/blogs/{blog_id}', json={'likes': likes})
    assert r.status_code == 400


def test_largest_storable_likes_is_accepted(headers):
    r = client.post('/api/blogs', json={'title': 't', 'url': 'http://x', 'likes': 2**63 - 1}, headers=headers)
    assert r.status_code == 201
    assert r.json()['likes'] == 2**63 - 1


@pytest.mark.parametrize('blog_id', [HUGE, 2**63, 0, -1])
def test_out_of_range_ids_are_404(headers, blog_id):
    assert client.get(f'/api/blogs/{blog_id}').status_code == 404
    assert client.delete(f'/api/blogs/{blog_id}', headers=headers).status_code == 404
    assert client.put(f'/api/blogs/{blog_id}', json={'likes': 1}).status_code == 404
    assert len(blogs_in_db()) == len(INITIAL_BLOGS)


def test_openapi_declares_bearer_scheme():
    schema = client.get('/openapi.json').json()
    schemes = schema['components']['securitySchemes']
    assert schemes['HTTPBearer'] == {'type': 'http', 'scheme': 'bearer'}
    post_blogs = schema['paths']['/api/blogs']['post']
    assert {'HTTPBearer': []} in post_blogs['security']
