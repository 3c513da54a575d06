from httpx import AsyncClient
import pytest

from core.exceptions import DatabaseError, EntityNotFoundError
from schemas.posts import PostResponse, PostSaveRequest, PostUpdateRequest
from services.post_service import PostService


def _response(post_id: int = 1) -> PostResponse:
    return PostResponse(id=post_id, title="Stored title", content="Stored content", author="Stored author")


@pytest.mark.unit
@pytest.mark.anyio
async def test_save_form_renders(client: AsyncClient):
    response = await client.get("/posts/save")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert 'action="/posts/save"' in response.text


@pytest.mark.unit
@pytest.mark.anyio
async def test_list_renders_posts(client: AsyncClient, monkeypatch):
    async def mock_find_all(self):
        return [_response(1), _response(2)]

    monkeypatch.setattr(PostService, "find_all", mock_find_all)

    response = await client.get("/posts")

    assert response.status_code == 200
    assert 'href="/posts/1"' in response.text
    assert 'href="/posts/2"' in response.text


@pytest.mark.unit
@pytest.mark.anyio
async def test_list_renders_empty_state(client: AsyncClient, monkeypatch):
    async def mock_find_all(self):
        return []

    monkeypatch.setattr(PostService, "find_all", mock_find_all)

    response = await client.get("/posts")

    assert response.status_code == 200
    assert "No posts yet." in response.text


@pytest.mark.unit
@pytest.mark.anyio
async def test_detail_renders_post(client: AsyncClient, monkeypatch):
    async def mock_find_by_id(self, post_id):
        return _response(post_id)

    monkeypatch.setattr(PostService, "find_by_id", mock_find_by_id)

    response = await client.get("/posts/5")

    assert response.status_code == 200
    assert "Stored title" in response.text
    assert 'action="/posts/delete/5"' in response.text


@pytest.mark.unit
@pytest.mark.anyio
async def test_detail_escapes_html(client: AsyncClient, monkeypatch):
    async def mock_find_by_id(self, post_id):
        return PostResponse(id=post_id, title="<script>x</script>", content="body", author=None)

    monkeypatch.setattr(PostService, "find_by_id", mock_find_by_id)

    response = await client.get("/posts/1")

    assert "<script>x</script>" not in response.text
    assert "&lt;script&gt;" in response.text


@pytest.mark.unit
@pytest.mark.anyio
async def test_detail_not_found(client: AsyncClient, monkeypatch):
    async def mock_find_by_id(self, post_id):
        raise EntityNotFoundError("Post", post_id)

    monkeypatch.setattr(PostService, "find_by_id", mock_find_by_id)

    response = await client.get("/posts/1")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Post with id 1 not found"
    assert body["error"]["type"] == "EntityNotFoundError"
    assert body["error"]["id"] == 1


@pytest.mark.unit
@pytest.mark.anyio
async def test_update_form_prefilled(client: AsyncClient, monkeypatch):
    async def mock_find_by_id(self, post_id):
        return _response(post_id)

    monkeypatch.setattr(PostService, "find_by_id", mock_find_by_id)

    response = await client.get("/posts/update/3")

    assert response.status_code == 200
    assert 'action="/posts/update/3"' in response.text
    assert 'value="Stored title"' in response.text
    assert "Stored content</textarea>" in response.text


@pytest.mark.unit
@pytest.mark.anyio
async def test_update_form_not_found(client: AsyncClient, monkeypatch):
    async def mock_find_by_id(self, post_id):
        raise EntityNotFoundError("Post", post_id)

    monkeypatch.setattr(PostService, "find_by_id", mock_find_by_id)

    response = await client.get("/posts/update/3")

    assert response.status_code == 404


@pytest.mark.unit
@pytest.mark.anyio
async def test_save_binds_form_and_redirects(client: AsyncClient, monkeypatch):
    captured: list[PostSaveRequest] = []

    async def mock_save(self, request):
        captured.append(request)
        return 10

    monkeypatch.setattr(PostService, "save", mock_save)

    response = await client.post("/posts/save", data={"title": "T", "content": "C", "author": "A"})

    assert response.status_code == 303
    assert response.headers["location"] == "/posts"
    assert captured == [PostSaveRequest(title="T", content="C", author="A")]


@pytest.mark.unit
@pytest.mark.anyio
async def test_save_blank_author_becomes_none(client: AsyncClient, monkeypatch):
    captured: list[PostSaveRequest] = []

    async def mock_save(self, request):
        captured.append(request)
        return 1

    monkeypatch.setattr(PostService, "save", mock_save)

    response = await client.post("/posts/save", data={"title": "T", "content": "C", "author": ""})

    assert response.status_code == 303
    assert captured[0].author is None


@pytest.mark.unit
@pytest.mark.anyio
@pytest.mark.parametrize(
    "form",
    [
        {"content": "C"},
        {"title": "T"},
        {"title": "x" * 501, "content": "C"},
        {"title": "   ", "content": "C"},
        {"title": "T", "content": " \n\t "},
    ],
)
async def test_save_rejects_invalid_form(client: AsyncClient, monkeypatch, form):
    async def mock_save(self, request):
        raise AssertionError("service must not be called")

    monkeypatch.setattr(PostService, "save", mock_save)

    response = await client.post("/posts/save", data=form)

    assert response.status_code == 422


@pytest.mark.unit
@pytest.mark.anyio
async def test_update_path_id_wins_over_form_id(client: AsyncClient, monkeypatch):
    captured: list[PostUpdateRequest] = []

    async def mock_update(self, request):
        captured.append(request)
        return request.id

    monkeypatch.setattr(PostService, "update", mock_update)

    response = await client.post(
        "/posts/update/4",
        data={"id": "99", "title": "T", "content": "C", "author": "A"},
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/posts/4"
    assert captured == [PostUpdateRequest(id=4, title="T", content="C", author="A")]


@pytest.mark.unit
@pytest.mark.anyio
async def test_update_not_found(client: AsyncClient, monkeypatch):
    async def mock_update(self, request):
        raise EntityNotFoundError("Post", request.id)

    monkeypatch.setattr(PostService, "update", mock_update)

    response = await client.post("/posts/update/8", data={"title": "T", "content": "C"})

    assert response.status_code == 404
    assert response.json()["error"]["id"] == 8


@pytest.mark.unit
@pytest.mark.anyio
async def test_delete_redirects_to_list(client: AsyncClient, monkeypatch):
    deleted: list[int] = []

    async def mock_delete(self, post_id):
        deleted.append(post_id)

    monkeypatch.setattr(PostService, "delete", mock_delete)

    response = await client.post("/posts/delete/6")

    assert response.status_code == 303
    assert response.headers["location"] == "/posts"
    assert deleted == [6]


@pytest.mark.unit
@pytest.mark.anyio
async def test_delete_not_found(client: AsyncClient, monkeypatch):
    async def mock_delete(self, post_id):
        raise EntityNotFoundError("Post", post_id)

    monkeypatch.setattr(PostService, "delete", mock_delete)

    response = await client.post("/posts/delete/6")

    assert response.status_code == 404


@pytest.mark.unit
@pytest.mark.anyio
async def test_database_error_maps_to_500(client: AsyncClient, monkeypatch):
    async def mock_find_all(self):
        raise DatabaseError()

    monkeypatch.setattr(PostService, "find_all", mock_find_all)

    response = await client.get("/posts")

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "database_error"


@pytest.mark.unit
@pytest.mark.anyio
async def test_non_integer_id_is_rejected(client: AsyncClient):
    response = await client.get("/posts/abc")

    assert response.status_code == 422
