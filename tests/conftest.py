import pytest
from fastapi.testclient import TestClient

from biomes import schemas as biome_schemas
from biomes import service as biomes_service
from comments import schemas as comment_schemas
from comments import service as comments_service
from core import db
from fakes import InMemoryStore
from main import app
from posts import schemas as post_schemas
from posts import service as posts_service
from users import schemas as user_schemas
from users import service as users_service

VALID_PASSWORD = "Valid1Pass!"

BIOME_TEXTS = {
    "introduction": "Maior floresta tropical do mundo.",
    "general_characteristics": "Clima quente e umido, chuvas abundantes.",
    "natural_resources": "Madeira, minerios e biodiversidade.",
    "environmental_problems": "Desmatamento e queimadas.",
    "conservation": "Unidades de conservacao e terras indigenas.",
}


@pytest.fixture(autouse=True)
def _fast_password_hashing(monkeypatch):
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")


@pytest.fixture()
def store(monkeypatch):
    """
    Replace every repository function with the in-memory store.
    """
    in_memory = InMemoryStore()
    in_memory.install(monkeypatch)
    return in_memory


@pytest.fixture()
def upload_dir(tmp_path, monkeypatch):
    target = tmp_path / "img"
    monkeypatch.setenv("UPLOAD_DIR", str(target))
    return target


@pytest.fixture()
def client(store, upload_dir, monkeypatch):
    """
    TestClient over the real app; the DB pool lifecycle is a no-op.
    """

    async def _noop():
        return None

    monkeypatch.setattr(db, "init_pool", _noop)
    monkeypatch.setattr(db, "close_pool", _noop)
    with TestClient(app) as test_client:
        yield test_client


class _Builders:
    """
    Shortcuts that create rows through the services (and so through the store).
    """

    def __init__(self) -> None:
        self._users = 0

    async def user(self, name: str = "Ana", email: str | None = None, password: str = VALID_PASSWORD) -> dict:
        self._users += 1
        payload = user_schemas.UserCreateRequest(
            name=name,
            email=email or f"user{self._users}@example.com",
            password=password,
        )
        return await users_service.create_user(payload)

    async def biome(self, name: str = "Amazonia", **overrides) -> dict:
        payload = biome_schemas.BiomeCreateRequest(name=name, **{**BIOME_TEXTS, **overrides})
        return await biomes_service.create_biome(payload)

    async def post(self, author: dict, biome: dict | None = None, title: str = "Titulo", content: str = "Conteudo") -> dict:
        payload = post_schemas.PostCreateRequest(
            title=title,
            content=content,
            author_id=author["id"],
            biome_id=biome["id"] if biome else None,
        )
        return await posts_service.create_post(payload)

    async def comment(self, author: dict, post: dict, parent: dict | None = None, content: str = "Comentario") -> dict:
        payload = comment_schemas.CommentCreateRequest(
            content=content,
            post_id=post["id"],
            author_id=author["id"],
            parent_comment_id=parent["id"] if parent else None,
        )
        return await comments_service.create_comment(payload)


@pytest.fixture()
def make(store):
    return _Builders()


class _ApiBuilders:
    """
    The same shortcuts as `make`, but through HTTP. Return the JSON bodies.
    """

    def __init__(self, client: TestClient) -> None:
        self.client = client
        self._users = 0

    def _created(self, response) -> dict:
        assert response.status_code == 201, response.text
        return response.json()

    def user(self, name: str = "Ana", email: str | None = None) -> dict:
        self._users += 1
        body = {"name": name, "email": email or f"api{self._users}@example.com", "password": VALID_PASSWORD}
        return self._created(self.client.post("/usercreate", json=body))

    def biome(self, name: str = "Amazonia") -> dict:
        body = {
            "name": name,
            "introduction": BIOME_TEXTS["introduction"],
            "generalCharacteristics": BIOME_TEXTS["general_characteristics"],
            "naturalResources": BIOME_TEXTS["natural_resources"],
            "environmentalProblems": BIOME_TEXTS["environmental_problems"],
            "conservation": BIOME_TEXTS["conservation"],
        }
        return self._created(self.client.post("/biome", json=body))

    def post(self, author: dict, biome: dict | None = None, title: str = "Titulo") -> dict:
        body = {"title": title, "content": "Conteudo", "authorId": author["id"]}
        if biome is not None:
            body["biomeId"] = biome["id"]
        return self._created(self.client.post("/postcreate/", json=body))

    def comment(self, author: dict, post: dict, parent: dict | None = None, content: str = "Comentario") -> dict:
        body = {"content": content, "postId": post["id"], "authorId": author["id"]}
        if parent is not None:
            body["parentCommentId"] = parent["id"]
        return self._created(self.client.post("/commentcreate", json=body))


@pytest.fixture()
def api(client):
    return _ApiBuilders(client)
