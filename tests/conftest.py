"""Фикстуры pytest."""

import os

import pytest

# Окружение задаётся до импорта модулей приложения
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-blog-pessoal-hs256")
os.environ.setdefault("ALGORITHM", "HS256")
os.environ.setdefault("ACCESS_TOKEN_EXPIRE_HOURS", "1")

from fastapi.testclient import TestClient

from main import app
from app.api.auth import get_current_user
from app.core.db import Base, SessionLocal, engine
from app.models.user import User
from app.repositories.post_repository import PostStore, StorageError, get_post_store
from app.schemas.post import PostResponse


class InMemoryPostStore(PostStore):
    """Хранилище в памяти. Запоминает вызовы, чтобы проверять отсутствие побочных эффектов."""

    def __init__(self):
        self.posts: dict[int, PostResponse] = {}
        self.next_id = 1
        self.calls: list[str] = []

    def add(self, **fields) -> PostResponse:
        post_id = fields.pop("id", self.next_id)
        post = PostResponse(id=post_id, **fields)
        self.posts[post_id] = post
        self.next_id = max(self.next_id, post_id + 1)
        return post

    async def fetch_by_id(self, post_id):
        self.calls.append("fetch_by_id")
        return self.posts.get(post_id)

    async def fetch_all(self):
        self.calls.append("fetch_all")
        return [self.posts[k] for k in sorted(self.posts)]

    async def search(self, title=None, theme=None, creator=None):
        self.calls.append("search")

        def matches(value, needle):
            return not needle or (value is not None and needle.lower() in value.lower())

        return [
            self.posts[k]
            for k in sorted(self.posts)
            if matches(self.posts[k].title, title)
            and matches(self.posts[k].theme, theme)
            and matches(self.posts[k].creator, creator)
        ]

    async def create(self, post):
        self.calls.append("create")
        return self.add(**post.model_dump())

    async def update(self, post):
        self.calls.append("update")
        if post.id not in self.posts:
            raise StorageError(f"Пост {post.id} не существует")
        self.posts[post.id] = PostResponse(**post.model_dump())
        return self.posts[post.id]

    async def delete(self, post_id):
        self.calls.append("delete")
        self.posts.pop(post_id, None)


class FailingPostStore(InMemoryPostStore):
    """Хранилище, у которого каждая операция падает."""

    async def fetch_by_id(self, post_id):
        raise StorageError("Ошибка чтения поста")

    async def fetch_all(self):
        raise StorageError("Ошибка поиска постов")

    async def search(self, title=None, theme=None, creator=None):
        raise StorageError("Ошибка поиска постов")

    async def create(self, post):
        raise StorageError("Ошибка создания поста")

    async def update(self, post):
        raise StorageError("Ошибка обновления поста")

    async def delete(self, post_id):
        raise StorageError("Ошибка удаления поста")


def fake_user():
    return User(id=1, username="tester", email="tester@example.com", password_hash="x")


@pytest.fixture
def store():
    return InMemoryPostStore()


@pytest.fixture
def client(store):
    """Авторизованный клиент поверх хранилища в памяти."""
    app.dependency_overrides[get_post_store] = lambda: store
    app.dependency_overrides[get_current_user] = fake_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(store):
    """Клиент без переопределения авторизации."""
    app.dependency_overrides[get_post_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def failing_client():
    app.dependency_overrides[get_post_store] = FailingPostStore
    app.dependency_overrides[get_current_user] = fake_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    """Чистая схема в in-memory SQLite."""
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(db):
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def db_client(db):
    """Клиент на реальной БД с зарегистрированным пользователем и bearer-токеном."""
    client = TestClient(app)
    client.post("/users/register", json={"username": "maria", "email": "maria@example.com", "password": "s3cret"})
    response = client.post("/users/login", json={"email": "maria@example.com", "password": "s3cret"})
    client.headers["Authorization"] = f"Bearer {response.json()['access_token']}"
    return client
