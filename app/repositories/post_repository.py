import logging
from abc import ABC, abstractmethod
from typing import Optional

from fastapi import Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.models.post import Post
from app.schemas.post import PostCreate, PostUpdate, PostResponse

logger = logging.getLogger(__name__)

# Диапазон колонки posts.id (INTEGER)
MIN_POST_ID = -2**31
MAX_POST_ID = 2**31 - 1


def _in_id_range(post_id: int) -> bool:
    return MIN_POST_ID <= post_id <= MAX_POST_ID


class StorageError(Exception):
    """Любая ошибка хранилища постов"""


class PostStore(ABC):
    """Хранилище постов. Обработчики HTTP работают только через этот интерфейс."""

    @abstractmethod
    async def fetch_by_id(self, post_id: int) -> Optional[PostResponse]:
        ...

    @abstractmethod
    async def fetch_all(self) -> list[PostResponse]:
        ...

    @abstractmethod
    async def search(
        self,
        title: Optional[str] = None,
        theme: Optional[str] = None,
        creator: Optional[str] = None,
    ) -> list[PostResponse]:
        """Пустой или отсутствующий фильтр не ограничивает выборку."""
        ...

    @abstractmethod
    async def create(self, post: PostCreate) -> PostResponse:
        """id всегда назначает хранилище."""
        ...

    @abstractmethod
    async def update(self, post: PostUpdate) -> PostResponse:
        ...

    @abstractmethod
    async def delete(self, post_id: int) -> None:
        """Удаление несуществующего поста ничего не делает."""
        ...


class SqlAlchemyPostStore(PostStore):
    """
    Реализация поверх синхронной сессии SQLAlchemy.
    Каждый вызов уходит в пул потоков, чтобы не блокировать event loop.
    """

    def __init__(self, db: Session):
        self.db = db

    async def fetch_by_id(self, post_id: int) -> Optional[PostResponse]:
        return await run_in_threadpool(self._fetch_by_id, post_id)

    async def fetch_all(self) -> list[PostResponse]:
        return await run_in_threadpool(self._search, None, None, None)

    async def search(self, title=None, theme=None, creator=None) -> list[PostResponse]:
        return await run_in_threadpool(self._search, title, theme, creator)

    async def create(self, post: PostCreate) -> PostResponse:
        return await run_in_threadpool(self._create, post)

    async def update(self, post: PostUpdate) -> PostResponse:
        return await run_in_threadpool(self._update, post)

    async def delete(self, post_id: int) -> None:
        await run_in_threadpool(self._delete, post_id)

    def _fetch_by_id(self, post_id: int):
        # id вне диапазона колонки не может существовать
        if not _in_id_range(post_id):
            return None
        try:
            post = self.db.get(Post, post_id)
        except SQLAlchemyError as exc:
            raise self._fail("чтения поста", exc)
        return PostResponse.model_validate(post) if post else None

    def _search(self, title, theme, creator):
        # Регистронезависимый поиск по подстроке (% и _ экранируются), фильтры объединяются через AND
        conditions = [
            column.icontains(value, autoescape=True)
            for column, value in ((Post.title, title), (Post.theme, theme), (Post.creator, creator))
            if value
        ]
        query = self.db.query(Post)
        if conditions:
            query = query.filter(and_(*conditions))

        try:
            posts = query.order_by(Post.id).all()
        except SQLAlchemyError as exc:
            raise self._fail("поиска постов", exc)
        return [PostResponse.model_validate(p) for p in posts]

    def _create(self, data: PostCreate):
        post = Post(**data.model_dump())
        try:
            self.db.add(post)
            self.db.commit()
            self.db.refresh(post)
        except SQLAlchemyError as exc:
            raise self._fail("создания поста", exc)

        logger.info(f"📝 Пост {post.id} создан")
        return PostResponse.model_validate(post)

    def _update(self, data: PostUpdate):
        if not _in_id_range(data.id):
            raise StorageError(f"Пост {data.id} не существует")
        try:
            post = self.db.get(Post, data.id)
            if post is None:
                raise StorageError(f"Пост {data.id} не существует")

            # Полная замена изменяемых полей
            for field, value in data.model_dump(exclude={"id"}).items():
                setattr(post, field, value)
            self.db.commit()
            self.db.refresh(post)
        except SQLAlchemyError as exc:
            raise self._fail("обновления поста", exc)

        logger.info(f"✏️ Пост {post.id} обновлён")
        return PostResponse.model_validate(post)

    def _delete(self, post_id: int):
        if not _in_id_range(post_id):
            return
        try:
            deleted = self.db.query(Post).filter(Post.id == post_id).delete()
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("удаления поста", exc)

        if deleted:
            logger.info(f"❌ Пост {post_id} удалён")

    def _fail(self, action: str, exc: SQLAlchemyError) -> StorageError:
        self.db.rollback()
        logger.error(f"⚠️ Ошибка {action}: {exc}")
        return StorageError(f"Ошибка {action}")


def get_post_store(db: Session = Depends(get_db)) -> PostStore:
    return SqlAlchemyPostStore(db)
