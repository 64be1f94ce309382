from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from app.api.auth import get_current_user
from app.models.user import User
from app.repositories.post_repository import PostStore, get_post_store
from app.schemas.post import PostCreate, PostUpdate, PostResponse
from app.services.validation import validate_payload, error_detail

router = APIRouter()


async def read_json(request: Request) -> Any:
    # Тело читается уже после проверки токена; невалидный JSON ловит validate_payload
    try:
        return await request.json()
    except ValueError:
        return None


@router.get("/id/{post_id}", response_model=PostResponse)
async def get_post_by_id(
    post_id: int,
    current_user: User = Depends(get_current_user),
    store: PostStore = Depends(get_post_store)
):
    """
    Возвращает пост по id.
    404, если такого поста нет.
    """
    post = await store.fetch_by_id(post_id)
    if post is None:
        raise HTTPException(status_code=404, detail="Пост не найден")
    return post


@router.get("", response_model=List[PostResponse])
async def get_all_posts(
    current_user: User = Depends(get_current_user),
    store: PostStore = Depends(get_post_store)
):
    """Все посты. 204, если постов нет."""
    posts = await store.fetch_all()
    if not posts:
        return Response(status_code=204)
    return posts


@router.get("/search", response_model=List[PostResponse])
async def search_posts(
    title: Optional[str] = Query(None, description="Часть заголовка"),
    theme: Optional[str] = Query(None, description="Часть описания темы"),
    creator: Optional[str] = Query(None, description="Часть имени автора"),
    current_user: User = Depends(get_current_user),
    store: PostStore = Depends(get_post_store)
):
    """
    Поиск постов по заголовку, теме и автору.
    Незаданный фильтр не ограничивает выборку. 204, если ничего не найдено.
    """
    posts = await store.search(title=title, theme=theme, creator=creator)
    if not posts:
        return Response(status_code=204)
    return posts


@router.post("", response_model=PostResponse, status_code=201)
async def create_post(
    request: Request,
    current_user: User = Depends(get_current_user),
    store: PostStore = Depends(get_post_store)
):
    """
    Создаёт пост. id из тела запроса игнорируется, его назначает хранилище.

        POST /posts
        {
            "title": "C#",
            "description": "Introdução ao C#",
            "photo": "URLFOTO"
        }
    """
    post, errors = validate_payload(PostCreate, await read_json(request))
    if errors:
        raise HTTPException(status_code=400, detail=error_detail(errors))
    return await store.create(post)


@router.put("", response_model=PostResponse)
async def update_post(
    request: Request,
    current_user: User = Depends(get_current_user),
    store: PostStore = Depends(get_post_store)
):
    """
    Полностью заменяет поля поста с указанным id.

        PUT /posts
        {
            "id": 5,
            "title": "Java",
            "description": "Introdução ao Java",
            "photo": "URLFOTO"
        }
    """
    post, errors = validate_payload(PostUpdate, await read_json(request))
    if errors:
        raise HTTPException(status_code=400, detail=error_detail(errors))
    return await store.update(post)


@router.delete("/{post_id}", status_code=204)
async def delete_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    store: PostStore = Depends(get_post_store)
):
    """Удаляет пост. Повторное удаление тоже возвращает 204."""
    await store.delete(post_id)
    return Response(status_code=204)
