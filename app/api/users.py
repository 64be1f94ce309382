import logging
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import or_
from sqlalchemy.orm import Session
from app.core.db import get_db
from app.core.security import hash_password, verify_password, issue_token
from app.models.user import User

router = APIRouter()

logger = logging.getLogger(__name__)


class AuthorRegister(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class Credentials(BaseModel):
    email: str
    password: str


class AuthorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    username: str


@router.post("/register", response_model=AuthorResponse, status_code=201)
def register(data: AuthorRegister, db: Session = Depends(get_db)):
    """Регистрирует автора блога. Email и имя должны быть свободны."""
    taken = db.query(User).filter(or_(User.email == data.email, User.username == data.username)).first()
    if taken:
        field = "email" if taken.email == data.email else "имя"
        raise HTTPException(status_code=400, detail=f"Это {field} уже занято другим автором")

    author = User(username=data.username, email=data.email, password_hash=hash_password(data.password))
    db.add(author)
    db.commit()
    db.refresh(author)

    logger.info(f"✍️ Новый автор {author.username} (id={author.id})")
    return author


@router.post("/login", response_model=TokenResponse)
def login(data: Credentials, db: Session = Depends(get_db)):
    """Обменивает email и пароль на bearer-токен для API постов."""
    author = db.query(User).filter(User.email == data.email).first()

    if author is None or not verify_password(data.password, author.password_hash):
        logger.warning(f"🔒 Неудачный вход в блог для {data.email}")
        raise HTTPException(status_code=400, detail="Email или пароль не подходят")

    return TokenResponse(access_token=issue_token(author.email), username=author.username)
