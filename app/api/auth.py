from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from app.core.db import get_db
from app.core.security import read_token_subject
from app.models.user import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="users/login")

def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    email = read_token_subject(token)
    if email is None:
        raise HTTPException(status_code=401, detail="Некорректный токен", headers={"WWW-Authenticate": "Bearer"})

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise HTTPException(status_code=401, detail="Автор не найден", headers={"WWW-Authenticate": "Bearer"})

    return user
