from sqlalchemy import Column, Integer, String, DateTime
from app.core.db import Base
from datetime import datetime, timezone


def _utcnow():
    return datetime.now(timezone.utc)


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(30), nullable=False, index=True)
    description = Column(String(100), nullable=True)
    theme = Column(String, nullable=True)        # описание темы
    creator = Column(String, nullable=True)      # имя автора
    photo = Column(String, nullable=True)        # URL фотографии
    created_at = Column(DateTime(timezone=True), default=_utcnow)
