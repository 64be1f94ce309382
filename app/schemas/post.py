from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class PostBase(BaseModel):
    # Лишние поля (в том числе id при создании) игнорируются
    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., min_length=1, max_length=30)
    description: Optional[str] = Field(None, max_length=100)
    theme: Optional[str] = None
    creator: Optional[str] = None
    photo: Optional[str] = None


class PostCreate(PostBase):
    pass


class PostUpdate(PostBase):
    id: int


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    theme: Optional[str] = None
    creator: Optional[str] = None
    photo: Optional[str] = None
