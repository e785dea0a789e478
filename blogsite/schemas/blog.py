from datetime import datetime

from pydantic import BaseModel, Field, computed_field

from blogsite.schemas.auth import UserRead
from blogsite.services.storage import public_url


class CommentRead(BaseModel):
    id: str
    text: str
    replies: list[str] = Field(default_factory=list)


class BlogRead(BaseModel):
    id: str
    title: str
    description: str
    image: str | None
    created_by: str
    comments: list[CommentRead] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def image_url(self) -> str | None:
        return public_url(self.image) if self.image else None


class DashboardRead(BaseModel):
    user: UserRead
    blogs: list[BlogRead]
