from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, computed_field

from blogsite.services.storage import public_url


class UserCreate(BaseModel):
    email: EmailStr
    # bcrypt only looks at the first 72 bytes.
    password: str = Field(min_length=1, max_length=72)


class UserRead(BaseModel):
    id: str
    email: EmailStr
    profile_image: str
    created_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def profile_image_url(self) -> str:
        return public_url(self.profile_image)
