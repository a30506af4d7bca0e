from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime


class UserRegister(BaseModel):
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)

class UserLogin(BaseModel):
    username: str
    password: str

class UserRead(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    username: str
    is_admin: bool
    created_at: datetime

class Token(BaseModel):
    access_token: str
    token_type: str
    user: Optional[UserRead] = None
