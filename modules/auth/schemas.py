from typing import Literal

from pydantic import Field

from schemas import ApiModel

Role = Literal["ADMIN", "MANAGER", "OPERATOR", "VIEWER"]


class LoginRequest(ApiModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserCreate(ApiModel):
    username: str = Field(min_length=1, max_length=150)
    password: str = Field(min_length=6)
    role: Role = "VIEWER"
