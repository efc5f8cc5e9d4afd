# schoolhub/schemas/auth_schemas.py
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RegisterRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = Field(default=None, alias="fullName")
    role: str = "STUDENT"
    parent_email: Optional[str] = Field(default=None, alias="parentEmail")


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdate(CamelModel):
    full_name: Optional[str] = Field(default=None, alias="fullName")
    avatar: Optional[str] = None
