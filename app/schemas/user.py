from pydantic import BaseModel

from app.schemas.progress import CamelModel


class LoginRequest(CamelModel):
    username: str
    password: str
    selected_language: str


class LoginOut(CamelModel):
    username: str
    selected_language: str


class AccountSeed(BaseModel):
    username: str
    password: str
    language: str
