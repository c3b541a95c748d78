from pydantic import BaseModel


class RegisterRequest(BaseModel):
    username: str
    password: str


class RegisterOut(BaseModel):
    username: str
