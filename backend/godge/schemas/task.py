from pydantic import BaseModel


class TaskOut(BaseModel):
    name: str
    description: str = ""
