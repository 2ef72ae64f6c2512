from __future__ import annotations
from pydantic import BaseModel, Field
import uuid

class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    # NOTE: stored as given, no hashing is performed anywhere.
    password: str

class User(UserCreate):
    id: str

def new_user_id() -> str:
    return str(uuid.uuid4())
