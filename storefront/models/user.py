from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    email: str = Field(index=True, unique=True)
    password: str
    first_name: str
    last_name: str
    role: str = Field(default="user")
    is_active: bool = Field(default=True)
    phone: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
