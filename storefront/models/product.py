from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import List, Optional
from datetime import datetime

PLACEHOLDER_IMAGE = "/uploads/products/placeholder.jpg"


class Product(SQLModel, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    description: str = ""

    price: float
    category: str = Field(index=True)
    brand: Optional[str] = None

    # [{"url": ..., "alt": ...}]
    images: List[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    stock: int = Field(default=0)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    @property
    def primary_image(self) -> str:
        if self.images:
            return self.images[0].get("url") or PLACEHOLDER_IMAGE
        return PLACEHOLDER_IMAGE
