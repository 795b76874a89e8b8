from pydantic import BaseModel, Field
from typing import List, Optional


class ProductImage(BaseModel):
    url: str
    alt: str = ""


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    price: float = Field(ge=0)
    category: str = Field(min_length=1)
    brand: Optional[str] = None
    images: List[ProductImage] = []
    stock: int = Field(default=0, ge=0)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = Field(default=None, min_length=1)
    brand: Optional[str] = None
    images: Optional[List[ProductImage]] = None
    stock: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None
