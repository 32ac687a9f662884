from pydantic import BaseModel, Field, validator
from typing import List, Optional
from enum import Enum


class ProductCategory(str, Enum):
    BOOK = "book"
    NOTEBOOK = "notebook"
    PEN = "pen"
    CALCULATOR = "calculator"
    BAG = "bag"
    OTHER = "other"


class ProductCondition(str, Enum):
    NEW = "new"
    USED = "used"
    REFURBISHED = "refurbished"


class ProductStatus(str, Enum):
    ACTIVE = "active"
    SOLD = "sold"
    INACTIVE = "inactive"


def _check_images(v):
    if v is not None and not 1 <= len(v) <= 5:
        raise ValueError("A product needs between 1 and 5 images")
    return v


class ProductCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str
    category: ProductCategory
    price: float = Field(..., ge=0)
    original_price: Optional[float] = Field(None, ge=0)
    images: List[str]
    stock: int = Field(1, ge=0)
    condition: ProductCondition = ProductCondition.NEW
    location: str = ""

    @validator("images")
    def validate_images(cls, v):
        return _check_images(v)


class ProductUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    original_price: Optional[float] = Field(None, ge=0)
    images: Optional[List[str]] = None
    stock: Optional[int] = Field(None, ge=0)
    status: Optional[ProductStatus] = None
    reslug: bool = False

    @validator("images")
    def validate_images(cls, v):
        return _check_images(v)
