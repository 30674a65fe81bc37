from pydantic import Field, model_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal

from app.schemas.base_schemas import APIModel, APIRequest


class BookCreate(APIRequest):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    stock: int = Field(..., ge=0)
    image_url: Optional[str] = None


class BookUpdate(APIRequest):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None

    @model_validator(mode="after")
    def required_fields_not_null(self):
        # description and imageUrl may be cleared with null, the rest may not
        for name in ("title", "price", "stock"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class BookResponse(APIModel):
    id: int
    title: str
    description: Optional[str]
    price: Decimal
    stock: int
    image_url: Optional[str]
    seller_id: int
    seller_name: str
    created_at: datetime


class BookMutationResponse(APIModel):
    message: str
    book: BookResponse
