from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal


class Book(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: Optional[str] = None

    #Shop Details
    price: Decimal = Field(max_digits=10, decimal_places=2)
    stock: int = Field(default=0)
    image_url: Optional[str] = None

    #Seller
    seller_id: int = Field(foreign_key="user.id", index=True)
    seller_name: str

    #timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
