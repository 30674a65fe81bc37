from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint


class Wishlist(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("user_id", "book_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    book_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("book.id", ondelete="CASCADE"),
            nullable=False,
            index=True
        )
    )
    price_when_added: Decimal = Field(max_digits=10, decimal_places=2)
    notify_on_price_drop: bool = Field(default=False)
    added_at: datetime = Field(default_factory=datetime.utcnow)
    last_notified_at: Optional[datetime] = None


class WishlistShare(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    share_code: str = Field(max_length=32, unique=True, index=True)
    title: str
    description: Optional[str] = None
    is_public: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    expires_at: datetime
