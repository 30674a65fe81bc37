from sqlmodel import SQLModel, Field , Relationship
from typing import Optional , TYPE_CHECKING
from decimal import Decimal
from sqlalchemy import Column, ForeignKey, Integer

if TYPE_CHECKING:
    from app.models.order import Order

class OrderItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)

    # Listing may be deleted later; the snapshot below keeps the history readable
    book_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("book.id", ondelete="SET NULL"),
            nullable=True
        )
    )

    book_title: str
    price: Decimal = Field(max_digits=10, decimal_places=2)
    quantity: int

    order: Optional["Order"] = Relationship(back_populates="items")
