from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from app.constants.order_status import OrderStatus
from app.models.order_item import OrderItem
from app.models.user import User

class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    buyer_id: int = Field(foreign_key="user.id", index=True)
    seller_id: int = Field(foreign_key="user.id", index=True)

    total_amount: Decimal = Field(max_digits=10, decimal_places=2)

    status: str = Field(default=OrderStatus.PENDING.value)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    buyer: Optional["User"] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "Order.buyer_id"}
    )
    seller: Optional["User"] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "Order.seller_id"}
    )
    items: List["OrderItem"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"order_by": "OrderItem.id"}
    )
