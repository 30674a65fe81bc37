from pydantic import Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from app.schemas.base_schemas import MAX_ROW_ID, APIModel, APIRequest


class CartLine(APIRequest):
    book_id: int = Field(..., gt=0, le=MAX_ROW_ID)
    quantity: int = Field(..., gt=0)


class PlaceOrderRequest(APIRequest):
    items: List[CartLine] = Field(..., min_length=1)


class OrderStatusUpdate(APIRequest):
    status: str


class OrderItemResponse(APIModel):
    id: int
    book_id: Optional[int]
    title: str
    quantity: int
    price: Decimal


class OrderResponse(APIModel):
    id: int
    buyer_id: int
    seller_id: int
    buyer_name: Optional[str] = None
    seller_name: Optional[str] = None
    total_amount: Decimal
    status: str
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemResponse] = []


class PlaceOrderResponse(APIModel):
    message: str
    orders: List[OrderResponse]
    total_amount: Decimal


class OrderStatusResponse(APIModel):
    message: str
    order: OrderResponse
