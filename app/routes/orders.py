from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List
from app.database import get_session
from app.models.order import Order
from app.models.user import User
from app.schemas.orders_schemas import (
    OrderItemResponse,
    OrderResponse,
    OrderStatusResponse,
    OrderStatusUpdate,
    PlaceOrderRequest,
    PlaceOrderResponse,
)
from app.services.order_service import (
    list_buyer_orders,
    list_seller_orders,
    place_order,
    update_order_status,
)
from app.utils.token import get_current_buyer, get_current_seller

router = APIRouter()


def serialize_order(order: Order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        buyer_id=order.buyer_id,
        seller_id=order.seller_id,
        buyer_name=order.buyer.name if order.buyer else None,
        seller_name=order.seller.name if order.seller else None,
        total_amount=order.total_amount,
        status=order.status,
        created_at=order.created_at,
        updated_at=order.updated_at,
        items=[
            OrderItemResponse(
                id=i.id,
                book_id=i.book_id,
                title=i.book_title,
                quantity=i.quantity,
                price=i.price,
            )
            for i in order.items
        ],
    )


# Checkout: one order per seller in the cart

@router.post("", response_model=PlaceOrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: PlaceOrderRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_buyer)
):
    placed = place_order(session, current_user, payload.items)

    return PlaceOrderResponse(
        message="Orders created successfully",
        orders=[serialize_order(o) for o in placed.orders],
        total_amount=placed.total_amount,
    )


@router.get("/seller", response_model=List[OrderResponse])
def seller_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_seller)
):
    return [serialize_order(o) for o in list_seller_orders(session, current_user.id)]


@router.get("/buyer", response_model=List[OrderResponse])
def buyer_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_buyer)
):
    return [serialize_order(o) for o in list_buyer_orders(session, current_user.id)]


@router.patch("/{order_id}/status", response_model=OrderStatusResponse)
def change_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_seller)
):
    order = update_order_status(session, order_id, current_user.id, payload.status)

    return OrderStatusResponse(
        message="Order status updated successfully",
        order=serialize_order(order),
    )
