"""Checkout and order fulfilment.

``place_order`` is the one multi-row transaction in the API: it validates a
cart against live stock, decrements it, and writes one pending order per
seller. Either all of that commits or none of it does.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Sequence

from sqlmodel import Session, select

from app.constants.order_status import ORDER_STATUSES, OrderStatus
from app.exceptions import (
    ForbiddenException,
    InsufficientStockException,
    NotFoundException,
    ValidationException,
)
from app.models.book import Book
from app.models.order import Order
from app.models.order_item import OrderItem
from app.models.user import User
from app.schemas.orders_schemas import CartLine
from app.services.inventory_service import lock_books, reserve_stock

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class ValidatedLine:
    book_id: int
    title: str
    quantity: int
    price: Decimal
    seller_id: int
    seller_name: str

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


@dataclass
class SellerGroup:
    seller_id: int
    seller_name: str
    lines: List[ValidatedLine] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return to_money(sum((line.line_total for line in self.lines), Decimal("0")))


@dataclass
class PlacedOrders:
    orders: List[Order]
    total_amount: Decimal


def group_lines_by_seller(lines: Sequence[ValidatedLine]) -> Dict[int, SellerGroup]:
    """Split lines per seller, keyed in order of each seller's first line."""
    groups: Dict[int, SellerGroup] = {}
    for line in lines:
        group = groups.get(line.seller_id)
        if group is None:
            group = SellerGroup(seller_id=line.seller_id, seller_name=line.seller_name)
            groups[line.seller_id] = group
        group.lines.append(line)
    return groups


def _validate_lines(session: Session, lines: Sequence[CartLine]) -> List[ValidatedLine]:
    books = lock_books(session, (line.book_id for line in lines))

    # stock still available to this cart after earlier lines claimed theirs
    remaining = {book_id: book.stock for book_id, book in books.items()}
    validated = []

    for line in lines:
        if line.quantity <= 0:
            raise ValidationException("Invalid item data")

        book: Optional[Book] = books.get(line.book_id)
        if book is None:
            raise NotFoundException(f"Book with ID {line.book_id} not found")

        if remaining[book.id] < line.quantity:
            raise InsufficientStockException(
                book_id=book.id,
                title=book.title,
                available=remaining[book.id],
                requested=line.quantity,
            )

        if not reserve_stock(session, book.id, line.quantity):
            raise InsufficientStockException(
                book_id=book.id,
                title=book.title,
                available=remaining[book.id],
                requested=line.quantity,
            )
        remaining[book.id] -= line.quantity

        validated.append(ValidatedLine(
            book_id=book.id,
            title=book.title,
            quantity=line.quantity,
            price=to_money(book.price),
            seller_id=book.seller_id,
            seller_name=book.seller_name,
        ))

    return validated


def place_order(session: Session, buyer: User, lines: Sequence[CartLine]) -> PlacedOrders:
    """Check out ``lines`` for ``buyer`` as a single all-or-nothing unit."""
    if not lines:
        raise ValidationException("Order items are required")

    logger.info(f"Placing order for buyer {buyer.id} with {len(lines)} lines")

    try:
        validated = _validate_lines(session, lines)
        groups = group_lines_by_seller(validated)

        orders = []
        for group in groups.values():
            order = Order(
                buyer_id=buyer.id,
                seller_id=group.seller_id,
                total_amount=group.total,
                status=OrderStatus.PENDING.value,
            )
            session.add(order)
            session.flush()

            for line in group.lines:
                session.add(OrderItem(
                    order_id=order.id,
                    book_id=line.book_id,
                    book_title=line.title,
                    price=line.price,
                    quantity=line.quantity,
                ))
            orders.append(order)

        session.commit()

    except Exception as e:
        logger.warning(f"Order placement failed for buyer {buyer.id}: {e}")
        session.rollback()
        raise

    for order in orders:
        session.refresh(order)

    total_amount = to_money(sum((o.total_amount for o in orders), Decimal("0")))
    logger.info(
        f"Created {len(orders)} orders for buyer {buyer.id}, total {total_amount}",
        extra={"order_ids": [o.id for o in orders]},
    )
    return PlacedOrders(orders=orders, total_amount=total_amount)


def get_order(session: Session, order_id: int) -> Order:
    order = session.get(Order, order_id)
    if not order:
        raise NotFoundException("Order not found")
    return order


def update_order_status(session: Session, order_id: int, seller_id: int, new_status: str) -> Order:
    """Set an order's status. Only the order's seller may do this.

    Any known status is accepted from any current status; setting the status
    an order already has is allowed and changes nothing but ``updated_at``.
    """
    if new_status not in ORDER_STATUSES:
        raise ValidationException("Invalid status")

    order = get_order(session, order_id)

    if order.seller_id != seller_id:
        raise ForbiddenException("You can only update your own orders")

    order.status = new_status
    order.updated_at = datetime.utcnow()
    session.add(order)
    session.commit()
    session.refresh(order)

    logger.info(f"Order {order.id} status set to {new_status} by seller {seller_id}")
    return order


def list_seller_orders(session: Session, seller_id: int) -> List[Order]:
    return session.exec(
        select(Order)
        .where(Order.seller_id == seller_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    ).all()


def list_buyer_orders(session: Session, buyer_id: int) -> List[Order]:
    return session.exec(
        select(Order)
        .where(Order.buyer_id == buyer_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    ).all()
