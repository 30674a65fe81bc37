import threading
from decimal import Decimal

import pytest
from sqlmodel import Session, select

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
from app.services import order_service
from app.services.order_service import (
    ValidatedLine,
    group_lines_by_seller,
    place_order,
    update_order_status,
)


def line(book, quantity):
    return CartLine(book_id=book.id, quantity=quantity)


def stock_of(engine, book_id):
    with Session(engine) as s:
        return s.get(Book, book_id).stock


def order_count(engine):
    with Session(engine) as s:
        return len(s.exec(select(Order)).all()), len(s.exec(select(OrderItem)).all())


def test_single_line_checkout_totals_and_decrements(session, engine, buyer, seller, make_book):
    book = make_book(seller, price="15.99", stock=10)

    placed = place_order(session, buyer, [line(book, 2)])

    assert len(placed.orders) == 1
    order = placed.orders[0]
    assert order.total_amount == Decimal("31.98")
    assert order.status == "pending"
    assert order.seller_id == seller.id
    assert order.buyer_id == buyer.id
    assert placed.total_amount == Decimal("31.98")
    assert stock_of(engine, book.id) == 8


def test_total_matches_prices_read_before_checkout(session, buyer, seller, other_seller, make_book):
    books = [
        make_book(seller, "A", "0.10", 50),
        make_book(other_seller, "B", "0.20", 50),
        make_book(seller, "C", "19.99", 50),
    ]
    quantities = [3, 7, 2]
    expected = sum((b.price * q for b, q in zip(books, quantities)), Decimal("0"))

    placed = place_order(session, buyer, [line(b, q) for b, q in zip(books, quantities)])

    assert placed.total_amount == expected == Decimal("41.68")
    assert sum(o.total_amount for o in placed.orders) == placed.total_amount


def test_items_snapshot_price_and_title(session, buyer, seller, make_book):
    book = make_book(seller, "Dune", "9.50", 4)
    placed = place_order(session, buyer, [line(book, 1)])
    order_id = placed.orders[0].id

    book.price = Decimal("4.00")
    book.title = "Dune (reissue)"
    session.add(book)
    session.commit()

    order = session.get(Order, order_id)
    assert order.items[0].price == Decimal("9.50")
    assert order.items[0].book_title == "Dune"
    assert order.total_amount == Decimal("9.50")


def test_unknown_book_rolls_back_everything(session, engine, buyer, seller, make_book):
    book = make_book(seller, stock=5)

    with pytest.raises(NotFoundException) as exc:
        place_order(session, buyer, [line(book, 2), CartLine(book_id=9999, quantity=1)])

    assert "9999" in exc.value.detail
    assert exc.value.status_code == 404
    assert stock_of(engine, book.id) == 5
    assert order_count(engine) == (0, 0)


def test_failed_item_write_rolls_back_stock(monkeypatch, session, engine, buyer, seller, make_book):
    book = make_book(seller, stock=5)

    def broken_item(**kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(order_service, "OrderItem", broken_item)

    with pytest.raises(RuntimeError):
        place_order(session, buyer, [line(book, 2)])

    assert stock_of(engine, book.id) == 5
    assert order_count(engine) == (0, 0)


def test_insufficient_stock_is_all_or_nothing(session, engine, buyer, seller, other_seller, make_book):
    plenty = make_book(seller, "Plenty", stock=5)
    scarce = make_book(other_seller, "Scarce", stock=2)

    with pytest.raises(InsufficientStockException) as exc:
        place_order(session, buyer, [line(plenty, 1), line(scarce, 3)])

    assert exc.value.book_id == scarce.id
    assert exc.value.available == 2
    assert exc.value.requested == 3
    assert "Scarce" in exc.value.detail
    assert stock_of(engine, plenty.id) == 5
    assert stock_of(engine, scarce.id) == 2
    assert order_count(engine) == (0, 0)


def test_repeated_lines_for_one_book_share_its_stock(session, engine, buyer, seller, make_book):
    book = make_book(seller, stock=5)

    with pytest.raises(InsufficientStockException):
        place_order(session, buyer, [line(book, 3), line(book, 3)])

    assert stock_of(engine, book.id) == 5

    placed = place_order(session, buyer, [line(book, 3), line(book, 2)])
    assert len(placed.orders) == 1
    assert [i.quantity for i in placed.orders[0].items] == [3, 2]
    assert stock_of(engine, book.id) == 0


def test_exact_stock_can_be_bought(session, engine, buyer, seller, make_book):
    book = make_book(seller, stock=3)
    place_order(session, buyer, [line(book, 3)])
    assert stock_of(engine, book.id) == 0


def test_cart_spanning_two_sellers_creates_two_orders(session, buyer, seller, other_seller, make_book):
    gatsby = make_book(seller, "The Great Gatsby", "15.99", 10)
    mockingbird = make_book(other_seller, "To Kill a Mockingbird", "12.99", 5)
    orwell = make_book(seller, "1984", "13.99", 8)

    placed = place_order(
        session, buyer, [line(gatsby, 2), line(mockingbird, 1), line(orwell, 1)]
    )

    assert len(placed.orders) == 2
    first, second = placed.orders
    assert first.seller_id == seller.id
    assert [i.book_id for i in first.items] == [gatsby.id, orwell.id]
    assert first.total_amount == Decimal("45.97")
    assert second.seller_id == other_seller.id
    assert [i.book_id for i in second.items] == [mockingbird.id]
    assert second.total_amount == Decimal("12.99")
    assert first.total_amount + second.total_amount == placed.total_amount == Decimal("58.96")


def test_orders_follow_first_occurrence_of_each_seller(session, buyer, seller, other_seller, make_book):
    a = make_book(seller, "A", "1.00", 5)
    b = make_book(other_seller, "B", "2.00", 5)

    placed = place_order(session, buyer, [line(b, 1), line(a, 1), line(b, 1)])

    assert [o.seller_id for o in placed.orders] == [other_seller.id, seller.id]
    assert [i.quantity for i in placed.orders[0].items] == [1, 1]


def test_group_lines_by_seller_keeps_insertion_order():
    def vl(book_id, seller_id):
        return ValidatedLine(book_id, f"t{book_id}", 1, Decimal("1.00"), seller_id, f"s{seller_id}")

    groups = group_lines_by_seller([vl(1, 7), vl(2, 3), vl(3, 7), vl(4, 5)])

    assert list(groups) == [7, 3, 5]
    assert [l.book_id for l in groups[7].lines] == [1, 3]
    assert groups[7].total == Decimal("2.00")


def test_empty_cart_is_rejected(session, buyer):
    with pytest.raises(ValidationException):
        place_order(session, buyer, [])


def test_concurrent_checkouts_never_oversell(engine, buyer, seller, make_book):
    book_id = make_book(seller, stock=1).id
    buyer_id = buyer.id
    barrier = threading.Barrier(2)
    results = []

    def checkout():
        with Session(engine) as s:
            user = s.get(User, buyer_id)
            barrier.wait()
            try:
                place_order(s, user, [CartLine(book_id=book_id, quantity=1)])
                results.append("ok")
            except InsufficientStockException:
                results.append("insufficient")
            except Exception as e:  # surfaced through the assertion below
                results.append(repr(e))

    threads = [threading.Thread(target=checkout) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert sorted(results) == ["insufficient", "ok"]
    assert stock_of(engine, book_id) == 0
    assert order_count(engine) == (1, 1)


def test_update_status_by_owner(session, buyer, seller, make_book):
    book = make_book(seller)
    order = place_order(session, buyer, [line(book, 1)]).orders[0]

    updated = update_order_status(session, order.id, seller.id, "shipped")

    assert updated.status == "shipped"


def test_update_status_is_idempotent(session, buyer, seller, make_book):
    book = make_book(seller)
    order = place_order(session, buyer, [line(book, 1)]).orders[0]

    update_order_status(session, order.id, seller.id, "confirmed")
    again = update_order_status(session, order.id, seller.id, "confirmed")

    assert again.status == "confirmed"
    assert len(again.items) == 1


def test_update_status_accepts_any_known_value(session, buyer, seller, make_book):
    book = make_book(seller)
    order = place_order(session, buyer, [line(book, 1)]).orders[0]

    update_order_status(session, order.id, seller.id, "delivered")
    back = update_order_status(session, order.id, seller.id, "pending")

    assert back.status == "pending"


def test_update_status_errors(session, buyer, seller, other_seller, make_book):
    book = make_book(seller)
    order = place_order(session, buyer, [line(book, 1)]).orders[0]

    with pytest.raises(NotFoundException):
        update_order_status(session, 4242, seller.id, "shipped")
    with pytest.raises(ForbiddenException):
        update_order_status(session, order.id, other_seller.id, "shipped")
    with pytest.raises(ValidationException):
        update_order_status(session, order.id, seller.id, "lost")

    session.refresh(order)
    assert order.status == "pending"
