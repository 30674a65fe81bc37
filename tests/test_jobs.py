from datetime import datetime, timedelta
from decimal import Decimal

from sqlmodel import select

from app.jobs.price_drop_notifier import check_price_drops
from app.jobs.seed_catalog import seed_sample_data
from app.models.book import Book
from app.models.user import User
from app.models.wishlist import Wishlist


def test_seed_is_repeatable(session):
    assert seed_sample_data(session) == {"users": 3, "books": 3}
    assert seed_sample_data(session) == {"users": 0, "books": 0}

    sellers = session.exec(select(User).where(User.role == "seller")).all()
    assert len(sellers) == 2
    gatsby = session.exec(select(Book).where(Book.title == "The Great Gatsby")).one()
    assert gatsby.price == Decimal("15.99")
    assert gatsby.stock == 10


def watch(session, buyer, book, price_when_added, notify=True):
    entry = Wishlist(
        user_id=buyer.id,
        book_id=book.id,
        price_when_added=Decimal(price_when_added),
        notify_on_price_drop=notify,
    )
    session.add(entry)
    session.commit()
    return entry


def test_price_drop_is_reported_once_per_interval(session, buyer, seller, make_book):
    book = make_book(seller, "Cheaper Now", price="8.00")
    entry = watch(session, buyer, book, "10.00")
    now = datetime(2026, 10, 1, 12, 0)

    drops = check_price_drops(session, now=now)

    assert len(drops) == 1
    assert drops[0].savings == Decimal("2.00")
    assert drops[0].percentage == Decimal("20.0")
    session.refresh(entry)
    assert entry.last_notified_at == now

    assert check_price_drops(session, now=now + timedelta(hours=1)) == []
    assert len(check_price_drops(session, now=now + timedelta(hours=25))) == 1


def test_no_report_without_drop_or_opt_in(session, buyer, seller, make_book):
    same = make_book(seller, "Same Price", price="10.00")
    muted = make_book(seller, "Muted", price="1.00")
    watch(session, buyer, same, "10.00")
    watch(session, buyer, muted, "10.00", notify=False)

    assert check_price_drops(session) == []
