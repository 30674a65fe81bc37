"""Batch job: report wishlist books whose price fell below the saved price.

Meant for cron, outside the request path. Delivery (push, email) is not wired
up; each drop is logged and the entry is stamped so it is not reported again
for NOTIFY_INTERVAL.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from sqlmodel import Session, or_, select

from app.database import engine
from app.models.book import Book
from app.models.user import User
from app.models.wishlist import Wishlist

logger = logging.getLogger(__name__)

NOTIFY_INTERVAL = timedelta(hours=24)


@dataclass
class PriceDrop:
    wishlist_id: int
    user_email: str
    title: str
    price_when_added: Decimal
    current_price: Decimal

    @property
    def savings(self) -> Decimal:
        return self.price_when_added - self.current_price

    @property
    def percentage(self) -> Decimal:
        return (self.savings / self.price_when_added * 100).quantize(
            Decimal("0.1"), rounding=ROUND_HALF_UP
        )


def check_price_drops(session: Session, now: Optional[datetime] = None) -> List[PriceDrop]:
    now = now or datetime.utcnow()
    cutoff = now - NOTIFY_INTERVAL

    rows = session.exec(
        select(Wishlist, Book, User)
        .join(Book, Book.id == Wishlist.book_id)
        .join(User, User.id == Wishlist.user_id)
        .where(Wishlist.notify_on_price_drop == True)  # noqa: E712
        .where(Book.price < Wishlist.price_when_added)
        .where(or_(Wishlist.last_notified_at == None, Wishlist.last_notified_at < cutoff))  # noqa: E711
    ).all()

    if not rows:
        logger.info("No price drops found")
        return []

    drops = []
    for entry, book, user in rows:
        drop = PriceDrop(
            wishlist_id=entry.id,
            user_email=user.email,
            title=book.title,
            price_when_added=entry.price_when_added,
            current_price=book.price,
        )
        logger.info(
            f"Price drop for {drop.user_email}: \"{drop.title}\" "
            f"{drop.price_when_added} -> {drop.current_price} "
            f"(save {drop.savings}, {drop.percentage}%)"
        )
        entry.last_notified_at = now
        session.add(entry)
        drops.append(drop)

    session.commit()
    logger.info(f"Processed {len(drops)} price drop notifications")
    return drops


if __name__ == "__main__":
    from app.logging_config import setup_logging

    setup_logging("price-drop-notifier")
    with Session(engine) as session:
        check_price_drops(session)
