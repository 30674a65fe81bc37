import logging
from typing import Dict, Iterable

from sqlalchemy import update
from sqlmodel import Session, select

from app.models.book import Book

logger = logging.getLogger(__name__)


def lock_books(session: Session, book_ids: Iterable[int]) -> Dict[int, Book]:
    """Fetch and row-lock the given books for the rest of the transaction.

    Rows are locked in ascending id order so two carts touching the same
    books always queue up behind each other instead of deadlocking. The
    identity map is refreshed so stock reflects what the lock returned.
    """
    ids = sorted(set(book_ids))
    if not ids:
        return {}

    books = session.exec(
        select(Book)
        .where(Book.id.in_(ids))
        .order_by(Book.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).all()

    return {book.id: book for book in books}


def reserve_stock(session: Session, book_id: int, quantity: int) -> bool:
    """Decrement stock only if enough is left; returns False otherwise."""
    result = session.execute(
        update(Book)
        .where(Book.id == book_id, Book.stock >= quantity)
        .values(stock=Book.stock - quantity)
        .execution_options(synchronize_session=False)
    )
    reserved = result.rowcount == 1
    if not reserved:
        logger.info(f"Stock guard rejected book {book_id} qty {quantity}")
    return reserved
