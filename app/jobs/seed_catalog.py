"""Load sample sellers, a buyer and a few books into the database.

Run explicitly (``python -m app.jobs.seed_catalog``); the API never falls back
to this data on its own.
"""
import logging
from decimal import Decimal

from sqlmodel import Session, select

from app.database import create_db_and_tables, engine
from app.models.book import Book
from app.models.user import User
from app.utils.hash import hash_password

logger = logging.getLogger(__name__)

SAMPLE_PASSWORD = "password123"

SAMPLE_USERS = [
    {"name": "Classic Books Store", "email": "seller1@example.com", "role": "seller"},
    {"name": "Modern Literature Hub", "email": "seller2@example.com", "role": "seller"},
    {"name": "John Doe", "email": "buyer@example.com", "role": "buyer"},
]

SAMPLE_BOOKS = [
    ("seller1@example.com", "The Great Gatsby",
     "A classic American novel about the Jazz Age.", "15.99", 10),
    ("seller2@example.com", "To Kill a Mockingbird",
     "A gripping tale of racial injustice and childhood innocence.", "12.99", 5),
    ("seller1@example.com", "1984",
     "George Orwell's dystopian masterpiece.", "13.99", 8),
]


def seed_sample_data(session: Session) -> dict:
    """Insert sample rows; users are matched by email so reruns add nothing."""
    users = {}
    created_users = 0
    for fields in SAMPLE_USERS:
        user = session.exec(select(User).where(User.email == fields["email"])).first()
        if not user:
            user = User(**fields, password=hash_password(SAMPLE_PASSWORD))
            session.add(user)
            created_users += 1
        users[fields["email"]] = user
    session.flush()

    created_books = 0
    for seller_email, title, description, price, stock in SAMPLE_BOOKS:
        seller = users[seller_email]
        exists = session.exec(
            select(Book).where(Book.seller_id == seller.id, Book.title == title)
        ).first()
        if exists:
            continue
        session.add(Book(
            title=title,
            description=description,
            price=Decimal(price),
            stock=stock,
            seller_id=seller.id,
            seller_name=seller.name,
        ))
        created_books += 1

    session.commit()
    logger.info(f"Seeded {created_users} users and {created_books} books")
    return {"users": created_users, "books": created_books}


if __name__ == "__main__":
    from app.logging_config import setup_logging

    setup_logging("seed-catalog")
    create_db_and_tables()
    with Session(engine) as session:
        seed_sample_data(session)
