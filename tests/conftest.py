import os

# Settings are read at import time; point them away from PostgreSQL first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("SECRET_KEY", "test-secret")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from app.database import build_engine, create_db_and_tables, get_session
from app.main import app
from app.models.book import Book
from app.models.user import User
from app.utils.hash import hash_password
from app.utils.token import create_access_token

PASSWORD = "password123"


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'bookstore.db'}")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    counter = {"n": 0}

    def _make(role="buyer", name=None):
        counter["n"] += 1
        user = User(
            name=name or f"{role.title()} {counter['n']}",
            email=f"{role}{counter['n']}@example.com",
            password=hash_password(PASSWORD),
            role=role,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_book(session):
    def _make(seller, title="The Great Gatsby", price="15.99", stock=10):
        book = Book(
            title=title,
            description=f"{title} description",
            price=Decimal(price),
            stock=stock,
            seller_id=seller.id,
            seller_name=seller.name,
        )
        session.add(book)
        session.commit()
        session.refresh(book)
        return book

    return _make


@pytest.fixture
def buyer(make_user):
    return make_user("buyer", "Test Buyer")


@pytest.fixture
def seller(make_user):
    return make_user("seller", "Classic Books Store")


@pytest.fixture
def other_seller(make_user):
    return make_user("seller", "Modern Literature Hub")


def auth_header(user):
    token = create_access_token({"user_id": user.id, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers():
    return auth_header
