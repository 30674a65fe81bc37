from sqlmodel import SQLModel, create_engine, Session
from app.config import settings


def build_engine(url: str):
    connect_args = {}
    if url.startswith("sqlite"):
        # request handlers run in a threadpool
        connect_args["check_same_thread"] = False
        return create_engine(url, echo=False, connect_args=connect_args)

    return create_engine(
        url,
        echo=False,
        pool_pre_ping=True,      # checks dead connections
        pool_recycle=1800        # refresh every 30 min
    )


engine = build_engine(settings.database_url)


def create_db_and_tables(bind=None):
  from app.models import user, book, order, order_item, wishlist
  SQLModel.metadata.create_all(bind or engine)


def get_session():
    with Session(engine) as session:
        yield session
