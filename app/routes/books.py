from fastapi import APIRouter, Depends, status
from sqlmodel import Session, select
from typing import List
from datetime import datetime
import logging
from app.database import get_session
from app.exceptions import ForbiddenException, NotFoundException
from app.models.book import Book
from app.models.user import User
from app.schemas.base_schemas import MessageResponse
from app.schemas.book_schemas import BookCreate, BookMutationResponse, BookResponse, BookUpdate
from app.utils.token import get_current_seller

logger = logging.getLogger(__name__)

router = APIRouter()


def get_owned_book(session: Session, book_id: int, seller: User, action: str) -> Book:
    book = session.get(Book, book_id)
    if not book:
        raise NotFoundException("Book not found")

    if book.seller_id != seller.id:
        raise ForbiddenException(f"You can only {action} your own books")

    return book


# Storefront: only what can be bought
@router.get("", response_model=List[BookResponse])
def list_books(session: Session = Depends(get_session)):
    return session.exec(
        select(Book)
        .where(Book.stock > 0)
        .order_by(Book.created_at.desc(), Book.id.desc())
    ).all()


@router.get("/seller/{seller_id}", response_model=List[BookResponse])
def list_seller_books(seller_id: int, session: Session = Depends(get_session)):
    return session.exec(
        select(Book)
        .where(Book.seller_id == seller_id)
        .order_by(Book.created_at.desc(), Book.id.desc())
    ).all()


@router.get("/{book_id}", response_model=BookResponse)
def get_book(book_id: int, session: Session = Depends(get_session)):
    book = session.get(Book, book_id)
    if not book:
        raise NotFoundException(f"Book not found for ID: {book_id}")
    return book


@router.post("", response_model=BookMutationResponse, status_code=status.HTTP_201_CREATED)
def create_book(
    payload: BookCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_seller)
):
    book = Book(
        **payload.model_dump(),
        seller_id=current_user.id,
        seller_name=current_user.name,
    )

    session.add(book)
    session.commit()
    session.refresh(book)

    logger.info(f"Seller {current_user.id} listed book {book.id}")
    return BookMutationResponse(message="Book created successfully", book=BookResponse.model_validate(book))


@router.put("/{book_id}", response_model=BookMutationResponse)
def update_book(
    book_id: int,
    payload: BookUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_seller)
):
    book = get_owned_book(session, book_id, current_user, "update")

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(book, key, value)

    book.updated_at = datetime.utcnow()
    session.add(book)
    session.commit()
    session.refresh(book)

    return BookMutationResponse(message="Book updated successfully", book=BookResponse.model_validate(book))


@router.delete("/{book_id}", response_model=MessageResponse)
def delete_book(
    book_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_seller)
):
    book = get_owned_book(session, book_id, current_user, "delete")

    session.delete(book)
    session.commit()

    logger.info(f"Seller {current_user.id} deleted book {book_id}")
    return MessageResponse(message="Book deleted successfully")
