from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
from typing import List, Optional
from datetime import datetime, timedelta
import secrets
from app.database import get_session
from app.exceptions import ConflictException, ForbiddenException, NotFoundException
from app.models.wishlist import Wishlist, WishlistShare
from app.models.book import Book
from app.models.user import User
from app.schemas.base_schemas import MessageResponse
from app.schemas.book_schemas import BookResponse
from app.schemas.wishlist_schemas import (
    SharedWishlistDetail,
    SharedWishlistItem,
    SharedWishlistResponse,
    WishlistAddRequest,
    WishlistCheckResponse,
    WishlistEntry,
    WishlistEntryResponse,
    WishlistItemResponse,
    WishlistNotifyUpdate,
    WishlistShareCreate,
    WishlistShareCreated,
    WishlistShareResponse,
)
from app.utils.token import get_current_buyer

router = APIRouter()


def generate_share_code() -> str:
    # 16 random bytes, 32 hex chars
    return secrets.token_hex(16)


def wishlist_rows(session: Session, user_id: int):
    return session.exec(
        select(Wishlist, Book)
        .join(Book, Book.id == Wishlist.book_id)
        .where(Wishlist.user_id == user_id)
        .order_by(Wishlist.added_at.desc(), Wishlist.id.desc())
    ).all()


def find_wishlist_entry(session: Session, user_id: int, book_id: int) -> Optional[Wishlist]:
    return session.exec(
        select(Wishlist)
        .where(Wishlist.user_id == user_id, Wishlist.book_id == book_id)
    ).first()


def get_wishlist_entry(session: Session, user_id: int, book_id: int) -> Wishlist:
    item = find_wishlist_entry(session, user_id, book_id)
    if not item:
        raise NotFoundException("Book not found in wishlist")
    return item


@router.get("", response_model=List[WishlistItemResponse])
def get_wishlist(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_buyer)
):
    return [
        WishlistItemResponse(
            **WishlistEntry.model_validate(w).model_dump(),
            book=BookResponse.model_validate(book),
        )
        for w, book in wishlist_rows(session, current_user.id)
    ]


@router.post("", response_model=WishlistEntryResponse, status_code=status.HTTP_201_CREATED)
def add_to_wishlist(
    payload: WishlistAddRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_buyer)
):
    book = session.get(Book, payload.book_id)
    if not book:
        raise NotFoundException("Book not found")

    if find_wishlist_entry(session, current_user.id, book.id):
        raise ConflictException("Book already in wishlist")

    new_item = Wishlist(
        user_id=current_user.id,
        book_id=book.id,
        price_when_added=book.price,
        notify_on_price_drop=payload.notify_on_price_drop,
    )
    session.add(new_item)
    try:
        session.commit()
    except IntegrityError:
        # lost a race with a concurrent add of the same book
        session.rollback()
        raise ConflictException("Book already in wishlist")
    session.refresh(new_item)

    return WishlistEntryResponse(message="Book added to wishlist", wishlist_item=WishlistEntry.model_validate(new_item))


@router.get("/check/{book_id}", response_model=WishlistCheckResponse)
def wishlist_status(
    book_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_buyer)
):
    exists = session.exec(
        select(Wishlist).where(
            Wishlist.user_id == current_user.id,
            Wishlist.book_id == book_id
        )
    ).first()

    return WishlistCheckResponse(in_wishlist=bool(exists))


@router.post("/share", response_model=WishlistShareCreated, status_code=status.HTTP_201_CREATED)
def create_share(
    payload: WishlistShareCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_buyer)
):
    share = WishlistShare(
        user_id=current_user.id,
        share_code=generate_share_code(),
        title=payload.title,
        description=payload.description,
        is_public=payload.is_public,
        expires_at=datetime.utcnow() + timedelta(days=payload.expires_in_days),
    )
    session.add(share)
    session.commit()
    session.refresh(share)

    return WishlistShareCreated(message="Wishlist share created", share=WishlistShareResponse.model_validate(share))


@router.get("/shares", response_model=List[WishlistShareResponse])
def list_shares(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_buyer)
):
    return session.exec(
        select(WishlistShare)
        .where(
            WishlistShare.user_id == current_user.id,
            WishlistShare.expires_at > datetime.utcnow()
        )
        .order_by(WishlistShare.created_at.desc(), WishlistShare.id.desc())
    ).all()


@router.delete("/shares/{share_code}", response_model=MessageResponse)
def delete_share(
    share_code: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_buyer)
):
    share = session.exec(
        select(WishlistShare).where(
            WishlistShare.user_id == current_user.id,
            WishlistShare.share_code == share_code
        )
    ).first()

    if not share:
        raise NotFoundException("Wishlist share not found")

    session.delete(share)
    session.commit()

    return MessageResponse(message="Wishlist share deleted")


# Public: anyone holding the share code may read
@router.get("/shared/{share_code}", response_model=SharedWishlistResponse)
def get_shared_wishlist(share_code: str, session: Session = Depends(get_session)):
    row = session.exec(
        select(WishlistShare, User)
        .join(User, User.id == WishlistShare.user_id)
        .where(
            WishlistShare.share_code == share_code,
            WishlistShare.expires_at > datetime.utcnow()
        )
    ).first()

    if not row:
        raise NotFoundException("Shared wishlist not found or expired")

    share, owner = row
    if not share.is_public:
        raise ForbiddenException("This wishlist is private")

    detail = SharedWishlistDetail(
        **WishlistShareResponse.model_validate(share).model_dump(),
        owner_name=owner.name,
    )
    items = [
        SharedWishlistItem(id=w.id, book_id=w.book_id, added_at=w.added_at,
                           book=BookResponse.model_validate(book))
        for w, book in wishlist_rows(session, share.user_id)
    ]
    return SharedWishlistResponse(share=detail, items=items)


@router.delete("/{book_id}", response_model=MessageResponse)
def remove_from_wishlist(
    book_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_buyer)
):
    item = get_wishlist_entry(session, current_user.id, book_id)

    session.delete(item)
    session.commit()

    return MessageResponse(message="Book removed from wishlist")


@router.patch("/{book_id}/notify", response_model=WishlistEntryResponse)
def update_notify(
    book_id: int,
    payload: WishlistNotifyUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_buyer)
):
    item = get_wishlist_entry(session, current_user.id, book_id)

    item.notify_on_price_drop = payload.notify_on_price_drop
    session.add(item)
    session.commit()
    session.refresh(item)

    return WishlistEntryResponse(message="Notification setting updated", wishlist_item=WishlistEntry.model_validate(item))
