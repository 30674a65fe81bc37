from pydantic import Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from app.schemas.base_schemas import MAX_ROW_ID, APIModel, APIRequest
from app.schemas.book_schemas import BookResponse


class WishlistAddRequest(APIRequest):
    book_id: int = Field(..., gt=0, le=MAX_ROW_ID)
    notify_on_price_drop: bool = False


class WishlistNotifyUpdate(APIRequest):
    notify_on_price_drop: bool


class WishlistShareCreate(APIRequest):
    title: str = Field("My Wishlist", min_length=1, max_length=255)
    description: Optional[str] = None
    is_public: bool = True
    expires_in_days: int = Field(30, ge=1, le=365)


class WishlistEntry(APIModel):
    id: int
    user_id: int
    book_id: int
    added_at: datetime
    price_when_added: Decimal
    notify_on_price_drop: bool


class WishlistItemResponse(WishlistEntry):
    book: BookResponse


class WishlistEntryResponse(APIModel):
    message: str
    wishlist_item: WishlistEntry


class WishlistShareResponse(APIModel):
    id: int
    user_id: int
    share_code: str
    title: str
    description: Optional[str]
    is_public: bool
    created_at: datetime
    expires_at: datetime


class WishlistShareCreated(APIModel):
    message: str
    share: WishlistShareResponse


class SharedWishlistItem(APIModel):
    id: int
    book_id: int
    added_at: datetime
    book: BookResponse


class SharedWishlistDetail(WishlistShareResponse):
    owner_name: str


class SharedWishlistResponse(APIModel):
    share: SharedWishlistDetail
    items: List[SharedWishlistItem]


class WishlistCheckResponse(APIModel):
    in_wishlist: bool
