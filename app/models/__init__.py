from app.models.user import User
from app.models.book import Book
from app.models.order import Order
from app.models.order_item import OrderItem
from app.models.wishlist import Wishlist, WishlistShare

# add ALL models here
