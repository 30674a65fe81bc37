import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager

from app.database import create_db_and_tables
from app.exceptions import InternalException
from app.config import settings
from app.logging_config import RequestLoggingMiddleware, setup_logging
from app.routes import (
    auth,
    books,
    orders,
    wishlist,
    health,
)

logger = setup_logging("bookstore-api", settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.env == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="Bookstore Marketplace API", lifespan=lifespan)

app.add_middleware(RequestLoggingMiddleware, service_name="bookstore-api")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Every error leaves as {"error": "<message>"}

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    internal = InternalException()
    return JSONResponse(
        status_code=internal.status_code,
        content={"error": internal.detail},
    )


app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(books.router, prefix="/books", tags=["Books"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(wishlist.router, prefix="/wishlist", tags=["Wishlist"])
app.include_router(health.router, prefix="/health", tags=["Health"])


@app.get("/")
def root():
    return {
        "auth_endpoints": [
            "/auth/register", "/auth/login", "/auth/profile"
        ],
        "book_endpoints": [
            "/books", "/books/{book_id}", "/books/seller/{seller_id}"
        ],
        "order_endpoints": [
            "/orders", "/orders/buyer", "/orders/seller", "/orders/{order_id}/status"
        ],
        "wishlist_endpoints": [
            "/wishlist", "/wishlist/{book_id}", "/wishlist/check/{book_id}",
            "/wishlist/{book_id}/notify", "/wishlist/share", "/wishlist/shares",
            "/wishlist/shared/{share_code}"
        ],
    }
