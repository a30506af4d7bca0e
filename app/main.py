import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.config import settings
from app.database import create_db_and_tables, engine
from app.exceptions import GatewayUnavailable, OrderError
from app.routes import admin_orders, auth, cart, health, orders
from app.services.catalog_seed import seed_products

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.ENV == "local":
        create_db_and_tables()
        with Session(engine) as session:
            seed_products(session)
    yield

app = FastAPI(title="Jewellery Store API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(OrderError)
async def order_error_handler(request: Request, exc: OrderError):
    content = {"detail": exc.message}
    if isinstance(exc, GatewayUnavailable) and exc.order_id is not None:
        content["orderId"] = exc.order_id
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(auth.router, prefix="/api", tags=["Authentication"])
app.include_router(cart.router, prefix="/api/cart", tags=["Cart"])
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
app.include_router(admin_orders.router, prefix="/api/admin/orders", tags=["Admin Orders"])
app.include_router(health.router, prefix="/health", tags=["Health"])


@app.get("/")
def root():
    return {
        "auth_endpoints": [
            "/api/register", "/api/login", "/api/user"
        ],
        "cart": [
            "/api/cart", "/api/cart/{id}"
        ],
        "orders": [
            "/api/orders", "/api/orders/{id}",
            "/api/orders/{id}/verify-payment",
            "/api/orders/{id}/payment-intent",
            "/api/orders/{id}/cancel"
        ],
        "admin_orders": [
            "/api/admin/orders", "/api/admin/orders/{id}",
            "/api/admin/orders/{id}/status"
        ]
    }
