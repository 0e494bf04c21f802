import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vetshop.api.deps import get_storage
from vetshop.api.routes import cart
from vetshop.core.config import settings
from vetshop.core.database import close_mongo_connection

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the cart storage before serving and release it on exit."""
    storage = get_storage()
    logger.info(f"Cart service ready on {type(storage).__name__}")
    yield
    close_mongo_connection()
    get_storage.cache_clear()
    logger.info("Cart service stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Shopping cart API for the Vetshop veterinary clinic store",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["X-Cart-Session", "Content-Type"],
)

app.include_router(cart.router, prefix=f"{settings.API_V1_PREFIX}/cart", tags=["Cart"])


@app.get("/health")
async def health_check():
    """Health check with the active cart storage backend."""
    return {
        "status": "healthy",
        "service": "vetshop-cart",
        "storage": settings.CART_STORAGE_BACKEND
    }
