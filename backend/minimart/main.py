"""
MiniMart Online - Backend API
Storefront (catalog, cart, sign-in) and back-office (products, buyers, transactions)
"""
import logging
import time
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables before settings are read
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from minimart.api import admin, auth, cart, products
from minimart.api.deps import http_error
from minimart.core.config import settings
from minimart.core.database import DataClient, check_database_connection, get_optional_data_client
from minimart.core.errors import MiniMartError

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

ALLOWED_ORIGINS = settings.get_allowed_origins()

# Create FastAPI application
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    debug=settings.API_DEBUG
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)


@app.exception_handler(MiniMartError)
async def minimart_error_handler(request: Request, exc: MiniMartError):
    """Errors raised outside a route's own handling (e.g. from dependencies)"""
    error = http_error(exc)
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail}, headers=error.headers)


# Include API routers
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(cart.router, prefix="/api/v1/cart", tags=["Cart"])
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(admin.router, prefix="/api/v1/admin", tags=["Admin"])


@app.get("/")
def root():
    """Root endpoint - API status"""
    return {
        "message": "MiniMart Online API",
        "status": "online",
        "version": settings.API_VERSION,
        "description": settings.API_DESCRIPTION
    }


@app.get("/health")
def health(client: Optional[DataClient] = Depends(get_optional_data_client)):
    """Health check endpoint - tests database connectivity"""
    start_time = time.time()

    if client is None:
        database = {"status": "not_configured", "latency_ms": None, "error": "Supabase is not configured"}
    else:
        db = check_database_connection(client)
        database = {
            "status": "connected" if db.connected else "disconnected",
            "latency_ms": db.latency_ms,
            "error": db.error
        }

    total_latency_ms = round((time.time() - start_time) * 1000, 2)
    return {
        "status": "healthy" if database["status"] == "connected" else "degraded",
        "service": "minimart-api",
        "version": settings.API_VERSION,
        "database": database,
        "total_latency_ms": total_latency_ms
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("minimart.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.API_DEBUG)
