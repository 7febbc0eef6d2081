"""
BizHub - Main FastAPI Application

Single entry point for all pages (Vercel serverless function).
"""
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from bizhub.logging import get_logger
from bizhub.routers import account_router, chat_router, pages_router, products_router
from bizhub.services.database import close_database, init_database

logger = get_logger(__name__)

STATIC_DIR = Path(__file__).resolve().parent.parent / "bizhub" / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the Supabase clients before the first request is served."""
    await init_database()
    yield
    await close_database()


app = FastAPI(
    title="BizHub",
    description="Business directory with product catalogs and one-to-one chat",
    version="1.0.0",
    lifespan=lifespan,
)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

app.include_router(pages_router)
app.include_router(products_router)
app.include_router(chat_router)
app.include_router(account_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "bizhub"}
