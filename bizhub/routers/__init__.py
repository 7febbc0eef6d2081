"""Page routers."""
from .account import router as account_router
from .chat import router as chat_router
from .pages import router as pages_router
from .products import router as products_router

__all__ = ["account_router", "chat_router", "pages_router", "products_router"]
