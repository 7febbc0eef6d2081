"""Domain services wrapping repositories."""
from .catalog import BusinessDetail, CatalogService
from .chat import ChatDomain, ChatStart, ConversationView
from .products import ManagerView, ProductManager
from .users import UsersDomain

__all__ = [
    "BusinessDetail",
    "CatalogService",
    "ChatDomain",
    "ChatStart",
    "ConversationView",
    "ManagerView",
    "ProductManager",
    "UsersDomain",
]
