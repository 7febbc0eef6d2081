"""
Repository Pattern for Database Operations

- UserRepository: profile rows for the navbar
- CategoryRepository: category grid
- BusinessRepository: listings, ownership lookups
- ProductRepository: per-business product CRUD
- ConversationRepository: conversations and messages
"""
from .base import REMOTE_ERRORS
from .business_repo import BusinessRepository
from .category_repo import CategoryRepository
from .conversation_repo import ConversationRepository
from .product_repo import ProductRepository
from .user_repo import UserRepository

__all__ = [
    "REMOTE_ERRORS",
    "UserRepository",
    "CategoryRepository",
    "BusinessRepository",
    "ProductRepository",
    "ConversationRepository",
]
