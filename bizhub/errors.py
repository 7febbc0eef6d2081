"""
Error messages and exception types.

Message strings are shown to users verbatim as notices, so they are kept
here instead of being repeated across routers and domains.
"""

# Auth / access
ERROR_UNAUTHORIZED = "Unauthorized"
ERROR_LOGIN_FAILED = "Invalid email or password"
ERROR_NOT_PARTICIPANT = "You are not a participant in this conversation"

# Business / catalog
ERROR_BUSINESS_NOT_FOUND = "Business not found"
ERROR_BUSINESS_ID_MISSING = "Business ID not provided"
ERROR_LOADING_BUSINESSES = "Error loading businesses."
ERROR_LOADING_CATEGORIES = "Error loading categories"

# Products
ERROR_LOADING_PRODUCTS = "Error loading products"
ERROR_LOADING_PRODUCT = "Error loading product"
ERROR_SAVING_PRODUCT = "Error saving product"
ERROR_DELETING_PRODUCT = "Error deleting product"
ERROR_PRODUCT_NOT_FOUND = "Product not found"

# Chat
ERROR_SELF_CHAT = "You cannot chat with yourself"
ERROR_CHAT_TARGET_MISSING = "No one to chat with"
ERROR_INVALID_CHAT_TARGET = "Invalid chat target"
ERROR_STARTING_CHAT = "Error starting chat"
ERROR_CREATING_CHAT = "Error creating chat"
ERROR_LOADING_CONVERSATION = "Error loading conversation"
ERROR_SENDING_MESSAGE = "Error sending message"
ERROR_EMPTY_MESSAGE = "Message cannot be empty"
ERROR_MESSAGE_TOO_LONG = "Message is too long"

# Generic
ERROR_UNEXPECTED = "Unexpected error"

# Postgres unique_violation
PG_UNIQUE_VIOLATION = "23505"


class BizHubError(Exception):
    """Base error. ``str(error)`` is the user-facing message."""

    def __init__(self, message: str = ERROR_UNEXPECTED):
        super().__init__(message)
        self.message = message


class RemoteCallError(BizHubError):
    """A Supabase request failed (network or service error)."""


class AuthRequiredError(BizHubError):
    """The operation needs a signed-in user."""

    def __init__(self, message: str = ERROR_UNAUTHORIZED):
        super().__init__(message)


class OwnershipError(BizHubError):
    """The session user does not own the requested business."""

    def __init__(self, message: str, business_id: str | None, user_id: str | None):
        super().__init__(message)
        self.business_id = business_id
        self.user_id = user_id


class NotParticipantError(BizHubError):
    """The session user is not part of the requested conversation."""

    def __init__(self, message: str = ERROR_NOT_PARTICIPANT):
        super().__init__(message)


class ValidationError(BizHubError):
    """Input that the handler cannot act on (self-chat, empty message...)."""
