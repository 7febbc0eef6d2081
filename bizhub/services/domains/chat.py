"""
Chat Domain Service

Starting a conversation is find-or-create keyed on the unordered
participant pair plus the business scope. The lookup and the insert are
two separate requests, so concurrent starts for a brand-new pair can
both insert unless the unique index from
migrations/001_conversation_unique.sql is in place. With the index, the
losing insert fails with 23505 and the existing row is used instead.
"""
from dataclasses import dataclass
from typing import List, Optional

from bizhub.errors import (
    ERROR_CHAT_TARGET_MISSING,
    ERROR_CREATING_CHAT,
    ERROR_EMPTY_MESSAGE,
    ERROR_INVALID_CHAT_TARGET,
    ERROR_LOADING_CONVERSATION,
    ERROR_MESSAGE_TOO_LONG,
    ERROR_SELF_CHAT,
    ERROR_SENDING_MESSAGE,
    ERROR_STARTING_CHAT,
    PG_UNIQUE_VIOLATION,
    AuthRequiredError,
    NotParticipantError,
    RemoteCallError,
    ValidationError,
)
from bizhub.logging import get_logger, sanitize_id_for_logging
from bizhub.services.models import Conversation, Message, Session
from bizhub.services.repositories import REMOTE_ERRORS, ConversationRepository
from bizhub.services.repositories.conversation_repo import is_filter_safe_id

logger = get_logger(__name__)

MAX_MESSAGE_LENGTH = 4000


@dataclass(frozen=True)
class ChatStart:
    """Outcome of start_chat."""
    conversation_id: str
    created: bool


@dataclass
class ConversationView:
    conversation: Conversation
    messages: List[Message]


class ChatDomain:
    """Conversation find-or-create and messaging."""

    def __init__(self, repo: ConversationRepository):
        self.repo = repo

    async def _lookup(self, current_user_id: str, target_user_id: str, business_id: Optional[str]) -> Optional[str]:
        try:
            existing = await self.repo.find(current_user_id, target_user_id, business_id)
        except REMOTE_ERRORS as e:
            logger.error(f"Error finding conversation: {e}")
            raise RemoteCallError(ERROR_STARTING_CHAT) from e
        # First row wins; PostgREST order carries no meaning here
        return existing[0] if existing else None

    async def start_chat(
        self,
        session: Optional[Session],
        target_user_id: str,
        business_id: Optional[str] = None,
    ) -> ChatStart:
        """
        Resolve the conversation between the session user and target_user_id.

        Args:
            session: current session; None raises AuthRequiredError before any query
            target_user_id: the other participant
            business_id: scope; None means a general (unscoped) conversation

        Raises:
            AuthRequiredError, ValidationError, RemoteCallError
        """
        if not target_user_id:
            raise ValidationError(ERROR_CHAT_TARGET_MISSING)
        business_id = business_id or None
        if not is_filter_safe_id(target_user_id) or (business_id and not is_filter_safe_id(business_id)):
            logger.warning(f"Rejected chat start with malformed ids (target={sanitize_id_for_logging(target_user_id)})")
            raise ValidationError(ERROR_INVALID_CHAT_TARGET)
        if session is None:
            raise AuthRequiredError()

        current_user_id = session.user_id
        if current_user_id == target_user_id:
            raise ValidationError(ERROR_SELF_CHAT)

        existing_id = await self._lookup(current_user_id, target_user_id, business_id)
        if existing_id:
            return ChatStart(conversation_id=existing_id, created=False)

        try:
            conversation = await self.repo.create(current_user_id, target_user_id, business_id)
        except REMOTE_ERRORS as e:
            if getattr(e, "code", None) == PG_UNIQUE_VIOLATION:
                # Lost the race against a concurrent start; the other row is authoritative
                existing_id = await self._lookup(current_user_id, target_user_id, business_id)
                if existing_id:
                    logger.info(f"Conversation {sanitize_id_for_logging(existing_id)} created concurrently, reusing")
                    return ChatStart(conversation_id=existing_id, created=False)
            logger.error(f"Error creating conversation: {e}")
            raise RemoteCallError(ERROR_CREATING_CHAT) from e

        logger.info(
            f"Conversation {sanitize_id_for_logging(conversation.id)} created "
            f"(business={sanitize_id_for_logging(business_id)})"
        )
        return ChatStart(conversation_id=conversation.id, created=True)

    async def list_conversations(self, session: Session) -> List[Conversation]:
        try:
            return await self.repo.get_for_user(session.user_id)
        except REMOTE_ERRORS as e:
            logger.error(f"Error listing conversations: {e}")
            raise RemoteCallError(ERROR_LOADING_CONVERSATION) from e

    async def _participant_conversation(self, session: Session, conversation_id: str) -> Conversation:
        try:
            conversation = await self.repo.get_by_id(conversation_id)
        except REMOTE_ERRORS as e:
            logger.error(f"Error loading conversation {sanitize_id_for_logging(conversation_id)}: {e}")
            raise RemoteCallError(ERROR_LOADING_CONVERSATION) from e

        if conversation is None or not conversation.has_participant(session.user_id):
            raise NotParticipantError()
        return conversation

    async def open_conversation(self, session: Session, conversation_id: str) -> ConversationView:
        """Conversation plus its messages, for participants only."""
        conversation = await self._participant_conversation(session, conversation_id)
        try:
            messages = await self.repo.get_messages(conversation_id)
        except REMOTE_ERRORS as e:
            logger.error(f"Error loading messages: {e}")
            raise RemoteCallError(ERROR_LOADING_CONVERSATION) from e
        return ConversationView(conversation=conversation, messages=messages)

    async def send_message(self, session: Session, conversation_id: str, content: str) -> Message:
        content = (content or "").strip()
        if not content:
            raise ValidationError(ERROR_EMPTY_MESSAGE)
        if len(content) > MAX_MESSAGE_LENGTH:
            raise ValidationError(ERROR_MESSAGE_TOO_LONG)

        await self._participant_conversation(session, conversation_id)
        try:
            return await self.repo.add_message(conversation_id, session.user_id, content)
        except REMOTE_ERRORS as e:
            logger.error(f"Error sending message: {e}")
            raise RemoteCallError(ERROR_SENDING_MESSAGE) from e
