"""Conversation Repository - one-to-one chats and their messages."""
import re
from typing import List, Optional

from bizhub.services.models import Conversation, Message

from .base import BaseRepository

# Ids allowed inside an or=() filter: no PostgREST separators (, . : ( ) quotes, whitespace)
_FILTER_SAFE_ID = re.compile(r"[A-Za-z0-9_-]{1,64}")


def is_filter_safe_id(value: Optional[str]) -> bool:
    """True for UUID-like ids that can be spliced into a PostgREST filter."""
    return bool(value) and _FILTER_SAFE_ID.fullmatch(value) is not None


def pair_filter(user_a: str, user_b: str) -> str:
    """PostgREST ``or`` filter matching the unordered pair {user_a, user_b}."""
    if not (is_filter_safe_id(user_a) and is_filter_safe_id(user_b)):
        raise ValueError("participant ids must be plain identifiers")
    return (
        f"and(participant1_id.eq.{user_a},participant2_id.eq.{user_b}),"
        f"and(participant1_id.eq.{user_b},participant2_id.eq.{user_a})"
    )


class ConversationRepository(BaseRepository):
    """Conversation and message operations."""

    table = "conversations"

    async def find(self, user_a: str, user_b: str, business_id: Optional[str]) -> List[str]:
        """
        IDs of conversations between two users in exactly this scope.

        ``business_id=None`` matches general conversations only
        (``business_id IS NULL``), never business-scoped ones.
        """
        query = self._query().select("id").or_(pair_filter(user_a, user_b))
        if business_id:
            query = query.eq("business_id", business_id)
        else:
            query = query.is_("business_id", "null")

        result = await query.execute()
        return [row["id"] for row in result.data]

    async def create(self, participant1_id: str, participant2_id: str, business_id: Optional[str]) -> Conversation:
        result = (
            await self._query()
            .insert(
                {
                    "participant1_id": participant1_id,
                    "participant2_id": participant2_id,
                    "business_id": business_id,
                }
            )
            .execute()
        )
        return Conversation(**result.data[0])

    async def get_by_id(self, conversation_id: str) -> Optional[Conversation]:
        result = await self._query().select("*").eq("id", conversation_id).execute()
        return Conversation(**result.data[0]) if result.data else None

    async def get_for_user(self, user_id: str) -> List[Conversation]:
        """Conversations where the user is either participant, newest first."""
        result = (
            await self._query()
            .select("*")
            .or_(f"participant1_id.eq.{user_id},participant2_id.eq.{user_id}")
            .order("created_at", desc=True)
            .execute()
        )
        return [Conversation(**c) for c in result.data]

    async def get_messages(self, conversation_id: str, limit: int = 100) -> List[Message]:
        """Messages in chronological order."""
        result = (
            await self.client.table("messages")
            .select("*")
            .eq("conversation_id", conversation_id)
            .order("created_at", desc=False)
            .limit(limit)
            .execute()
        )
        return [Message(**m) for m in result.data]

    async def add_message(self, conversation_id: str, sender_id: str, content: str) -> Message:
        result = (
            await self.client.table("messages")
            .insert({"conversation_id": conversation_id, "sender_id": sender_id, "content": content})
            .execute()
        )
        return Message(**result.data[0])
