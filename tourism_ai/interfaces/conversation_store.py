"""
Conversation Store - Persists chat history for sessions
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from datetime import timedelta

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..config import settings
from ..schemas.ai_schemas import ChatMessage

logger = logging.getLogger(__name__)


class ConversationHistory(ABC):
    """Contract for the per-session message history used by the chat engine"""

    @abstractmethod
    async def append_message(self, session_id: str, message: ChatMessage) -> ChatMessage:
        pass

    @abstractmethod
    async def get_history(self, session_id: str, limit: int = 50) -> List[ChatMessage]:
        pass


class ConversationStore(ConversationHistory):
    """
    Stores and retrieves conversation history

    Uses Redis for fast access and automatic expiration
    Falls back to in-memory storage if Redis unavailable
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_hours: int = 24,
        use_redis: bool = True
    ):
        """
        Initialize conversation store

        Args:
            redis_url: Redis connection URL
            ttl_hours: Hours to keep conversation history
            use_redis: False keeps everything in memory (tests, local dev)
        """
        self.redis_url = redis_url or settings.redis_url
        self.ttl = timedelta(hours=ttl_hours)
        self.use_redis = use_redis
        self.redis_client: Optional[redis.Redis] = None

        # Fallback in-memory storage
        self.memory_store: Dict[str, List[ChatMessage]] = {}

        self._initialized = False

    async def _ensure_connected(self):
        """Ensure Redis connection is established"""
        if self._initialized:
            return

        if not self.use_redis:
            self._initialized = True
            return

        try:
            self.redis_client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True
            )
            # Test connection
            await self.redis_client.ping()
            logger.info("ConversationStore connected to Redis")
        except (RedisError, OSError) as e:
            logger.warning(f"Redis connection failed, using in-memory storage: {e}")
            self.redis_client = None
        self._initialized = True

    def _get_key(self, session_id: str) -> str:
        """Generate Redis key for a session"""
        return f"conversation:{session_id}"

    def _remember(self, session_id: str, message: ChatMessage):
        self.memory_store.setdefault(session_id, []).append(message)

    async def append_message(self, session_id: str, message: ChatMessage) -> ChatMessage:
        """
        Append a message to a session's history

        Args:
            session_id: Session identifier
            message: User or bot message

        Returns:
            The stored message
        """
        await self._ensure_connected()

        if self.redis_client:
            try:
                key = self._get_key(session_id)

                # Append message to list
                await self.redis_client.rpush(key, message.model_dump_json(by_alias=True))

                # Set expiration
                await self.redis_client.expire(key, int(self.ttl.total_seconds()))

                logger.debug(f"Saved message to Redis: session={session_id}")
                return message
            except RedisError as e:
                logger.error(f"Error saving message, keeping it in memory: {e}")

        self._remember(session_id, message)
        logger.debug(f"Saved message to memory: session={session_id}")
        return message

    async def get_history(self, session_id: str, limit: int = 50) -> List[ChatMessage]:
        """
        Get conversation history for a session

        Args:
            session_id: Session identifier
            limit: Maximum messages to retrieve

        Returns:
            Messages, oldest first
        """
        await self._ensure_connected()

        if self.redis_client:
            try:
                raw = await self.redis_client.lrange(self._get_key(session_id), -limit, -1)
                if raw:
                    return [ChatMessage.model_validate(json.loads(m)) for m in raw]
            except RedisError as e:
                logger.error(f"Error getting history: {e}")

        return list(self.memory_store.get(session_id, [])[-limit:])

    async def get_user_sessions(self, user_id: str) -> List[str]:
        """
        Get all session IDs for a user

        Args:
            user_id: User identifier

        Returns:
            List of session IDs
        """
        await self._ensure_connected()

        sessions = [
            session_id for session_id, messages in self.memory_store.items()
            if messages and messages[0].user_id == user_id
        ]

        if self.redis_client:
            try:
                async for key in self.redis_client.scan_iter(match="conversation:*", count=100):
                    first = await self.redis_client.lrange(key, 0, 0)
                    if first and json.loads(first[0]).get("userId") == user_id:
                        session_id = key.replace("conversation:", "", 1)
                        if session_id not in sessions:
                            sessions.append(session_id)
            except RedisError as e:
                logger.error(f"Error getting user sessions: {e}")

        return sessions

    async def clear_session(self, session_id: str) -> bool:
        """
        Clear all messages for a session

        Returns:
            True when something was removed
        """
        await self._ensure_connected()

        removed = self.memory_store.pop(session_id, None) is not None

        if self.redis_client:
            try:
                removed = bool(await self.redis_client.delete(self._get_key(session_id))) or removed
            except RedisError as e:
                logger.error(f"Error clearing session: {e}")

        logger.info(f"Cleared session: {session_id}")
        return removed

    async def close(self):
        """Close Redis connection"""
        if self.redis_client:
            await self.redis_client.aclose()
            logger.info("ConversationStore connection closed")


def build_conversation_store(config) -> ConversationStore:
    """Conversation store for the given settings"""
    return ConversationStore(
        redis_url=config.redis_url,
        ttl_hours=config.HISTORY_TTL_HOURS,
        use_redis=config.REDIS_ENABLED
    )
