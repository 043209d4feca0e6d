"""
Persistence for messages and conversation status.
"""

from psycopg import sql
from psycopg.types.json import Jsonb

from viah.db.helpers import DatabaseError, execute_query, fetch_all, fetch_one, fetch_val
from viah.features.messaging.domain import ConversationStatus, Message
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class MessagingRepositoryError(DatabaseError):
    """More specific exception for messaging persistence failures."""


class MessageRepository:
    MESSAGE_COLUMNS = """
        id, conversation_id, wedding_id, vendor_id, event_id, sender_id, sender_type,
        content, attachments, is_read, message_type, booking_id, created_at
    """

    @classmethod
    def _row_to_message(cls, row: dict | None) -> Message | None:
        return Message.model_validate(row) if row else None

    @classmethod
    async def get(cls, message_id: str) -> Message | None:
        query = f"SELECT {cls.MESSAGE_COLUMNS} FROM messages WHERE id = %s"
        return cls._row_to_message(await fetch_one(query, (message_id,)))

    @classmethod
    async def list_for_conversation(cls, conversation_id: str) -> list[Message]:
        query = f"""
            SELECT {cls.MESSAGE_COLUMNS}
            FROM messages
            WHERE conversation_id = %s
            ORDER BY created_at ASC
        """
        rows = await fetch_all(query, (conversation_id,))
        return [cls._row_to_message(row) for row in rows]

    @classmethod
    async def create(
        cls,
        *,
        conversation_id: str,
        wedding_id: str,
        vendor_id: str,
        event_id: str | None,
        sender_id: str,
        sender_type: str,
        content: str,
        attachments: list | None = None,
        message_type: str = "message",
        booking_id: str | None = None,
    ) -> Message:
        query = f"""
            INSERT INTO messages (
                conversation_id, wedding_id, vendor_id, event_id, sender_id, sender_type,
                content, attachments, message_type, booking_id
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {cls.MESSAGE_COLUMNS}
        """
        row = await fetch_one(
            query,
            (
                conversation_id,
                wedding_id,
                vendor_id,
                event_id,
                sender_id,
                sender_type,
                content,
                Jsonb(attachments) if attachments is not None else None,
                message_type,
                booking_id,
            ),
        )
        if not row:
            raise MessagingRepositoryError("Failed to create message", operation="create_message")
        return cls._row_to_message(row)

    @classmethod
    async def mark_read(cls, message_id: str) -> Message | None:
        query = f"""
            UPDATE messages SET is_read = TRUE
            WHERE id = %s
            RETURNING {cls.MESSAGE_COLUMNS}
        """
        return cls._row_to_message(await fetch_one(query, (message_id,)))

    @classmethod
    async def mark_conversation_read(cls, conversation_id: str, reader_type: str) -> int:
        """Mark everything the other side sent as read; returns rows updated."""
        query = """
            UPDATE messages SET is_read = TRUE
            WHERE conversation_id = %s AND sender_type <> %s AND NOT is_read
        """
        return await execute_query(query, (conversation_id, reader_type))

    @classmethod
    async def count_unread(cls, conversation_id: str, recipient_type: str) -> int:
        query = """
            SELECT COUNT(*) FROM messages
            WHERE conversation_id = %s AND sender_type <> %s AND NOT is_read
        """
        return int(await fetch_val(query, (conversation_id, recipient_type)) or 0)

    @classmethod
    async def conversation_summaries(
        cls, scope_column: str, scope_id: str, recipient_type: str
    ) -> list[dict]:
        """
        One row per conversation in a wedding or vendor scope, most recent first.

        Rows carry unread count (from the recipient's side), message totals,
        first/last timestamps and the latest message.
        """
        if scope_column not in ("wedding_id", "vendor_id"):
            raise ValueError(f"Unsupported conversation scope: {scope_column}")

        query = sql.SQL(
            """
            WITH stats AS (
                SELECT conversation_id, wedding_id, vendor_id, event_id,
                       COUNT(*) FILTER (WHERE NOT is_read AND sender_type <> %s) AS unread_count,
                       COUNT(*) AS total_messages,
                       MIN(created_at) AS first_message_at,
                       MAX(created_at) AS last_message_at
                FROM messages
                WHERE {scope} = %s
                GROUP BY conversation_id, wedding_id, vendor_id, event_id
            ),
            latest AS (
                SELECT DISTINCT ON (conversation_id)
                       conversation_id,
                       content AS last_message_content,
                       sender_type AS last_message_sender_type
                FROM messages
                WHERE {scope} = %s
                ORDER BY conversation_id, created_at DESC
            )
            SELECT stats.*, latest.last_message_content, latest.last_message_sender_type
            FROM stats
            JOIN latest USING (conversation_id)
            ORDER BY stats.last_message_at DESC
            """
        ).format(scope=sql.Identifier(scope_column))
        return await fetch_all(query, (recipient_type, scope_id, scope_id))

    @classmethod
    async def unread_for_wedding(cls, wedding_id: str) -> list[Message]:
        """Unread messages addressed to the couple, newest first."""
        query = f"""
            SELECT {cls.MESSAGE_COLUMNS}
            FROM messages
            WHERE wedding_id = %s AND sender_type <> 'couple' AND NOT is_read
            ORDER BY created_at DESC
        """
        rows = await fetch_all(query, (wedding_id,))
        return [cls._row_to_message(row) for row in rows]


class ConversationStatusRepository:
    STATUS_COLUMNS = """
        conversation_id, wedding_id, vendor_id, event_id, status, closed_by,
        closed_by_type, closure_reason, closed_at
    """

    @classmethod
    def _row_to_status(cls, row: dict | None) -> ConversationStatus | None:
        return ConversationStatus.model_validate(row) if row else None

    @classmethod
    async def get(cls, conversation_id: str) -> ConversationStatus | None:
        query = f"SELECT {cls.STATUS_COLUMNS} FROM conversation_status WHERE conversation_id = %s"
        return cls._row_to_status(await fetch_one(query, (conversation_id,)))

    @classmethod
    async def close(
        cls,
        *,
        conversation_id: str,
        wedding_id: str,
        vendor_id: str,
        event_id: str | None,
        closed_by: str,
        closed_by_type: str,
        reason: str | None,
    ) -> ConversationStatus:
        """
        Upsert a closed status. An already-closed row is returned untouched,
        keeping the first closer and reason.
        """
        query = f"""
            INSERT INTO conversation_status (
                conversation_id, wedding_id, vendor_id, event_id, status,
                closed_by, closed_by_type, closure_reason, closed_at
            )
            VALUES (%s, %s, %s, %s, 'closed', %s, %s, %s, NOW())
            ON CONFLICT (conversation_id) DO UPDATE
            SET status = 'closed',
                closed_by = EXCLUDED.closed_by,
                closed_by_type = EXCLUDED.closed_by_type,
                closure_reason = EXCLUDED.closure_reason,
                closed_at = EXCLUDED.closed_at,
                updated_at = NOW()
            WHERE conversation_status.status <> 'closed'
            RETURNING {cls.STATUS_COLUMNS}
        """
        row = await fetch_one(
            query,
            (conversation_id, wedding_id, vendor_id, event_id, closed_by, closed_by_type, reason),
        )
        if row:
            logger.info(
                "Conversation closed",
                conversation_id=conversation_id,
                closed_by_type=closed_by_type,
            )
            return cls._row_to_status(row)

        existing = await cls.get(conversation_id)
        if not existing:
            raise MessagingRepositoryError(
                "Failed to close conversation", operation="close_conversation"
            )
        return existing
