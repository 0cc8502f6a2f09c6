"""SQLite-based card and session store.

Cards keep their tags as a JSON array; sessions keep card ids and responses
as JSON. Uses async-safe operations with threading.
"""

import asyncio
import json
import sqlite3
from collections.abc import Iterator
from contextlib import closing, contextmanager
from pathlib import Path

from lingodrill.domain.entities.card import Card
from lingodrill.domain.entities.session import Session
from lingodrill.domain.value_objects.card_filter import CardFilter
from lingodrill.domain.value_objects.store_stats import StoreStats
from lingodrill.domain.value_objects.tag_counts import TagCounts

MEMORY_DB = ":memory:"


class SqliteCardStore:
    """CardStore implementation on SQLite.

    Thread-safe async operations using asyncio.Lock and to_thread.
    File databases open a short-lived connection per operation; ":memory:"
    keeps one shared connection so data survives between calls.
    """

    def __init__(self, db_path: str | Path = "lingodrill.db"):
        """Initialize store.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
        """
        self._in_memory = str(db_path) == MEMORY_DB
        self._db_path = MEMORY_DB if self._in_memory else Path(db_path)
        self._lock = asyncio.Lock()
        self._shared_conn: sqlite3.Connection | None = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create database schema (async-safe).

        Uses asyncio.to_thread to avoid blocking the event loop.
        """
        if self._initialized:
            return
        async with self._lock:
            await asyncio.to_thread(self._init_db)
            self._initialized = True

    def _open(self) -> sqlite3.Connection:
        """Create SQLite connection with performance PRAGMAs."""
        if not self._in_memory:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA synchronous=NORMAL")
        conn.execute("PRAGMA temp_store=MEMORY")
        return conn

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside a transaction."""
        if self._in_memory:
            if self._shared_conn is None:
                self._shared_conn = self._open()
            with self._shared_conn:
                yield self._shared_conn
            return

        with closing(self._open()) as conn, conn:
            yield conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._connect() as conn:
            if not self._in_memory:
                # WAL mode persists to database file (only needs to be set once)
                conn.execute("PRAGMA journal_mode=WAL")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS cards (
                    id TEXT PRIMARY KEY,
                    content TEXT NOT NULL,
                    source_language TEXT NOT NULL,
                    comment TEXT NOT NULL DEFAULT '',
                    user_translation TEXT NOT NULL DEFAULT '',
                    tags TEXT NOT NULL DEFAULT '[]',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_cards_language
                ON cards(source_language, updated_at)
            """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS sessions (
                    id TEXT PRIMARY KEY,
                    source_language TEXT NOT NULL,
                    target_language TEXT NOT NULL,
                    card_ids TEXT NOT NULL,
                    current_card_index INTEGER NOT NULL DEFAULT 0,
                    responses TEXT NOT NULL DEFAULT '[]',
                    created_at TEXT NOT NULL,
                    completed_at TEXT
                )
            """
            )

    # --- Cards ---

    async def save_card(self, card: Card) -> Card:
        """Insert or replace a card."""
        async with self._lock:
            await asyncio.to_thread(self._save_card_sync, card)
        return card

    def _save_card_sync(self, card: Card) -> None:
        """Synchronous card upsert."""
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO cards (
                    id, content, source_language, comment,
                    user_translation, tags, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    content = excluded.content,
                    source_language = excluded.source_language,
                    comment = excluded.comment,
                    user_translation = excluded.user_translation,
                    tags = excluded.tags,
                    updated_at = excluded.updated_at
                """,
                (
                    card.id,
                    card.content,
                    card.source_language,
                    card.comment,
                    card.user_translation,
                    json.dumps(card.tags),
                    card.created_at.isoformat(),
                    card.updated_at.isoformat(),
                ),
            )

    async def get_card(self, card_id: str) -> Card | None:
        """Get a card by id."""
        async with self._lock:
            return await asyncio.to_thread(self._get_card_sync, card_id)

    def _get_card_sync(self, card_id: str) -> Card | None:
        """Synchronous card lookup."""
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM cards WHERE id = ?", (card_id,)).fetchone()
            return self._row_to_card(row) if row else None

    async def get_all_cards(self, card_filter: CardFilter | None = None) -> list[Card]:
        """Get cards matching a filter, most recently updated first."""
        async with self._lock:
            return await asyncio.to_thread(self._get_all_cards_sync, card_filter or CardFilter())

    def _get_all_cards_sync(self, card_filter: CardFilter) -> list[Card]:
        """Synchronous filtered query."""
        clauses: list[str] = []
        params: list = []

        if card_filter.source_language:
            clauses.append("source_language = ?")
            params.append(card_filter.source_language)

        if card_filter.filters_by_tag:
            tag_clauses = []
            if card_filter.tags:
                placeholders = ", ".join("?" for _ in card_filter.tags)
                tag_clauses.append(
                    "EXISTS (SELECT 1 FROM json_each(cards.tags) "
                    f"WHERE json_each.value IN ({placeholders}))"
                )
                params.extend(card_filter.tags)
            if card_filter.include_untagged:
                tag_clauses.append("json_array_length(cards.tags) = 0")
            clauses.append("(" + " OR ".join(tag_clauses) + ")")

        query = "SELECT * FROM cards"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY updated_at DESC"
        if card_filter.limit is not None:
            query += " LIMIT ?"
            params.append(card_filter.limit)

        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
            return [self._row_to_card(row) for row in rows]

    async def delete_card(self, card_id: str) -> bool:
        """Delete a card by id."""
        async with self._lock:
            return await asyncio.to_thread(self._delete_sync, "cards", card_id)

    async def get_tag_counts(self, source_language: str | None = None) -> TagCounts:
        """Count cards per tag, plus untagged cards."""
        async with self._lock:
            return await asyncio.to_thread(self._get_tag_counts_sync, source_language)

    def _get_tag_counts_sync(self, source_language: str | None) -> TagCounts:
        """Synchronous tag aggregation."""
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT json_each.value AS tag, COUNT(*) AS count
                FROM cards, json_each(cards.tags)
                WHERE ? IS NULL OR cards.source_language = ?
                GROUP BY json_each.value
                """,
                (source_language, source_language),
            ).fetchall()
            untagged = conn.execute(
                """
                SELECT COUNT(*) FROM cards
                WHERE json_array_length(tags) = 0
                AND (? IS NULL OR source_language = ?)
                """,
                (source_language, source_language),
            ).fetchone()
            return TagCounts(
                tags={row["tag"]: row["count"] for row in rows},
                untagged=untagged[0] if untagged else 0,
            )

    # --- Sessions ---

    async def save_session(self, session: Session) -> Session:
        """Insert or replace a session."""
        async with self._lock:
            await asyncio.to_thread(self._save_session_sync, session)
        return session

    def _save_session_sync(self, session: Session) -> None:
        """Synchronous session upsert."""
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO sessions (
                    id, source_language, target_language, card_ids,
                    current_card_index, responses, created_at, completed_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    card_ids = excluded.card_ids,
                    current_card_index = excluded.current_card_index,
                    responses = excluded.responses,
                    completed_at = excluded.completed_at
                """,
                (
                    session.id,
                    session.source_language,
                    session.target_language,
                    json.dumps(session.card_ids),
                    session.current_card_index,
                    json.dumps([r.to_dict() for r in session.responses]),
                    session.created_at.isoformat(),
                    session.completed_at.isoformat() if session.completed_at else None,
                ),
            )

    async def get_session(self, session_id: str) -> Session | None:
        """Get a session by id."""
        async with self._lock:
            return await asyncio.to_thread(self._get_session_sync, session_id)

    def _get_session_sync(self, session_id: str) -> Session | None:
        """Synchronous session lookup."""
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM sessions WHERE id = ?", (session_id,)).fetchone()
            return self._row_to_session(row) if row else None

    async def list_sessions(
        self,
        completed: bool | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Session]:
        """List sessions, newest first."""
        async with self._lock:
            return await asyncio.to_thread(self._list_sessions_sync, completed, limit, offset)

    def _list_sessions_sync(
        self, completed: bool | None, limit: int | None, offset: int
    ) -> list[Session]:
        """Synchronous session listing."""
        query = "SELECT * FROM sessions"
        if completed is True:
            query += " WHERE completed_at IS NOT NULL"
        elif completed is False:
            query += " WHERE completed_at IS NULL"
        # LIMIT -1 means no limit in SQLite
        query += " ORDER BY created_at DESC LIMIT ? OFFSET ?"

        with self._connect() as conn:
            rows = conn.execute(query, (-1 if limit is None else limit, offset)).fetchall()
            return [self._row_to_session(row) for row in rows]

    async def delete_session(self, session_id: str) -> bool:
        """Delete a session by id."""
        async with self._lock:
            return await asyncio.to_thread(self._delete_sync, "sessions", session_id)

    def _delete_sync(self, table: str, record_id: str) -> bool:
        """Synchronous delete from the cards or sessions table."""
        with self._connect() as conn:
            cursor = conn.execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))
            return cursor.rowcount > 0

    async def get_stats(self) -> StoreStats:
        """Count cards and sessions."""
        async with self._lock:
            return await asyncio.to_thread(self._get_stats_sync)

    def _get_stats_sync(self) -> StoreStats:
        """Synchronous record counts."""
        with self._connect() as conn:
            cards = conn.execute("SELECT COUNT(*) FROM cards").fetchone()[0]
            sessions, completed = conn.execute(
                "SELECT COUNT(*), COUNT(completed_at) FROM sessions"
            ).fetchone()
            return StoreStats(
                cards=cards,
                sessions=sessions,
                active_sessions=sessions - completed,
                completed_sessions=completed,
            )

    def _row_to_card(self, row: sqlite3.Row) -> Card:
        """Convert database row to Card."""
        return Card.from_dict({**dict(row), "tags": json.loads(row["tags"])})

    def _row_to_session(self, row: sqlite3.Row) -> Session:
        """Convert database row to Session."""
        return Session.from_dict(
            {
                **dict(row),
                "card_ids": json.loads(row["card_ids"]),
                "responses": json.loads(row["responses"]),
            }
        )

    def close(self) -> None:
        """Close the shared in-memory connection, if any.

        File databases use short-lived connections per operation.
        """
        if self._shared_conn is not None:
            self._shared_conn.close()
            self._shared_conn = None
