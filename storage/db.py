"""
SQLite storage. One file, one connection, no ORM.

Tables:
- snapshots: every persisted observation of a URL, append-only
- latest_snapshots: pointer (competitor_id, url) -> newest snapshot id
- summaries: analyzed items, append-only

Nothing here updates or deletes a snapshot or summary row. The pointer
table is the only thing that moves, and it moves in the same transaction
as the insert it points at.
"""

import json
import sqlite3
from datetime import datetime
from pathlib import Path

from models import ChangeType, FetchMethod, PageContent, Snapshot, SourceType, Summary


class PersistenceError(Exception):
    """A read or write against the store failed. Aborts the current item only."""
    pass


class Storage:
    def __init__(self, db_path: Path):
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        self._conn.row_factory = sqlite3.Row
        self._migrate()

    def _migrate(self):
        """Create tables if they don't exist. No migration framework needed."""
        self._conn.executescript("""
            CREATE TABLE IF NOT EXISTS snapshots (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                competitor_id TEXT NOT NULL,
                url TEXT NOT NULL,
                timestamp TEXT NOT NULL,
                content TEXT NOT NULL,
                hash TEXT NOT NULL,
                method TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_snapshots_competitor
                ON snapshots(competitor_id, url);

            CREATE TABLE IF NOT EXISTS latest_snapshots (
                competitor_id TEXT NOT NULL,
                url TEXT NOT NULL,
                snapshot_id INTEGER NOT NULL,
                PRIMARY KEY (competitor_id, url),
                FOREIGN KEY (snapshot_id) REFERENCES snapshots(id)
            );

            CREATE TABLE IF NOT EXISTS summaries (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                competitor_id TEXT NOT NULL,
                competitor_name TEXT NOT NULL,
                title TEXT NOT NULL,
                summary TEXT NOT NULL,
                source TEXT NOT NULL,
                pub_date TEXT NOT NULL DEFAULT '',
                date TEXT NOT NULL,
                source_type TEXT NOT NULL,
                change_type TEXT,
                changes TEXT,
                change_hash TEXT
            );

            CREATE INDEX IF NOT EXISTS idx_summaries_source
                ON summaries(source);
            CREATE INDEX IF NOT EXISTS idx_summaries_change_hash
                ON summaries(change_hash);
            CREATE INDEX IF NOT EXISTS idx_summaries_competitor
                ON summaries(competitor_id);
        """)
        self._conn.commit()

    # ── Snapshots ──

    def save_snapshot(self, snapshot: Snapshot) -> int:
        """Append a snapshot and move the (competitor, url) pointer to it. Returns its id."""
        try:
            with self._conn:
                cursor = self._conn.execute(
                    """INSERT INTO snapshots
                       (competitor_id, url, timestamp, content, hash, method)
                       VALUES (?, ?, ?, ?, ?, ?)""",
                    (
                        snapshot.competitor_id,
                        snapshot.url,
                        snapshot.timestamp.isoformat(),
                        json.dumps(snapshot.content.to_dict()),
                        snapshot.hash,
                        snapshot.method.value,
                    ),
                )
                snapshot_id = cursor.lastrowid
                self._conn.execute(
                    """INSERT INTO latest_snapshots (competitor_id, url, snapshot_id)
                       VALUES (?, ?, ?)
                       ON CONFLICT(competitor_id, url)
                       DO UPDATE SET snapshot_id = excluded.snapshot_id""",
                    (snapshot.competitor_id, snapshot.url, snapshot_id),
                )
            return snapshot_id
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to save snapshot for {snapshot.url}: {e}") from e

    def get_last_snapshot(self, competitor_id: str, url: str) -> Snapshot | None:
        """Most recent snapshot for this competitor and URL, via the pointer table."""
        try:
            row = self._conn.execute(
                "SELECT s.* FROM latest_snapshots l "
                "JOIN snapshots s ON s.id = l.snapshot_id "
                "WHERE l.competitor_id = ? AND l.url = ?",
                (competitor_id, url),
            ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to read last snapshot for {url}: {e}") from e
        return self._row_to_snapshot(row) if row else None

    def get_snapshot_history(self, competitor_id: str, url: str) -> list[Snapshot]:
        """Full history for one URL, newest first."""
        try:
            rows = self._conn.execute(
                "SELECT * FROM snapshots WHERE competitor_id = ? AND url = ? ORDER BY id DESC",
                (competitor_id, url),
            ).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to read snapshot history for {url}: {e}") from e
        return [self._row_to_snapshot(r) for r in rows]

    def count_snapshots(self, competitor_id: str | None = None) -> int:
        query = "SELECT COUNT(*) FROM snapshots"
        params: list = []
        if competitor_id is not None:
            query += " WHERE competitor_id = ?"
            params.append(competitor_id)
        try:
            return self._conn.execute(query, params).fetchone()[0]
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to count snapshots: {e}") from e

    # ── Summaries ──

    def insert_summary(self, summary: Summary) -> int:
        try:
            with self._conn:
                cursor = self._conn.execute(
                    """INSERT INTO summaries
                       (competitor_id, competitor_name, title, summary, source, pub_date,
                        date, source_type, change_type, changes, change_hash)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        summary.competitor_id,
                        summary.competitor_name,
                        summary.title,
                        summary.summary,
                        summary.source,
                        summary.pub_date or "",
                        summary.date.isoformat(),
                        summary.source_type.value,
                        summary.change_type.value if summary.change_type else None,
                        json.dumps(summary.changes) if summary.changes is not None else None,
                        summary.change_hash,
                    ),
                )
            return cursor.lastrowid
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to save summary for {summary.source}: {e}") from e

    def has_summary_source(self, source: str) -> bool:
        """RSS dedup: has an item with this link already been summarized?"""
        try:
            row = self._conn.execute(
                "SELECT 1 FROM summaries WHERE source = ? AND source_type = ? LIMIT 1",
                (source, SourceType.RSS.value),
            ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to check summaries for {source}: {e}") from e
        return row is not None

    def has_change_hash(self, change_hash: str) -> bool:
        """Website dedup: has this exact analysis input already been summarized?"""
        try:
            row = self._conn.execute(
                "SELECT 1 FROM summaries WHERE change_hash = ? LIMIT 1", (change_hash,)
            ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to check change hash {change_hash}: {e}") from e
        return row is not None

    def get_summaries(self, competitor_id: str | None = None, limit: int | None = None) -> list[Summary]:
        """Summaries in insertion order, optionally filtered."""
        query = "SELECT * FROM summaries"
        params: list = []

        if competitor_id:
            query += " WHERE competitor_id = ?"
            params.append(competitor_id)

        query += " ORDER BY id ASC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        try:
            rows = self._conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to read summaries: {e}") from e
        return [self._row_to_summary(r) for r in rows]

    def get_stats(self) -> dict:
        """Basic stats for debugging."""
        try:
            total = self._conn.execute("SELECT COUNT(*) FROM summaries").fetchone()[0]
            by_competitor = {}
            for row in self._conn.execute(
                "SELECT competitor_id, COUNT(*) as cnt FROM summaries GROUP BY competitor_id"
            ):
                by_competitor[row[0]] = row[1]
            by_source_type = {}
            for row in self._conn.execute(
                "SELECT source_type, COUNT(*) as cnt FROM summaries GROUP BY source_type"
            ):
                by_source_type[row[0]] = row[1]
            tracked = self._conn.execute("SELECT COUNT(*) FROM latest_snapshots").fetchone()[0]
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to read stats: {e}") from e
        return {
            "total_summaries": total,
            "by_competitor": by_competitor,
            "by_source_type": by_source_type,
            "total_snapshots": self.count_snapshots(),
            "tracked_urls": tracked,
        }

    def _row_to_snapshot(self, row: sqlite3.Row) -> Snapshot:
        return Snapshot(
            url=row["url"],
            competitor_id=row["competitor_id"],
            content=PageContent.from_dict(json.loads(row["content"])),
            hash=row["hash"],
            method=FetchMethod(row["method"]),
            timestamp=datetime.fromisoformat(row["timestamp"]),
        )

    def _row_to_summary(self, row: sqlite3.Row) -> Summary:
        return Summary(
            competitor_id=row["competitor_id"],
            competitor_name=row["competitor_name"],
            title=row["title"],
            summary=row["summary"],
            source=row["source"],
            pub_date=row["pub_date"],
            source_type=SourceType(row["source_type"]),
            date=datetime.fromisoformat(row["date"]),
            change_type=ChangeType(row["change_type"]) if row["change_type"] else None,
            changes=json.loads(row["changes"]) if row["changes"] is not None else None,
            change_hash=row["change_hash"],
        )

    def close(self):
        self._conn.close()
