import logging
import os
import sqlite3

from utils.constants import DB_FILE, DEFAULT_CATEGORIES, DEFAULT_CURRENCY, DEFAULT_THEME

logger = logging.getLogger(__name__)


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            if self.db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._seed_defaults(conn)
        conn.commit()

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS users (
                id            INTEGER PRIMARY KEY AUTOINCREMENT,
                email         TEXT    NOT NULL UNIQUE,
                password_hash TEXT    NOT NULL,
                created_at    TEXT    NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS profiles (
                user_id    INTEGER PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
                full_name  TEXT NOT NULL DEFAULT '',
                theme      TEXT NOT NULL DEFAULT 'system'
                           CHECK(theme IN ('light','dark','system')),
                currency   TEXT NOT NULL DEFAULT 'BRL',
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS categories (
                id         INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id    INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                name       TEXT NOT NULL,
                type       TEXT NOT NULL CHECK(type IN ('income','expense')),
                color      TEXT NOT NULL DEFAULT '#6366F1',
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE UNIQUE INDEX IF NOT EXISTS idx_categories_user_type_name
                ON categories(user_id, type, name COLLATE NOCASE);

            CREATE TABLE IF NOT EXISTS transactions (
                id                    INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id               INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                type                  TEXT NOT NULL CHECK(type IN ('income','expense')),
                amount                TEXT NOT NULL CHECK(CAST(amount AS REAL) > 0),
                description           TEXT NOT NULL DEFAULT '',
                transaction_date      TEXT NOT NULL,
                due_date              TEXT,
                category_id           INTEGER REFERENCES categories(id) ON DELETE SET NULL,
                is_paid               INTEGER NOT NULL DEFAULT 0,
                is_fixed              INTEGER NOT NULL DEFAULT 0,
                is_recurring          INTEGER NOT NULL DEFAULT 0,
                recurring_interval    TEXT
                                      CHECK(recurring_interval IN ('weekly','monthly','yearly')),
                is_installment        INTEGER NOT NULL DEFAULT 0,
                installment_number    INTEGER,
                installment_count     INTEGER,
                parent_transaction_id INTEGER REFERENCES transactions(id) ON DELETE SET NULL,
                created_at            TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at            TEXT NOT NULL DEFAULT (datetime('now')),
                CHECK(is_installment = 0 OR (
                    installment_count >= 2
                    AND installment_number BETWEEN 1 AND installment_count
                ))
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_user_date
                ON transactions(user_id, transaction_date);
            CREATE INDEX IF NOT EXISTS idx_transactions_due_date
                ON transactions(due_date);
            CREATE INDEX IF NOT EXISTS idx_transactions_category_id
                ON transactions(category_id);
            CREATE INDEX IF NOT EXISTS idx_transactions_parent
                ON transactions(parent_transaction_id);

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        defaults = [
            ("date_format", "DD/MM/YYYY"),
        ]
        for key, value in defaults:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

    def seed_user_defaults(self, user_id: int):
        """Default categories and profile for a freshly registered user."""
        conn = self.get_connection()
        for cat in DEFAULT_CATEGORIES:
            conn.execute(
                """INSERT OR IGNORE INTO categories(user_id, name, type, color)
                   VALUES (?, ?, ?, ?)""",
                (user_id, cat["name"], cat["type"], cat["color"]),
            )
        conn.execute(
            """INSERT OR IGNORE INTO profiles(user_id, theme, currency)
               VALUES (?, ?, ?)""",
            (user_id, DEFAULT_THEME, DEFAULT_CURRENCY),
        )
        conn.commit()

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    @staticmethod
    def open_default(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: open (creating if needed) the app database.

        db_folder: if provided, the DB file is stored in that directory instead of CWD.
        """
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            path = os.path.join(db_folder, DB_FILE)
        else:
            path = DB_FILE
        logger.info("Opening database %s", path)
        db = DatabaseManager(path)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
