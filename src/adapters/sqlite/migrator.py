import logging
import os
import sqlite3

logger = logging.getLogger(__name__)


class SQLiteMigrator:
    def __init__(self, db_path: str, migrations_dir: str):
        self.db_path = db_path
        self.migrations_dir = migrations_dir

    def _get_connection(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _ensure_migration_table(self, conn: sqlite3.Connection) -> None:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS _migrations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                filename TEXT UNIQUE NOT NULL,
                applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
            );
        """)

    def _get_applied_migrations(self, conn: sqlite3.Connection) -> set[str]:
        cursor = conn.execute("SELECT filename FROM _migrations")
        return {row[0] for row in cursor.fetchall()}

    def pending(self) -> list[str]:
        """Migration files not yet applied, in order."""
        conn = self._get_connection()
        try:
            self._ensure_migration_table(conn)
            applied = self._get_applied_migrations(conn)
        finally:
            conn.close()
        return [f for f in self._migration_files() if f not in applied]

    def _migration_files(self) -> list[str]:
        return sorted(f for f in os.listdir(self.migrations_dir) if f.endswith(".sql"))

    def run_migrations(self) -> None:
        """Apply all pending migrations."""
        conn = self._get_connection()
        try:
            self._ensure_migration_table(conn)
            applied = self._get_applied_migrations(conn)

            for filename in self._migration_files():
                if filename not in applied:
                    logger.info("Applying migration: %s", filename)
                    self._apply_migration(conn, filename)

            logger.info("All migrations applied.")
        finally:
            conn.close()

    def _read_up_script(self, filename: str) -> str:
        path = os.path.join(self.migrations_dir, filename)
        with open(path) as f:
            content = f.read()

        # Files start with the Up part; anything after "-- Down" is ignored.
        if "-- Down" in content:
            return content.split("-- Down")[0]
        return content

    def _apply_migration(self, conn: sqlite3.Connection, filename: str) -> None:
        script = self._read_up_script(filename)
        try:
            conn.executescript(script)
            conn.execute("INSERT INTO _migrations (filename) VALUES (?)", (filename,))
            conn.commit()
        except Exception as e:
            conn.rollback()
            raise RuntimeError(f"Migration {filename} failed: {e}") from e
