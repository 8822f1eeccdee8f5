import sqlite3
from typing import Any, Dict, List, NamedTuple, Sequence
from config import DB_FILE
from errors import StorageError
from logger import logger


class RunResult(NamedTuple):
    insert_id: int
    affected_rows: int


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


class Database:
    """Шлюз к SQLite: query() для чтения, run() для INSERT/UPDATE/DELETE"""

    def __init__(self, path: str = DB_FILE):
        self.path = path

    def connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        # LOWER() в SQLite понимает только ASCII, а названия категорий бывают с диакритикой
        conn.create_function("CASEFOLD", 1, _casefold, deterministic=True)
        return conn

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        conn = self.connect()
        try:
            cursor = conn.execute(sql, list(params))
            return [dict(row) for row in cursor.fetchall()]
        except (sqlite3.Error, OverflowError) as e:
            logger.error(f"SQLite error in query: {str(e)} | {sql}")
            raise StorageError(str(e)) from e
        finally:
            conn.close()

    def run(self, sql: str, params: Sequence[Any] = ()) -> RunResult:
        conn = self.connect()
        try:
            cursor = conn.execute(sql, list(params))
            conn.commit()
            return RunResult(insert_id=cursor.lastrowid, affected_rows=cursor.rowcount)
        except (sqlite3.Error, OverflowError) as e:
            conn.rollback()
            logger.error(f"SQLite error in run: {str(e)} | {sql}")
            raise StorageError(str(e)) from e
        finally:
            conn.close()


def init_db(db: Database = None):
    """Создает таблицы в базе данных, если их нет"""
    db = db or Database()
    logger.info(f"Initializing the database at {db.path}...")
    conn = db.connect()
    try:
        conn.executescript('''
            CREATE TABLE IF NOT EXISTS categories (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                description TEXT,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                updated_at DATETIME DEFAULT CURRENT_TIMESTAMP);

            CREATE UNIQUE INDEX IF NOT EXISTS idx_categories_name
                ON categories (name COLLATE NOCASE);

            CREATE TABLE IF NOT EXISTS products (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                description TEXT,
                price REAL NOT NULL CHECK (price >= 0),
                stock INTEGER NOT NULL DEFAULT 0 CHECK (stock >= 0),
                category_id INTEGER REFERENCES categories(id) ON DELETE SET NULL,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                updated_at DATETIME DEFAULT CURRENT_TIMESTAMP);

            CREATE INDEX IF NOT EXISTS idx_products_category_id ON products (category_id);
        ''')
        conn.commit()
    except sqlite3.Error as e:
        logger.error(f"SQLite error while initializing database: {str(e)}")
        raise StorageError(str(e)) from e
    finally:
        conn.close()
    logger.info("Database initialized successfully.")


def get_db() -> Database:
    """Зависимость FastAPI"""
    return Database()
