# pos_api/db/engine.py

import logging
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores FOREIGN KEY clauses (and ON DELETE actions) unless asked
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Storage client owning one SQLAlchemy engine.

    Nothing touches the database until open() is called; close() disposes
    the connection pool. Services receive an opened instance and use
    connect() for reads and begin() for units of work that must commit
    or roll back as a whole.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Optional[Engine] = None

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    def open(self) -> "Database":
        if self._engine is not None:
            return self

        connect_args = {"check_same_thread": False} if self.is_sqlite else {}
        engine = create_engine(self.url, echo=self.echo, connect_args=connect_args)
        if self.is_sqlite:
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)

        self._engine = engine
        logger.info("Opened database %s", engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        logger.info("Closed database")

    def connect(self) -> Connection:
        return self.engine.connect()

    def begin(self):
        """Context manager yielding a connection inside a transaction."""
        return self.engine.begin()

    def __enter__(self) -> "Database":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
