import structlog
from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, sessionmaker

logger = structlog.get_logger()

FAVORITE_COLUMN_MIGRATION = (
    "ALTER TABLE recipes ADD COLUMN is_favorite INTEGER DEFAULT 0"
)


class Base(DeclarativeBase):
    pass


def _enable_foreign_keys(dbapi_connection, connection_record):
    # SQLite only honours ON DELETE CASCADE with this pragma set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and session factory for one SQLite file.

    Built once by the application factory and handed to request handlers
    through the ``get_db`` dependency.
    """

    def __init__(self, url: str):
        self.url = url
        self.engine = create_engine(
            url, connect_args={"check_same_thread": False}
        )
        event.listen(self.engine, "connect", _enable_foreign_keys)
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    def init_db(self) -> None:
        """Create missing tables, then add the favorite column if needed.

        Failures are logged and never abort startup.
        """
        # models register their tables on Base.metadata
        from . import models  # noqa: F401

        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            logger.error("Create tables error", error=str(e))

        try:
            with self.engine.begin() as conn:
                conn.execute(text(FAVORITE_COLUMN_MIGRATION))
            logger.info("Added is_favorite column to recipes")
        except OperationalError as e:
            if "duplicate column" in str(e):
                logger.debug("is_favorite column already present")
            else:
                logger.error("Add is_favorite column error", error=str(e))
        except SQLAlchemyError as e:
            logger.error("Add is_favorite column error", error=str(e))

    def close(self) -> None:
        self.engine.dispose()
        logger.info("Database connections closed")
