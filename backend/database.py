# backend/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config import settings


def normalize_url(url: str) -> str:
    # Hosted PostgreSQL still hands out postgres:// URLs, SQLAlchemy wants postgresql://
    if url and url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def use_immediate_transactions(engine: Engine) -> None:
    """Open every SQLite transaction with BEGIN IMMEDIATE.

    pysqlite defers BEGIN until the first write, so two transactions that read
    and then write the same rows can both hold a SHARED lock and deadlock on
    the upgrade. Taking the write lock up front serializes writers instead.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(url: str, **kwargs) -> Engine:
    url = normalize_url(url)

    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": settings.SQLITE_BUSY_TIMEOUT}
    else:
        connect_args = {}
    connect_args.update(kwargs.pop("connect_args", {}))

    engine = create_engine(url, connect_args=connect_args, echo=settings.SQL_ECHO, **kwargs)
    if engine.dialect.name == "sqlite":
        use_immediate_transactions(engine)
    return engine


engine = create_db_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    # Register every table on Base.metadata before creating them
    import models.category, models.supplier, models.product  # noqa: F401
    import models.purchase, models.sale, models.expense, models.log  # noqa: F401
    Base.metadata.create_all(bind=engine)
