from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

from storetree.config import settings


def enable_sqlite_foreign_keys(engine):
    """SQLite ignora las llaves foraneas salvo que se activen por conexion."""
    if engine.url.get_backend_name() != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# connect_args={"check_same_thread": False} es necesario solo para SQLite
_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args)
enable_sqlite_foreign_keys(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# La Base que todos los modelos deben usar
Base = declarative_base()

# Dependencia para obtener la DB en los endpoints
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
