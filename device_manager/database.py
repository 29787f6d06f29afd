import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy.engine import Engine, make_url
from sqlmodel import SQLModel, Session, create_engine

from .config import Settings

logger = logging.getLogger(__name__)


def create_db_engine(settings: Settings) -> Engine:
    url = make_url(settings.database_url)
    engine_args = {"pool_pre_ping": True}
    if url.get_backend_name() == "mysql":
        # Abandon a stuck call instead of holding a pooled connection forever
        engine_args["connect_args"] = {
            "connect_timeout": settings.http_timeout,
            "read_timeout": settings.http_timeout,
            "write_timeout": settings.http_timeout,
        }
        engine_args["pool_timeout"] = settings.http_timeout

    logger.info("Connecting to %s database at %s", url.get_backend_name(), url.host or url.database)
    return create_engine(url, **engine_args)


def create_db_and_tables(engine: Engine) -> None:
    # Import so the table is registered on the metadata
    from .models import device  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session(request: Request) -> Iterator[Session]:
    with Session(request.app.state.engine) as session:
        yield session
