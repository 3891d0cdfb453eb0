from contextlib import contextmanager
import logging
from sqlmodel import SQLModel, Session, create_engine

from foodgo.configuration.settings import Configuration

configuration = Configuration()


def build_engine(database_url: str = None):
    url = database_url or configuration.connect_to_database()
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


engine = build_engine()


def init_db(bind=None):
    # Table classes must be imported before create_all
    import foodgo.models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)
    logging.info("DATABASE >>> Tables ready")


@contextmanager
def get_session(bind=None):
    with Session(bind or engine, expire_on_commit=False) as session:
        yield session
