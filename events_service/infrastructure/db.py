from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase


class Base(DeclarativeBase): pass


def create_db_engine(database_url: str) -> Engine:
    # Добавляем параметры кодировки для PostgreSQL
    connect_args = {}
    engine_kwargs = {}
    if database_url.startswith("postgresql"):
        connect_args = {"client_encoding": "utf8"}
        engine_kwargs = {"pool_size": 10, "max_overflow": 20, "pool_recycle": 3600}
    elif database_url.startswith("sqlite"):
        # сессии открываются из потоков threadpool
        connect_args = {"check_same_thread": False}

    return create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args=connect_args,
        echo=False,
        **engine_kwargs,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
