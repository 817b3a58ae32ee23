from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()

engine = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def init_db(database_url: str):
    global engine
    connect_args = {}
    if database_url.startswith("sqlite"):
        # handlers run in the threadpool, not the thread that opened the connection
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)
    SessionLocal.configure(bind=engine)
    # models must be imported before create_all sees their tables
    from app import models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    return engine
