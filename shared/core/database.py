from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from shared.core.config import AUTH_DATABASE_URL, FACILITY_DATABASE_URL, settings

# Separate bases
AuthBase = declarative_base()
Base = declarative_base()


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_size": settings.POOL_SIZE,          # max idle connections
        "max_overflow": settings.MAX_OVERFLOW,    # max temporary extra connections
        "pool_timeout": 30,                       # wait time before failing
    }


# Auth DB
auth_engine = create_engine(AUTH_DATABASE_URL, **_engine_options(AUTH_DATABASE_URL))
AuthSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=auth_engine)

# Facility DB
facility_engine = create_engine(
    FACILITY_DATABASE_URL, **_engine_options(FACILITY_DATABASE_URL))
FacilitySessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=facility_engine)


# Dependency


def get_auth_db():
    db = AuthSessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_facility_db():
    db = FacilitySessionLocal()
    try:
        yield db
    finally:
        db.close()
