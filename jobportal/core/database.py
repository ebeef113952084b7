from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from jobportal.core.config import settings


def _connect_args() -> dict:
    # Hosted Postgres requires TLS in production
    if settings.is_production:
        return {"sslmode": "require"}
    return {}


# Create SQLAlchemy engine
engine = create_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    connect_args=_connect_args(),
    pool_pre_ping=True,  # Verify connections before using them
    pool_size=10,  # Connection pool size
    max_overflow=20  # Allow up to 20 connections beyond pool_size
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Initialize database.

    Tables are created by Alembic ("alembic upgrade head"); this only makes
    sure the models are imported and registered on Base.metadata.
    """
    from jobportal.models import job_listing  # noqa: F401
