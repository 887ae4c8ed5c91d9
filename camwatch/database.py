from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from camwatch.config import settings

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using
    echo=settings.DEBUG,  # Log SQL queries in debug mode
    # SQLite-specific settings
    **(
        {"connect_args": {"check_same_thread": False}}
        if "sqlite" in settings.DATABASE_URL
        else {"pool_size": settings.DB_POOL_SIZE, "max_overflow": settings.DB_MAX_OVERFLOW}
    ),
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """
    FastAPI dependency for database sessions.

    Yields a database session and ensures it's closed after use.

    Usage:
        @app.get("/cameras")
        def get_cameras(db: Session = Depends(get_db)):
            return db.query(Camera).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
