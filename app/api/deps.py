from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from app.db.session import SessionLocal
from app.services.data_store import SqlDataStore
from app.services.storage_service import StorageService, get_storage_service


def get_db() -> Generator:
    """
    Database session dependency.

    Usage:
        @app.get("/items")
        def get_items(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_data_store(db: Session = Depends(get_db)) -> SqlDataStore:
    return SqlDataStore(db)


def get_storage() -> StorageService:
    return get_storage_service()
