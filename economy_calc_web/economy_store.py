"""Persistence layer for economy documents.

Each browser session (identified by a random user token kept in the Flask
session) owns one economy document: the incomes, loans, houses and costs the
user has entered. Documents are stored as JSON text; the calculation engines
never touch the store directly. It defaults to SQLite for local development,
but accepts any SQLAlchemy-compatible URL.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import Column, DateTime, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def _utcnow() -> datetime:
    # naive UTC, as SQLite returns it
    return datetime.now(timezone.utc).replace(tzinfo=None)


class EconomyDocumentModel(Base):
    __tablename__ = "economy_documents"

    user_token = Column(String(64), primary_key=True)
    document_json = Column(Text, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class EconomyStore:
    """Database-backed economy document store."""

    def __init__(self, url: str) -> None:
        engine_kwargs: Dict[str, Any] = {"future": True}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection so every session sees the same in-memory database
            engine_kwargs.update(connect_args={"check_same_thread": False}, poolclass=StaticPool)
        self._engine = create_engine(url, **engine_kwargs)
        Base.metadata.create_all(self._engine)
        self._session_factory = sessionmaker(self._engine, expire_on_commit=False, future=True)

    def load(self, user_token: str) -> Optional[Dict[str, Any]]:
        if not user_token:
            return None
        with self._session_factory() as session:
            row = session.get(EconomyDocumentModel, user_token)
            return self._to_dict(row) if row else None

    def save(self, user_token: str, document: Dict[str, Any]) -> Dict[str, Any]:
        if not user_token:
            raise ValueError("A user token is required to save an economy")
        payload = json.dumps(document, ensure_ascii=False)
        with self._session_factory() as session:
            row = session.get(EconomyDocumentModel, user_token)
            if row is None:
                row = EconomyDocumentModel(user_token=user_token, document_json=payload)
                session.add(row)
            else:
                row.document_json = payload
                row.updated_at = _utcnow()
            session.commit()
            logger.info("Economy saved", extra={"user_token": user_token})
            return self._to_dict(row)

    def delete(self, user_token: str) -> bool:
        if not user_token:
            return False
        with self._session_factory() as session:
            row = session.get(EconomyDocumentModel, user_token)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            logger.info("Economy deleted", extra={"user_token": user_token})
            return True

    @staticmethod
    def _to_dict(row: EconomyDocumentModel) -> Dict[str, Any]:
        return {
            "economy": json.loads(row.document_json),
            "createdAt": row.created_at.isoformat(),
            "updatedAt": row.updated_at.isoformat(),
        }


def create_store_from_url(url: str | None) -> EconomyStore:
    return EconomyStore(url or "sqlite:///economy_data.sqlite3")
