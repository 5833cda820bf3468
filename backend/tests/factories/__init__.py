"""factory_boy base wired to the database session of the running test."""

from __future__ import annotations

import factory
from sqlalchemy.orm import Session


class SQLAlchemySession:
    """Holder for the session the ``session`` fixture hands to factories."""

    current: Session | None = None

    @classmethod
    def set(cls, session: Session | None) -> None:
        cls.current = session

    @classmethod
    def get(cls) -> Session:
        if cls.current is None:
            raise RuntimeError("No database session bound; request the 'session' fixture.")
        return cls.current


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    class Meta:
        abstract = True
        sqlalchemy_session_factory = SQLAlchemySession.get
        # Services open their own units of work, so rows must be committed.
        sqlalchemy_session_persistence = "commit"
