"""SQLAlchemy models for the finboard store."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Category(Base):
    """Category lookup model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="category")


class Transaction(Base):
    """Transaction model. Direction is carried by ``kind``, not the amount sign."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    occurred_on = Column(Date, nullable=True, index=True)
    establishment = Column(String, nullable=True)
    amount = Column(Numeric(12, 2), nullable=True)
    details = Column(String, nullable=True)
    kind = Column(String, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    owner_id = Column(String, nullable=False, index=True)

    # Relationships
    category = relationship("Category", back_populates="transactions")


class Reminder(Base):
    """Reminder model."""

    __tablename__ = "reminders"

    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    owner_id = Column(String, nullable=False, index=True)
    description = Column(String, nullable=True)
    due_on = Column(Date, nullable=True, index=True)
    amount = Column(Numeric(12, 2), nullable=True)


class Profile(Base):
    """User profile model, keyed by the user identity."""

    __tablename__ = "profiles"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)


COLLECTION_MODELS = {
    "transactions": Transaction,
    "reminders": Reminder,
    "categories": Category,
    "profiles": Profile,
}


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Queries run in worker threads, one session each
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
