"""Document-store table: one row per record, keyed by (collection, id)"""

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, String, Index
from sqlalchemy.dialects.postgresql import JSONB

from app.database import Base


class Document(Base):
    """A JSON record inside a named collection"""
    __tablename__ = "documents"

    collection = Column(String(64), primary_key=True)
    id = Column(String(128), primary_key=True)
    data = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_documents_collection_created", "collection", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Document {self.collection}/{self.id}>"
