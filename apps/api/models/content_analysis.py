"""ContentAnalysis model for stored LLM analysis of blogs and portfolios."""

import uuid

from sqlalchemy import Column, DateTime, Float, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.sql import func

from database import Base, utcnow


class ContentAnalysis(Base):
    """One analysis record per (content_id, content_type); re-analysis updates it in place."""

    __tablename__ = "content_analyses"
    __table_args__ = (
        UniqueConstraint("content_id", "content_type", name="uq_content_analyses_content"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    content_id = Column(String, nullable=False, index=True)
    content_type = Column(String, nullable=False)  # blog, portfolio
    title = Column(String, nullable=False)
    author = Column(String, nullable=False)
    author_id = Column(String, nullable=False, index=True)
    summary = Column(Text, nullable=False)
    key_topics = Column(JSON, nullable=True)
    sentiment_label = Column(String, nullable=False, index=True)
    sentiment_score = Column(Float, nullable=False)  # -1 to 1
    sentiment_confidence = Column(Float, nullable=False)  # 0 to 1
    complexity_level = Column(String, nullable=False, index=True)
    complexity_score = Column(Float, nullable=False)  # 1 to 10
    readability_score = Column(Float, nullable=False)
    categories = Column(JSON, nullable=True)
    extracted_concepts = Column(JSON, nullable=True)
    word_count = Column(Integer, nullable=False, default=0)
    sentence_count = Column(Integer, nullable=False, default=0)
    reading_time_minutes = Column(Integer, nullable=False, default=0)
    language_metrics = Column(JSON, nullable=True)
    ai_insights = Column(JSON, nullable=True)
    processed_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    model_version = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
