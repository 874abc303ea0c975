"""CommunityAnalytics model for period-level trend snapshots."""

import uuid

from sqlalchemy import Column, DateTime, Index, JSON, String
from sqlalchemy.sql import func

from database import Base, utcnow


class CommunityAnalytics(Base):
    """Append-only community trend snapshot; every generation inserts a new row."""

    __tablename__ = "community_analytics"
    __table_args__ = (
        Index("ix_community_analytics_period_generated", "period", "generated_at"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    period = Column(String, nullable=False)  # daily, weekly, monthly
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    content_stats = Column(JSON, nullable=True)
    topic_trends = Column(JSON, nullable=True)
    sentiment_analysis = Column(JSON, nullable=True)
    complexity_distribution = Column(JSON, nullable=True)
    author_insights = Column(JSON, nullable=True)
    community_engagement = Column(JSON, nullable=True)
    insights = Column(JSON, nullable=True)
    predictions = Column(JSON, nullable=True)
    generated_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    model_version = Column(String, nullable=False, default="1.0")
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
