"""UserInterest model for per-user interest profiles."""

import uuid

from sqlalchemy import Column, DateTime, JSON, String
from sqlalchemy.sql import func

from database import Base, utcnow


class UserInterest(Base):
    """Interest and learning profile for one user, regenerated on a weekly cadence."""

    __tablename__ = "user_interests"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, unique=True, index=True)
    user_name = Column(String, nullable=False)
    user_email = Column(String, nullable=False)
    interests = Column(JSON, nullable=True)
    reading_behavior = Column(JSON, nullable=True)
    content_preferences = Column(JSON, nullable=True)
    sentiment_profile = Column(JSON, nullable=True)
    recommendations = Column(JSON, nullable=True)
    analytics = Column(JSON, nullable=True)
    ai_insights = Column(JSON, nullable=True)
    last_analyzed = Column(DateTime(timezone=True), default=utcnow, index=True)
    model_version = Column(String, nullable=False, default="1.0")
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
