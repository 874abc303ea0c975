"""Portfolio model for showcased student projects."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, JSON, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from database import Base, utcnow


class Portfolio(Base):
    """Portfolio project with links and the technologies it used."""
    
    __tablename__ = "portfolios"
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    slug = Column(String, nullable=False, unique=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False)
    content = Column(Text, nullable=False)
    author = Column(String(100), nullable=False)
    author_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    technologies = Column(JSON, nullable=True)
    project_url = Column(String, nullable=True)
    github_url = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    featured = Column(Boolean, nullable=False, default=False, index=True)
    published = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    
    # Relationships
    user = relationship("User", back_populates="portfolios")
