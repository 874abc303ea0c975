"""User model."""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from database import Base, utcnow


class User(Base):
    """Portal account, either credentials-based or synced from an OAuth provider."""
    
    __tablename__ = "users"
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    password_hash = Column(String, nullable=True)
    image = Column(String, nullable=True)
    provider = Column(String, nullable=False, default="credentials")  # credentials, google, github
    provider_id = Column(String, nullable=True, index=True)
    role = Column(String, nullable=False, default="user")  # user, admin
    email_verified_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    # Relationships
    blogs = relationship("Blog", back_populates="user", cascade="all, delete-orphan")
    portfolios = relationship("Portfolio", back_populates="user", cascade="all, delete-orphan")
    password_resets = relationship("PasswordReset", back_populates="user", cascade="all, delete-orphan")
