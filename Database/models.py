from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, UniqueConstraint
from sqlalchemy.sql import func
from .database import Base


class Organization(Base):
    """A Crowdin organization (or crowdin.com account) that installed the app."""
    __tablename__ = "organizations"
    __table_args__ = (
        UniqueConstraint("domain", "organization_id", name="uq_organization_domain"),
    )

    id = Column(Integer, primary_key=True)
    domain = Column(String(255), nullable=True)  # Empty for crowdin.com accounts
    organization_id = Column(Integer, nullable=False)
    user_id = Column(Integer, nullable=False)
    base_url = Column(String(500), nullable=False)

    app_id = Column(String(255), nullable=False)
    encrypted_app_secret = Column(Text, nullable=False)

    encrypted_access_token = Column(Text, nullable=True)
    access_token_expires_at = Column(Integer, nullable=True)  # Unix timestamp

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
