"""
Portfolio model for the Supabase `portfolios` table
"""
import re
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from core.database import Base

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")
SLUG_MIN_LENGTH = 3
SLUG_MAX_LENGTH = 50


class Portfolio(Base):
    __tablename__ = "portfolios"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Assigned by the database default installed by scripts/init_portfolios_table.py
    slug = Column(String(SLUG_MAX_LENGTH), unique=True, nullable=False, index=True)
    html = Column(Text, nullable=False)
    user_id = Column(String(64), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def to_dict(self, include_html=True):
        result = {
            "id": self.id,
            "slug": self.slug,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_html:
            result["html"] = self.html
        return result


def slug_error(slug) -> str:
    """Return a validation message for a candidate slug, or "" when it is valid."""
    if not slug or not isinstance(slug, str):
        return "New slug is required"
    if not SLUG_PATTERN.match(slug):
        return "Invalid slug format. Use only lowercase letters, numbers, and hyphens."
    if len(slug) < SLUG_MIN_LENGTH or len(slug) > SLUG_MAX_LENGTH:
        return f"Slug must be between {SLUG_MIN_LENGTH} and {SLUG_MAX_LENGTH} characters"
    return ""
