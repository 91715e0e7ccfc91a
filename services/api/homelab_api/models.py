"""SQLAlchemy declarative models for the dashboard.

Tables:
- services: monitored homelab/VPS services and their last probe result
- categories: user-managed service categories
- quick_links: bookmark-style links shown beside the services grid
- rss_feeds: feed subscriptions aggregated by the news widget
- app_settings: key/value JSON settings (e.g. the Glances integration)

Timestamps are stored as naive UTC.
"""

from datetime import datetime, timezone
import enum

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ServiceStatus(str, enum.Enum):
    """Result of the most recent reachability probe"""
    ONLINE = "online"
    OFFLINE = "offline"
    WARNING = "warning"
    UNKNOWN = "unknown"


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    url = Column(String, nullable=False)
    category = Column(String, nullable=False)  # VPS, Docker, External, Network, ...
    description = Column(Text, nullable=True)
    provider = Column(String, nullable=True)
    port = Column(String, nullable=True)  # free text: "8080", "80/443"
    location = Column(String, nullable=True)
    icon = Column(String, nullable=True)
    hidden = Column(Boolean, nullable=False, default=False)
    status = Column(String, nullable=False, default=ServiceStatus.UNKNOWN.value)
    last_checked = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    color = Column(String, nullable=True, default="#3B82F6")
    created_at = Column(DateTime, nullable=False, default=utcnow)


class QuickLink(Base):
    __tablename__ = "quick_links"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    url = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String, nullable=True)  # icon name or image URL
    category = Column(String, nullable=True, default="General")
    created_at = Column(DateTime, nullable=False, default=utcnow)


class RssFeed(Base):
    __tablename__ = "rss_feeds"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    url = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class AppSetting(Base):
    __tablename__ = "app_settings"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)  # JSON document
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
