"""Database helpers: declarative base, cached engine and short-lived sessions."""

from .create_tables import create_all
from .session import Base, get_engine, get_session

__all__ = ["Base", "create_all", "get_engine", "get_session"]
