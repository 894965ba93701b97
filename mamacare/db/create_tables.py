"""Create the account schema. Run with `python -m mamacare.db.create_tables`."""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # registers tables on Base.metadata

logger = logging.getLogger(__name__)


def create_all(engine=None) -> None:
    Base.metadata.create_all(bind=engine or get_engine())


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    try:
        create_all()
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
    logger.info("Database tables created successfully.")
