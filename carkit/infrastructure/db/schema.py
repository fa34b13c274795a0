"""Table creation for the CarKit database.

Run ``python -m carkit.infrastructure.db.schema`` once against ``POSTGRES_DSN``
before serving; creation is idempotent.
"""
from __future__ import annotations

import logging

from carkit.infrastructure.db.engine import Base, get_engine
from carkit.infrastructure.db.models import garage  # noqa: F401  registers tables on Base.metadata
from carkit.shared.config import Settings, get_settings
from carkit.shared.logging_config import configure_logging


logger = logging.getLogger(__name__)


def create_schema(engine) -> None:
    Base.metadata.create_all(engine)
    logger.info("schema: ensured tables=%s", ",".join(sorted(Base.metadata.tables)))


def main(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    if not settings.postgres_dsn:
        raise SystemExit("POSTGRES_DSN is required.")
    create_schema(get_engine(settings.postgres_dsn))


if __name__ == "__main__":
    main()
