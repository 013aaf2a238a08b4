#!/usr/bin/env python3
"""Apply Alembic migrations for the users, user_logins and audit_logs tables."""

import sys

import logfire
from alembic import command
from alembic.config import Config
from sqlalchemy.engine import make_url

from pms.config import Settings
from pms.util.observability import configure_logfire


def main(revision: str = "head") -> int:
    """Upgrade the configured database to ``revision``.

    Failures are reported to Logfire and re-raised so a deploy never starts
    the web process against a half-migrated schema.
    """
    settings = Settings()
    configure_logfire(settings)

    url = make_url(settings.database_url)
    with logfire.span(
        "migrations.upgrade", revision=revision, host=url.host, database=url.database
    ):
        try:
            command.upgrade(Config("alembic.ini"), revision)
        except Exception as e:
            logfire.error(
                "Database migration failed",
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            raise

    logfire.info("Database migrated", revision=revision)
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
