#!/usr/bin/env python3
"""Serve the identity API with uvicorn."""

import sys

import logfire
import uvicorn

from pms.config import Settings
from pms.util.logging import setup_logging
from pms.util.observability import configure_logfire


def main() -> int:
    """Configure telemetry and logging, then serve until shutdown.

    The app's lifespan refuses to start when the user store cannot hold
    emails, and that failure is reported here before re-raising.
    """
    settings = Settings()
    configure_logfire(settings)
    setup_logging(settings)

    logfire.info(
        "Starting identity API",
        port=settings.port,
        base_url=settings.api.base_url,
        git_sha=settings.git_sha,
    )
    try:
        # Provider redirect URIs are built from the public host, so trust
        # X-Forwarded-* from the ingress proxy
        uvicorn.run(
            "pms.interface.api.app:app",
            host="0.0.0.0",
            port=settings.port,
            proxy_headers=True,
            forwarded_allow_ips="*",
            log_level="debug" if settings.debug else "info",
        )
    except Exception as e:
        logfire.error(
            "Identity API failed to start",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
