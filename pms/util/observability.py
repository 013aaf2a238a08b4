"""Logfire setup for the identity service.

Spans and logs written by services carry user ids, provider names and
recipient addresses. Tokens and OAuth secrets never reach telemetry: they
are scrubbed by attribute name here and stripped from request attributes.
"""

from typing import Any

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from pms.config import Settings

# Attribute names whose values logfire replaces with a redaction marker
SCRUBBED_ATTRIBUTES = [
    "client_secret",
    "code_verifier",
    "security_stamp",
    "external_token",
    "correlation",
]

# Route parameters that carry one-time codes or signed tokens
SENSITIVE_PARAMS = frozenset({"code", "state", "userId"})

# Polled by orchestrators; not worth a span per call
UNTRACED_URLS = "/health"


def send_to_logfire(settings: Settings) -> bool:
    """Decide whether telemetry leaves the process.

    An explicit ``OBSERVABILITY__SEND_TO_LOGFIRE`` wins; otherwise telemetry
    is sent whenever a token is configured.
    """
    explicit = settings.observability.send_to_logfire
    if explicit is not None:
        return explicit
    return bool(settings.observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for the web process and migration script.

    Args:
        settings: Application settings
    """
    sending = send_to_logfire(settings)

    logfire.configure(
        service_name="pms-identity",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire=sending,
        token=settings.observability.logfire_token,
        scrubbing=logfire.ScrubbingOptions(extra_patterns=SCRUBBED_ATTRIBUTES),
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=sending,
    )


def redact_request_attributes(request: Any, attributes: dict[str, Any]) -> dict[str, Any]:
    """Strip OAuth codes and confirmation tokens from endpoint span attributes.

    Args:
        request: Starlette request or websocket
        attributes: Attributes logfire collected (validated ``values`` and ``errors``)

    Returns:
        Attributes safe to export
    """
    values = {
        name: "[redacted]" if name in SENSITIVE_PARAMS else value
        for name, value in (attributes.get("values") or {}).items()
    }
    result = {**attributes, "values": values}

    client = getattr(request, "client", None)
    if client:
        result["client_host"] = client.host

    return result


def instrument_fastapi(app: FastAPI) -> None:
    """Trace identity routes without headers, cookies or one-time codes."""
    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        request_attributes_mapper=redact_request_attributes,
        excluded_urls=UNTRACED_URLS,
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace user, login and audit queries."""
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)


def instrument_httpx() -> None:
    """Trace provider token and user-info calls and email API calls."""
    logfire.instrument_httpx()
