"""Thin facade over Pydantic Logfire.

Every function no-ops unless logfire is installed and enabled in settings,
so callers never need to check availability themselves.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from vidshare.config import Settings

_logfire = None
_configured = False


def is_available() -> bool:
    return _logfire is not None and _configured


def configure(settings: Settings) -> None:
    """Initialize logfire from the ``logfire`` settings section."""
    global _logfire, _configured

    if not settings.logfire.enabled:
        return

    try:
        import logfire as lf
    except ImportError:
        return

    kwargs: dict[str, Any] = {
        "service_name": settings.logfire.service_name,
        "send_to_logfire": "if-token-present",
    }
    if settings.logfire.environment:
        kwargs["environment"] = settings.logfire.environment
    if settings.logfire.sample_rate != 1.0:
        kwargs["trace_sample_rate"] = settings.logfire.sample_rate
    if settings.logfire.console:
        kwargs["console"] = lf.ConsoleOptions()

    lf.configure(**kwargs)
    _logfire = lf
    _configured = True


def instrument_app(app):
    if not is_available():
        return app
    return _logfire.instrument_asgi(app)


def instrument_sqlalchemy(engine) -> None:
    if is_available():
        _logfire.instrument_sqlalchemy(engine=engine)


@contextmanager
def span(name: str, **attrs: Any):
    if is_available():
        with _logfire.span(name, **attrs) as s:
            yield s
    else:
        yield None


def info(msg: str, **kwargs: Any) -> None:
    if is_available():
        _logfire.info(msg, **kwargs)


def exception(msg: str, **kwargs: Any) -> bool:
    """Log with traceback. Returns False when logfire is not active."""
    if is_available():
        _logfire.exception(msg, **kwargs)
        return True
    return False
