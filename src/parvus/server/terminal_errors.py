"""Terminal error formatting for the parvus dev server.

Provides structured, human-readable error output for logged request
failures (middleware that raised, files that could not be served).
Replaces a raw ``logger.exception()`` with diagnostics that highlight
the frames belonging to the site's own code.

Verbosity is controlled by the ``PARVUS_TRACEBACK`` environment
variable: ``compact`` (default, app frames only), ``full`` (the whole
Python traceback) or ``minimal`` (one line).
"""

from __future__ import annotations

import logging
import os
import traceback as _traceback
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from parvus.http.request import Request

logger = logging.getLogger("parvus.server")


def _is_app_frame(filename: str) -> bool:
    """True if the frame is from the application (not stdlib/site-packages)."""
    if "site-packages" in filename:
        return False
    if filename.startswith("<"):
        return False
    stdlib_prefix = os.path.dirname(os.__file__)
    return not filename.startswith(stdlib_prefix)


def _origin(exc: BaseException) -> BaseException:
    """The first exception in the ``__cause__`` chain that carries a traceback.

    Wrapper errors built for logging (never raised) have no traceback of
    their own; the interesting frames live on the cause.
    """
    current: BaseException | None = exc
    while current is not None:
        if current.__traceback__ is not None:
            return current
        current = current.__cause__
    return exc


def format_compact_traceback(exc: BaseException) -> str:
    """Format an error with a compact traceback.

    Shows only application frames + error summary, suppressing
    framework internals from parvus, uvicorn and anyio.
    """
    parts: list[str] = [f"{type(exc).__name__}: {exc}"]

    origin = _origin(exc)
    if origin is not exc:
        parts.append(f"  Caused by {type(origin).__name__}: {origin}")

    tb = origin.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    app_frames = [f for f in frames if _is_app_frame(f.filename)]

    # If no app frames, show last 3 frames instead
    display_frames = app_frames if app_frames else frames[-3:]

    if display_frames:
        parts.append("  Trace (app frames):")
        for frame in display_frames[-5:]:
            parts.append(f"    {frame.filename}:{frame.lineno} in {frame.name}")
            if frame.line:
                parts.append(f"      {frame.line.strip()}")

    return "\n".join(parts)


def format_minimal_error(exc: BaseException) -> str:
    """One-line error summary for minimal verbosity."""
    origin = _origin(exc)
    tb = origin.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    last = frames[-1] if frames else None
    location = f" at {last.filename}:{last.lineno}" if last else ""
    detail = f"{type(origin).__name__}: {origin}" if origin is not exc else str(exc)
    return f"{type(exc).__name__}{location}: {detail}"


def log_error(exc: BaseException, request: Request | None = None) -> None:
    """Log a request failure with the configured traceback verbosity.

    Args:
        exc: The failure.  May be a wrapper whose ``__cause__`` holds
            the original exception.
        request: The request being served, when one is available.
    """
    prefix = f"{request.method} {request.url}" if request is not None else "Server error"

    traceback_style = os.environ.get("PARVUS_TRACEBACK", "compact").lower()

    if traceback_style == "full":
        origin = _origin(exc)
        logger.error("%s: %s", prefix, exc, exc_info=(type(origin), origin, origin.__traceback__))
    elif traceback_style == "minimal":
        logger.error("%s - %s", prefix, format_minimal_error(exc))
    else:
        logger.error("%s\n%s", prefix, format_compact_traceback(exc))
