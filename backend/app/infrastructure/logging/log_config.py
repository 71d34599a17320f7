"""Logging setup for the chunking service.

Each category pairs a Settings field with the logger-name prefixes it
governs. Python's logger hierarchy does the rest: a level set on
``pipeline`` applies to every ``PipelineLogger`` (``pipeline.ChunkAssembler``,
``pipeline.EmbeddingService`` ...), and a level set on ``sqlalchemy.engine``
silences SQL echo without touching the stage events.

Usage:
    from app.infrastructure.logging.log_config import setup_logging
    setup_logging()   # once, from the FastAPI lifespan
"""

import logging
import sys

from app.config import Settings, get_settings
from app.infrastructure.logging.colored_logger import PIPELINE_LOGGER_PREFIX, PipelineLogger

_CATEGORY_MAP: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("log_level_sql", ("sqlalchemy.engine", "sqlalchemy.pool")),
    ("log_level_http", ("httpx", "httpcore")),
    ("log_level_uvicorn", ("uvicorn", "uvicorn.access", "uvicorn.error")),
    ("log_level_pipeline", (PIPELINE_LOGGER_PREFIX,)),
    ("log_level_embedding", ("app.infrastructure.openrouter",)),
)

_HANDLER_NAME = "listing-chunker"
_FORMAT = "%(levelname)-8s %(name)s — %(message)s"


def setup_logging(settings: Settings | None = None) -> dict[str, int]:
    """Apply root and per-category levels; return the level set on each logger name.

    The stderr handler is only installed when the root logger has none
    (uvicorn and pytest bring their own).
    """
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)

    applied: dict[str, int] = {}
    for settings_field, logger_names in _CATEGORY_MAP:
        level = _parse_level(getattr(settings, settings_field))
        for name in logger_names:
            logging.getLogger(name).setLevel(level)
            applied[name] = level

    PipelineLogger.set_color(settings.log_color)

    logging.getLogger(__name__).debug(
        "Logging configured — root=%s %s color=%s",
        settings.log_level,
        " ".join(f"{name}={logging.getLevelName(level)}" for name, level in applied.items()),
        settings.log_color,
    )
    return applied


def _parse_level(raw: str) -> int:
    """Level name → logging constant; unknown names fall back to INFO."""
    numeric = logging.getLevelName(raw.strip().upper())
    return numeric if isinstance(numeric, int) else logging.INFO
