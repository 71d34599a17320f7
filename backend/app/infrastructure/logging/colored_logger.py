"""Colored pipeline logger — one console line per chunking/ingestion stage event.

Each driver (assembler, embedding, persistence, ingestion) owns a
``PipelineLogger``; the pure chunking helpers never log. Loggers are
created under the ``pipeline.`` namespace so a single level setting
governs all of them.

Color scheme:
    🟡 Yellow  — Structure analysis / segmentation / recovered problems
    🔵 Blue    — Atomic extraction
    🟣 Magenta — Narrative building
    🟠 Cyan    — Assembly / Embedding
    🟢 Green   — Persistence / Complete
    🔴 Red     — Errors and fallbacks
    ⚪ Gray    — Timing / Stats

Colors can be switched off (``PipelineLogger.set_color(False)``) for log
files and container output; the text is otherwise identical.
"""

import logging
import time
from contextlib import contextmanager
from typing import Any

PIPELINE_LOGGER_PREFIX = "pipeline"


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"


# ── Pipeline Stage Definitions ───────────────────────────────────────

class PipelineStage:
    """Stage label, color and icon for every event the pipeline emits."""

    STRUCTURE = ("STRUCTURE", _Colors.YELLOW, "🧭")
    SEGMENTATION = ("SEGMENT", _Colors.YELLOW, "✂️")
    ATOMIC = ("ATOMIC", _Colors.BLUE, "🔹")
    NARRATIVE = ("NARRATIVE", _Colors.MAGENTA, "📝")
    ASSEMBLY = ("ASSEMBLE", _Colors.CYAN, "🧩")
    FALLBACK = ("FALLBACK", _Colors.RED, "↩️")
    EMBEDDING = ("EMBED", _Colors.CYAN, "🧮")
    PERSISTENCE = ("PERSIST", _Colors.GREEN, "💾")
    PIPELINE = ("PIPELINE", _Colors.WHITE, "⚙️")
    ERROR = ("ERROR", _Colors.RED, "❌")
    COMPLETE = ("COMPLETE", _Colors.GREEN, "✅")


Stage = tuple[str, str, str]


# ── PipelineLogger ───────────────────────────────────────────────────

class PipelineLogger:
    """Stage-aware logger for the chunking pipeline.

    Usage:
        log = PipelineLogger("ChunkAssembler")
        log.step_start(PipelineStage.ATOMIC, "Extracting atomic components")
        log.detail("Community: Parkview Apartments")
        log.step_complete(PipelineStage.ATOMIC, "Extracted 14 atomic chunks", count=14)
    """

    _use_color = True

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(f"{PIPELINE_LOGGER_PREFIX}.{component_name}")

    @property
    def name(self) -> str:
        return self._logger.name

    @classmethod
    def set_color(cls, enabled: bool) -> None:
        """Turn ANSI colors on or off for every pipeline logger."""
        cls._use_color = enabled

    @classmethod
    def _paint(cls, text: str, *codes: str) -> str:
        if not cls._use_color or not codes:
            return text
        return f"{''.join(codes)}{text}{_Colors.RESET}"

    @classmethod
    def _details(cls, kwargs: dict[str, Any], color: str = _Colors.GRAY) -> str:
        if not kwargs:
            return ""
        pairs = " | ".join(f"{k}={v}" for k, v in kwargs.items())
        return " " + cls._paint(f"({pairs})", color)

    def _stage_line(
        self, stage: Stage, message: str, *, label_codes: tuple[str, ...], message_codes: tuple[str, ...]
    ) -> str:
        label, _, icon = stage
        return f"{self._paint(f'{icon} [{label}]', *label_codes)} {self._paint(message, *message_codes)}"

    def step_start(self, stage: Stage, message: str, **kwargs: Any) -> None:
        color = stage[1]
        line = self._stage_line(stage, message, label_codes=(color, _Colors.BOLD), message_codes=(color,))
        self._logger.info(line + self._details(kwargs))

    def step_complete(self, stage: Stage, message: str, **kwargs: Any) -> None:
        line = self._stage_line(stage, f"✓ {message}", label_codes=(stage[1],), message_codes=(_Colors.GREEN,))
        self._logger.info(line + self._details(kwargs))

    def step_warning(self, stage: Stage, message: str, **kwargs: Any) -> None:
        """Recovered problem: a fallback was taken or a stage came back empty."""
        codes = (_Colors.YELLOW,)
        line = self._stage_line(stage, message, label_codes=(*codes, _Colors.BOLD), message_codes=codes)
        self._logger.warning(line + self._details(kwargs))

    def step_error(self, stage: Stage, message: str, error: Exception | None = None) -> None:
        codes = (_Colors.RED,)
        line = self._stage_line(stage, message, label_codes=(*codes, _Colors.BOLD), message_codes=codes)
        if error is not None:
            line += " " + self._paint(f"→ {type(error).__name__}: {error}", _Colors.DIM)
        self._logger.error(line)

    def detail(self, message: str, **kwargs: Any) -> None:
        line = "   " + self._paint(f"├─ {message}", _Colors.GRAY)
        self._logger.info(line + self._details(kwargs, _Colors.DIM))

    def separator(self, title: str = "") -> None:
        rule = f"{'─' * 10} {title} {'─' * max(0, 50 - len(title))}" if title else "─" * 60
        self._logger.info(self._paint(rule, _Colors.GRAY))

    def stats(self, **kwargs: Any) -> None:
        """Summary figures for one stage, e.g. chunk size min/max/avg."""
        parts = " | ".join(f"{k}: {v}" for k, v in kwargs.items())
        self._logger.info("   " + self._paint(f"📈 {parts}", _Colors.GRAY))

    @contextmanager
    def timed_step(self, stage: Stage, message: str, **kwargs: Any):
        """Log start and end of a block with the elapsed time.

        Usage:
            with log.timed_step(PipelineStage.EMBEDDING, "Embedding 120 chunks"):
                vectors = await service.embed_chunks(chunks)
        """
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            self.step_error(stage, f"{message} failed after {time.perf_counter() - start:.2f}s", error=e)
            raise
        self.step_complete(stage, f"{message} in {time.perf_counter() - start:.2f}s", **kwargs)
