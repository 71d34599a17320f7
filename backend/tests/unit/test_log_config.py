"""Unit tests for logging setup and the pipeline logger."""

import logging

import pytest

from app.config import Settings
from app.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage
from app.infrastructure.logging.log_config import setup_logging


@pytest.fixture(autouse=True)
def _restore_color():
    yield
    PipelineLogger.set_color(True)


def test_category_levels_are_applied():
    settings = Settings(_env_file=None, log_level_pipeline="DEBUG", log_level_sql="ERROR", log_level_http="nonsense")

    applied = setup_logging(settings)

    assert applied["pipeline"] == logging.DEBUG
    assert applied["sqlalchemy.engine"] == logging.ERROR
    assert applied["httpx"] == logging.INFO
    assert logging.getLogger("pipeline.ChunkAssembler").getEffectiveLevel() == logging.DEBUG


def test_pipeline_loggers_share_one_namespace():
    assert PipelineLogger("EmbeddingService").name == "pipeline.EmbeddingService"


def test_plain_output_when_color_disabled(caplog):
    setup_logging(Settings(_env_file=None, log_color=False, log_level_pipeline="INFO"))
    plog = PipelineLogger("TestComponent")

    with caplog.at_level(logging.INFO, logger="pipeline.TestComponent"):
        plog.step_complete(PipelineStage.ASSEMBLY, "3 chunks assembled", mode="dual")
        plog.step_warning(PipelineStage.FALLBACK, "using structural chunking")

    messages = [r.getMessage() for r in caplog.records]
    assert messages[0] == "🧩 [ASSEMBLE] ✓ 3 chunks assembled (mode=dual)"
    assert messages[1] == "↩️ [FALLBACK] using structural chunking"
    assert caplog.records[1].levelno == logging.WARNING
    assert all("\033[" not in m for m in messages)


def test_timed_step_logs_failure_and_reraises(caplog):
    PipelineLogger.set_color(False)
    plog = PipelineLogger("TimedComponent")

    with caplog.at_level(logging.INFO, logger="pipeline.TimedComponent"):
        with pytest.raises(ValueError):
            with plog.timed_step(PipelineStage.EMBEDDING, "Embedding 2 chunks"):
                raise ValueError("bad batch")

    assert caplog.records[-1].levelno == logging.ERROR
    assert "Embedding 2 chunks failed after" in caplog.records[-1].getMessage()
    assert "ValueError: bad batch" in caplog.records[-1].getMessage()
