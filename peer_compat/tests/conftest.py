import logging
from typing import Iterator

import pytest
import structlog

from peer_compat.core.config import Settings, get_settings
from peer_compat.protocol import compatibility
from peer_compat.protocol.features import reset_version_providers


@pytest.fixture(autouse=True)
def configure_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Provide deterministic settings and a fresh current compatibility version."""

    monkeypatch.setenv("PEER_COMPAT_ENVIRONMENT", "development")
    monkeypatch.setenv("PEER_COMPAT_LOG_LEVEL", "INFO")
    monkeypatch.setenv("PEER_COMPAT_ROOT_VERSION", "1.0.0")
    monkeypatch.setenv("PEER_COMPAT_TRANSLATIONS_VERSION", "1.2.5")
    monkeypatch.setenv("PEER_COMPAT_EMOJIS_VERSION", "2.0.0-beta")
    monkeypatch.setattr(compatibility, "_CURRENT", compatibility._Lazy(compatibility._build_current))
    reset_version_providers()

    get_settings.cache_clear()
    get_settings()
    yield
    get_settings.cache_clear()
    reset_version_providers()


@pytest.fixture
def settings() -> Settings:
    """Return settings configured for the test."""

    return get_settings()


@pytest.fixture
def production(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Switch to production settings, where verification checks are skipped."""

    monkeypatch.setenv("PEER_COMPAT_ENVIRONMENT", "production")
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    """Undo any ``setup_logging`` call so handlers never outlive a captured stream."""

    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    structlog.reset_defaults()
    for handler in root_logger.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)
