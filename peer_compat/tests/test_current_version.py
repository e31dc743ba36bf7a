"""Tests for the process-wide current compatibility version and its providers."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from peer_compat.core.config import Settings, get_settings
from peer_compat.core.errors import ConfigurationError
from peer_compat.protocol import compatibility
from peer_compat.protocol.compatibility import CompatibilityVersion, current
from peer_compat.protocol.features import Feature, catalog, register_version_provider, version_provider


def test_catalog_starts_with_root():
    features = catalog()
    assert features[0] is Feature.ROOT
    assert [feature.wire_index for feature in features] == list(range(len(features)))


def test_feature_lookup_by_name():
    assert Feature.from_name("translations") is Feature.TRANSLATIONS
    assert Feature.from_name(" EMOJIS ") is Feature.EMOJIS
    with pytest.raises(KeyError):
        Feature.from_name("telepathy")


def test_default_providers_read_settings(settings: Settings):
    assert Feature.ROOT.current_version() == settings.root_version
    assert Feature.TRANSLATIONS.current_version() == "1.2.5"
    assert Feature.EMOJIS.current_version() == "2.0.0-beta"


def test_current_is_built_from_providers():
    assert str(current()) == "1.0.0;1.2.5;2.0.0-beta"
    assert current().features == catalog()


def test_current_is_memoized():
    first = current()
    register_version_provider(Feature.ROOT, lambda: "9.0.0")
    assert current() is first
    assert str(current()) == "1.0.0;1.2.5;2.0.0-beta"


def test_registered_provider_is_used_before_first_access():
    register_version_provider(Feature.TRANSLATIONS, lambda: "1.4.0")
    assert version_provider(Feature.TRANSLATIONS)() == "1.4.0"
    assert str(current()) == "1.0.0;1.4.0;2.0.0-beta"


def test_concurrent_first_access_builds_once(monkeypatch: pytest.MonkeyPatch):
    calls = []
    gate = threading.Barrier(8)
    build = compatibility._build_current

    def counting_build() -> CompatibilityVersion:
        calls.append(threading.get_ident())
        return build()

    monkeypatch.setattr(compatibility, "_CURRENT", compatibility._Lazy(counting_build))

    def access() -> CompatibilityVersion:
        gate.wait()
        return current()

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: access(), range(8)))

    assert len(calls) == 1
    assert all(result is results[0] for result in results)


def test_failing_provider_is_a_configuration_error():
    def broken() -> str:
        raise OSError("version file missing")

    register_version_provider(Feature.EMOJIS, broken)
    with pytest.raises(ConfigurationError) as excinfo:
        current()
    assert excinfo.value.feature == "emojis"
    assert isinstance(excinfo.value.__cause__, OSError)


def test_failed_build_is_retried_on_next_access():
    register_version_provider(Feature.EMOJIS, lambda: 1 / 0)  # type: ignore[arg-type, return-value]
    with pytest.raises(ConfigurationError):
        current()
    register_version_provider(Feature.EMOJIS, lambda: "2.1.0")
    assert str(current()) == "1.0.0;1.2.5;2.1.0"


def test_provider_with_separator_is_a_configuration_error():
    register_version_provider(Feature.ROOT, lambda: "1.0.0;9.9.9")
    with pytest.raises(ConfigurationError, match="not a single version") as excinfo:
        current()
    assert excinfo.value.feature == "root"


def test_setting_with_separator_never_shifts_the_wire(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PEER_COMPAT_ROOT_VERSION", "1.0.0;9.9.9")
    get_settings.cache_clear()
    with pytest.raises(ConfigurationError):
        current()


@pytest.mark.parametrize("bad", ["", "   ", None])
def test_provider_must_return_version_text(bad):
    register_version_provider(Feature.EMOJIS, lambda: bad)  # type: ignore[arg-type, return-value]
    with pytest.raises(ConfigurationError):
        current()


def test_strict_validation_follows_environment(settings: Settings, production: Settings):
    assert settings.strict_validation is True
    assert production.strict_validation is False


def test_blank_version_setting_is_rejected(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PEER_COMPAT_ROOT_VERSION", "   ")
    with pytest.raises(ValueError):
        Settings()


def test_environment_and_log_level_are_normalized(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PEER_COMPAT_ENVIRONMENT", " Production ")
    monkeypatch.setenv("PEER_COMPAT_LOG_LEVEL", "debug")
    configured = Settings()
    assert configured.environment == "production"
    assert configured.log_level == "DEBUG"


def test_provider_reset_is_not_public_api():
    from peer_compat import protocol
    from peer_compat.protocol import features

    assert "reset_version_providers" not in features.__all__
    assert "reset_version_providers" not in protocol.__all__
    assert "register_version_provider" in protocol.__all__
