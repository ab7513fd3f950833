import pytest

from appointy.core import config


def test_validate_runtime_config_accepts_development_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'development')
    monkeypatch.setattr(config, 'MONGODB_URI', config.DEFAULT_MONGODB_URI)

    config.validate_runtime_config()


def test_validate_runtime_config_rejects_default_uri_in_production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'production')
    monkeypatch.setattr(config, 'MONGODB_URI', config.DEFAULT_MONGODB_URI)

    with pytest.raises(RuntimeError):
        config.validate_runtime_config()


def test_validate_runtime_config_rejects_non_positive_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'REQUEST_TIMEOUT_SECONDS', 0)

    with pytest.raises(RuntimeError):
        config.validate_runtime_config()


def test_get_list_splits_comma_separated_values() -> None:
    assert config._get_list(' http://a.test, ,http://b.test ') == ['http://a.test', 'http://b.test']
    assert config._get_list(None) == []
