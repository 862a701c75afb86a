import pytest
from pydantic import ValidationError

from review_store.configs import DEFAULT_PATH, get_config, load_config
from review_store.errors import ConfigError


def test_load_config_defaults():
    config = load_config({})

    assert config.branch == "main"
    assert config.path == DEFAULT_PATH
    assert config.api_url == "https://api.github.com"
    assert config.admin_pin.get_secret_value() == ""
    assert config.allowed_origins == ()


def test_load_config_reads_environment():
    config = load_config(
        {
            "GH_OWNER": "acme",
            "GH_REPO": "storefront",
            "GH_BRANCH": "deploy",
            "GH_TOKEN": "tok",
            "GH_API_URL": "https://ghe.example.com/api/v3/",
            "REVIEWS_PATH": "content/reviews.json",
            "ADMIN_PIN": "4321",
            "ALLOWED_ORIGINS": " https://a.example.com, ,https://b.example.com ",
        }
    )

    assert config.require_store() is config
    assert config.branch == "deploy"
    assert config.api_url == "https://ghe.example.com/api/v3"
    assert config.path == "content/reviews.json"
    assert config.allowed_origins == ("https://a.example.com", "https://b.example.com")


def test_secrets_are_masked():
    config = load_config({"GH_TOKEN": "tok-123", "ADMIN_PIN": "4321"})

    assert "tok-123" not in repr(config)
    assert "4321" not in str(config)


def test_require_store_names_missing_variables():
    config = load_config({"GH_OWNER": "acme", "GH_REPO": "  "})

    with pytest.raises(ConfigError) as exc:
        config.require_store()

    assert exc.value.status_code == 500
    assert "GH_REPO" in exc.value.message
    assert "GH_TOKEN" in exc.value.message
    assert "GH_OWNER" not in exc.value.message


def test_config_is_immutable():
    config = load_config({})
    with pytest.raises(ValidationError):
        config.branch = "other"


def test_get_config_is_cached(app_env, monkeypatch):
    first = get_config()
    monkeypatch.setenv("GH_BRANCH", "changed")

    assert get_config() is first
    assert first.owner == "acme"
