"""Tests for option normalization and validation."""

import pydantic
import pytest

from svcinstall.config import (
    DEFAULT_SERVICE_NAME,
    InstallConfig,
    UninstallConfig,
    normalize_install_config,
    normalize_uninstall_config,
)
from svcinstall.config.paths import get_current_user, get_home_dir
from svcinstall.errors import ValidationError


@pytest.fixture
def environment(monkeypatch, tmp_path):
    """Pin the environment the normalizer reads from."""
    monkeypatch.setenv("USER", "envuser")
    monkeypatch.setenv("HOME", "/home/envuser")
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestNormalizeInstallConfig:
    """Tests for normalize_install_config."""

    def test_fills_defaults_from_environment(self, environment):
        config = normalize_install_config({"cmd": "python app.py"})

        assert config.system is False
        assert config.name == DEFAULT_SERVICE_NAME
        assert config.user == "envuser"
        assert config.home == "/home/envuser"
        assert config.cwd == str(environment)
        assert config.path == ()
        assert config.env == ()

    def test_explicit_values_win(self, environment):
        config = normalize_install_config(
            {
                "system": True,
                "name": "web",
                "cmd": "python app.py",
                "user": "svc",
                "home": "/srv/svc",
                "cwd": "/srv/app",
            }
        )

        assert config.system is True
        assert config.name == "web"
        assert config.user == "svc"
        assert config.home == "/srv/svc"
        assert config.cwd == "/srv/app"

    def test_none_values_fall_back_to_defaults(self, environment):
        config = normalize_install_config(
            {"system": None, "name": None, "cmd": "x", "path": None, "env": None}
        )

        assert config.system is False
        assert config.name == DEFAULT_SERVICE_NAME
        assert config.path == ()
        assert config.env == ()

    def test_preserves_path_and_env_order(self, environment):
        config = normalize_install_config(
            {
                "cmd": "x",
                "path": ["/b", "/a", "/c"],
                "env": ["B=2", "A=1", "EMPTY="],
            }
        )

        assert config.path == ("/b", "/a", "/c")
        assert config.env == ("B=2", "A=1", "EMPTY=")

    def test_does_not_mutate_input_model(self, environment):
        original = InstallConfig(cmd="python app.py")

        normalized = normalize_install_config(original)

        assert normalized is not original
        assert original.user is None
        assert original.home is None
        assert normalized.user == "envuser"

    def test_rejects_env_without_equals(self, environment):
        with pytest.raises(ValidationError, match="NAME=VALUE"):
            normalize_install_config({"cmd": "x", "env": ["GOOD=1", "BAD"]})

    @pytest.mark.parametrize("name", ["../etc/passwd", "has space", "-leading", "a/b"])
    def test_rejects_unsafe_names(self, environment, name):
        with pytest.raises(ValidationError, match="Invalid service name"):
            normalize_install_config({"cmd": "x", "name": name})

    @pytest.mark.parametrize("name", ["web", "web-1", "my_service.v2", "getty@tty1"])
    def test_accepts_safe_names(self, environment, name):
        assert normalize_install_config({"cmd": "x", "name": name}).name == name

    def test_config_is_frozen(self):
        config = InstallConfig(cmd="x")
        with pytest.raises(pydantic.ValidationError):
            config.cmd = "y"  # type: ignore[misc]


class TestNormalizeUninstallConfig:
    """Tests for normalize_uninstall_config."""

    def test_fills_home(self, environment):
        config = normalize_uninstall_config({"name": "web"})

        assert isinstance(config, UninstallConfig)
        assert config.name == "web"
        assert config.home == "/home/envuser"
        assert config.system is False

    def test_ignores_install_only_fields(self, environment):
        config = normalize_uninstall_config({"name": "web", "cmd": "python app.py"})

        assert not hasattr(config, "cmd")


class TestEnvironmentLookups:
    """Tests for the environment helpers."""

    def test_user_from_environment(self, monkeypatch):
        monkeypatch.setenv("USER", "someone")
        assert get_current_user() == "someone"

    def test_user_falls_back_to_getpass(self, monkeypatch):
        monkeypatch.delenv("USER", raising=False)
        monkeypatch.setattr("svcinstall.config.paths.getpass.getuser", lambda: "login")
        assert get_current_user() == "login"

    def test_home_from_environment(self, monkeypatch):
        monkeypatch.setenv("HOME", "/custom/home")
        assert get_home_dir() == "/custom/home"
