"""test suite for the command line interface."""
import tomllib
import pytest
import sys
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from devprofile.cli.main import app
from devprofile.profiles import MemorySecretStore

TEST_KEY = "sk_test_1234567890abcdef"
LIVE_KEY = "sk_live_1234567890abcdef"

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "config.toml"


@pytest.fixture
def secrets():
    """swap the OS keyring for an in-memory store."""
    store = MemorySecretStore()
    with patch("devprofile.cli.context.KeyringSecretStore", return_value=store):
        yield store


def invoke(config_file, *args):
    return runner.invoke(app, ["--config", str(config_file), *args])


def read_file(path: Path) -> dict:
    with open(path, "rb") as f:
        return tomllib.load(f)


class TestLogin:
    def test_login_with_test_key(self, config_file, secrets):
        result = invoke(config_file, "login", "--api-key", TEST_KEY, "--device-name", "laptop")

        assert result.exit_code == 0, result.output
        assert "test mode key" in result.output
        section = read_file(config_file)["default"]
        assert section["test_mode_api_key"] == TEST_KEY
        assert section["device_name"] == "laptop"
        assert secrets.values == {}

    def test_login_with_live_key(self, config_file, secrets):
        result = invoke(config_file, "--project-name", "work", "login", "--api-key", LIVE_KEY)

        assert result.exit_code == 0, result.output
        section = read_file(config_file)["work"]
        assert section["live_mode_api_key"] == "sk_live_************cdef"
        assert secrets.values["work.live_mode_api_key"] == LIVE_KEY

    def test_login_rejects_bad_key(self, config_file, secrets):
        result = invoke(config_file, "login", "--api-key", "pk_test_1234567890abcdef")

        assert result.exit_code == 1
        assert "Error" in result.output
        assert not config_file.exists()


class TestLogout:
    def test_logout_removes_everything(self, config_file, secrets):
        invoke(config_file, "login", "--api-key", LIVE_KEY, "--device-name", "laptop")
        result = invoke(config_file, "logout")

        assert result.exit_code == 0, result.output
        assert read_file(config_file) == {}
        assert secrets.values == {}

    def test_logout_unknown_profile(self, config_file, secrets):
        result = invoke(config_file, "--project-name", "missing", "logout")
        assert result.exit_code == 1


class TestConfigCommands:
    def test_set_get_unset(self, config_file, secrets):
        result = invoke(config_file, "config", "set", "display_name", "Acme")
        assert result.exit_code == 0, result.output

        result = invoke(config_file, "config", "get", "display_name")
        assert result.exit_code == 0
        assert result.output.strip() == "Acme"

        result = invoke(config_file, "config", "unset", "display_name")
        assert result.exit_code == 0
        assert "display_name" not in read_file(config_file).get("default", {})

    def test_get_missing_field(self, config_file, secrets):
        result = invoke(config_file, "config", "get", "display_name")
        assert result.exit_code == 1

    def test_unset_missing_field(self, config_file, secrets):
        result = invoke(config_file, "config", "unset", "display_name")
        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_list_redacts_live_keys(self, config_file, secrets):
        invoke(config_file, "login", "--api-key", LIVE_KEY, "--device-name", "laptop")
        result = invoke(config_file, "config", "list")

        assert result.exit_code == 0, result.output
        assert "laptop" in result.output
        assert LIVE_KEY not in result.output

    def test_list_empty_profile(self, config_file, secrets):
        result = invoke(config_file, "config", "list")
        assert result.exit_code == 0
        assert "Nothing stored" in result.output

    def test_unsupported_color_is_reported(self, config_file, secrets):
        config_file.write_text('[default]\ncolor = "purple"\n')
        result = invoke(config_file, "config", "list")

        assert result.exit_code == 1
        assert "color value not supported: purple" in result.output

    def test_set_live_key_is_not_stored_in_plaintext(self, config_file, secrets):
        result = invoke(config_file, "config", "set", "live_mode_api_key", LIVE_KEY)

        assert result.exit_code == 0, result.output
        assert LIVE_KEY not in config_file.read_text()
        assert read_file(config_file)["default"]["live_mode_api_key"] == "sk_live_************cdef"
        assert secrets.values["default.live_mode_api_key"] == LIVE_KEY

    def test_bad_color_can_be_fixed(self, config_file, secrets):
        config_file.write_text('[default]\ncolor = "purple"\n')

        result = invoke(config_file, "config", "unset", "color")
        assert result.exit_code == 0, result.output
        assert "color" not in read_file(config_file).get("default", {})

        config_file.write_text('[default]\ncolor = "purple"\n')
        result = invoke(config_file, "config", "set", "color", "off")
        assert result.exit_code == 0, result.output
        assert read_file(config_file)["default"]["color"] == "off"

    def test_write_failure_is_reported(self, config_file, secrets):
        with patch("devprofile.profiles.store.tempfile.mkstemp", side_effect=PermissionError("read-only dir")):
            result = invoke(config_file, "config", "set", "display_name", "Acme")

        assert result.exit_code == 1
        assert "Error" in result.output
        assert not isinstance(result.exception, PermissionError)

    def test_color_flag_is_validated(self, config_file, secrets):
        result = runner.invoke(app, ["--color", "purple", "--config", str(config_file), "config", "list"])
        assert result.exit_code != 0


class TestFeedback:
    def test_feedback_prints_links(self):
        result = runner.invoke(app, ["feedback"])
        assert result.exit_code == 0
        assert "https://github.com/stripe/stripe-cli/issues" in result.output
        assert "https://stripe.com/docs/dev-tools-csat" in result.output


class TestServe:
    def test_serve_rejects_missing_directory(self, tmp_path):
        result = runner.invoke(app, ["serve", str(tmp_path / "missing")])
        assert result.exit_code == 1

    def test_serve_directory(self, tmp_path):
        with patch("devprofile.cli.main.ThreadingHTTPServer") as mock_server:
            server = mock_server.return_value.__enter__.return_value
            result = runner.invoke(app, ["serve", str(tmp_path), "--port", "5000"])

        assert result.exit_code == 0, result.output
        assert mock_server.call_args[0][0] == ("", 5000)
        server.serve_forever.assert_called_once()
        assert "http://localhost:5000" in result.output


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
