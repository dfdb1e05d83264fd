"""Test suite for key validation and redaction."""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from devprofile.validators import validate_api_key, is_live_mode_key
from devprofile.utils.redact import redact_api_key
from devprofile.domain.errors import APIKeyNotConfigured, InvalidAPIKey


class TestValidateAPIKey:
    @pytest.mark.parametrize("key", [
        "sk_test_1234567890abcdef",
        "rk_live_1234567890abcdef",
        "sk_test_legacy_000000",
    ])
    def test_valid_keys(self, key):
        validate_api_key(key)

    def test_empty_key_is_not_configured(self):
        with pytest.raises(APIKeyNotConfigured):
            validate_api_key("")

    def test_too_short(self):
        with pytest.raises(InvalidAPIKey) as exc_info:
            validate_api_key("sk_test_abc")
        assert "too short" in str(exc_info.value)

    def test_legacy_style_key(self):
        with pytest.raises(InvalidAPIKey) as exc_info:
            validate_api_key("sk1234567890abcdef")
        assert "legacy-style" in exc_info.value.reason

    def test_publishable_key_rejected(self):
        with pytest.raises(InvalidAPIKey):
            validate_api_key("pk_test_1234567890abcdef")


class TestIsLiveModeKey:
    def test_live_and_test_keys(self):
        assert is_live_mode_key("sk_live_1234567890abcdef")
        assert is_live_mode_key("rk_live_1234567890abcdef")
        assert not is_live_mode_key("sk_test_1234567890abcdef")
        assert not is_live_mode_key("live")


class TestRedactAPIKey:
    def test_keeps_prefix_and_suffix(self):
        assert redact_api_key("sk_live_1234567890abcdef") == "sk_live_************cdef"

    def test_length_is_preserved(self):
        key = "rk_live_" + "x" * 40
        redacted = redact_api_key(key)
        assert len(redacted) == len(key)
        assert redacted != key

    def test_short_values_are_fully_masked(self):
        assert redact_api_key("sk_live_abcd") == "************"
        assert redact_api_key("") == ""

    def test_rejects_non_strings(self):
        with pytest.raises(TypeError):
            redact_api_key(None)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
