from .domain.errors import APIKeyNotConfigured, InvalidAPIKey

MIN_API_KEY_LENGTH = 12
SUPPORTED_KEY_PREFIXES = ("sk", "rk")


def validate_api_key(value: str) -> None:
    """
    check that value looks like a usable secret or restricted API key.

    raises:
        APIKeyNotConfigured: if value is empty
        InvalidAPIKey: if value is present but malformed
    """
    if not value:
        raise APIKeyNotConfigured()

    if len(value) < MIN_API_KEY_LENGTH:
        raise InvalidAPIKey(
            f"the API key provided is too short, it must be at least {MIN_API_KEY_LENGTH} characters long"
        )

    parts = value.split("_")
    if len(parts) < 3:
        raise InvalidAPIKey(
            "you are using a legacy-style API key which is unsupported, "
            "please generate a new test mode API key"
        )

    if parts[0] not in SUPPORTED_KEY_PREFIXES:
        raise InvalidAPIKey("only secret or restricted keys are supported")


def is_live_mode_key(value: str) -> bool:
    """True if value is a live mode key, e.g. sk_live_..."""
    parts = value.split("_")
    return len(parts) >= 3 and parts[1] == "live"
