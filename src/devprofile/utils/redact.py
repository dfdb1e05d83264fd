def redact_api_key(api_key: str) -> str:
    """
    returns a redacted copy of an API key.

    the first 8 and last 4 characters are kept and everything in between is
    replaced with "*". keys too short to keep anything are masked entirely.
    """
    if not isinstance(api_key, str):
        raise TypeError(f"expected str, got {type(api_key).__name__}")

    if len(api_key) <= 12:
        return "*" * len(api_key)

    return api_key[:8] + "*" * (len(api_key) - 12) + api_key[-4:]
