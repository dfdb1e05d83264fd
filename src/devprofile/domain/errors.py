class DevProfileError(Exception):
    """base class for exceptions in devprofile."""
    pass


class NotConfiguredError(DevProfileError):
    """raised when a value is missing from every place it could come from."""
    pass


class DeviceNameNotConfigured(NotConfiguredError):
    def __init__(self):
        super().__init__("you have not configured a device name, please run `devprofile login`")


class AccountIDNotConfigured(NotConfiguredError):
    def __init__(self):
        super().__init__("you have not configured an account ID, please run `devprofile login`")


class APIKeyNotConfigured(NotConfiguredError):
    def __init__(self):
        super().__init__("you have not configured API keys yet, please run `devprofile login`")


class InvalidAPIKey(DevProfileError):
    """raised when an API key is present but malformed."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class UnsupportedColorError(DevProfileError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"color value not supported: {value}")


class ConfigPathError(DevProfileError):
    """raised when the profiles file path cannot be used."""
    pass


class ConfigWriteError(DevProfileError):
    """raised when the profiles file cannot be written to disk."""
    pass


class ConfigKeyNotFound(DevProfileError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"key does not exist: {key}")


class AliasCycleError(DevProfileError):
    def __init__(self, alias: str, key: str):
        self.alias = alias
        self.key = key
        super().__init__(f"registering alias '{alias}' -> '{key}' would create a cycle")


class SecretStoreError(DevProfileError):
    """raised when the secure secret store cannot be written."""
    pass


class ConfigParseError(DevProfileError):
    """raised when the profiles file exists but cannot be parsed."""
    pass
