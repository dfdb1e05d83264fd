"""profile credential storage."""
from .models import Mode, ProfileFields, CleanupOutcome, WriteResult
from .profile import Profile, get_key_expires_at
from .secrets import SecretStore, KeyringSecretStore, MemorySecretStore
from .store import ConfigStore

__all__ = [
    "Mode",
    "ProfileFields",
    "CleanupOutcome",
    "WriteResult",
    "Profile",
    "get_key_expires_at",
    "SecretStore",
    "KeyringSecretStore",
    "MemorySecretStore",
    "ConfigStore",
]
