"""data models for profile management."""
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

# config key names
ACCOUNT_ID_NAME = "account_id"
DEVICE_NAME_NAME = "device_name"
DISPLAY_NAME_NAME = "display_name"
IS_TERMS_ACCEPTANCE_VALID_NAME = "is_terms_acceptance_valid"
TEST_MODE_API_KEY_NAME = "test_mode_api_key"
TEST_MODE_PUBLISHABLE_KEY_NAME = "test_mode_publishable_key"
TEST_MODE_EXPIRES_AT_NAME = "test_mode_key_expires_at"
LIVE_MODE_API_KEY_NAME = "live_mode_api_key"
LIVE_MODE_PUBLISHABLE_KEY_NAME = "live_mode_publishable_key"
LIVE_MODE_EXPIRES_AT_NAME = "live_mode_key_expires_at"
TERMINAL_POS_DEVICE_ID_NAME = "terminal_pos_device_id"
COLOR_NAME = "color"

# superseded field names, newest first
LEGACY_API_KEY_NAMES = ("api_key", "secret_key")
LEGACY_PUBLISHABLE_KEY_NAME = "publishable_key"


class Mode(str, Enum):
    """which credential set a key belongs to."""
    TEST = "test"
    LIVE = "live"

    @classmethod
    def from_livemode(cls, livemode: bool) -> "Mode":
        return cls.LIVE if livemode else cls.TEST

    @property
    def is_secret(self) -> bool:
        """live mode material goes to the secret store, never to plaintext."""
        return self is Mode.LIVE

    @property
    def label(self) -> str:
        return f"{self.value.capitalize()} mode"

    @property
    def api_key_name(self) -> str:
        return f"{self.value}_mode_api_key"

    @property
    def publishable_key_name(self) -> str:
        return f"{self.value}_mode_publishable_key"

    @property
    def expires_at_name(self) -> str:
        return f"{self.value}_mode_key_expires_at"

    @property
    def secret_names(self) -> Tuple[str, ...]:
        if not self.is_secret:
            return ()
        return (self.api_key_name, self.expires_at_name, self.publishable_key_name)

    def label_for(self, name: str) -> str:
        """human-readable description of one of this mode's key fields."""
        labels = {
            self.api_key_name: "API key",
            self.expires_at_name: "API key expiry",
            self.publishable_key_name: "publishable key",
        }
        return f"{self.label} {labels[name]}"


class ProfileFields(BaseModel):
    """values supplied in the current process (login flow, flags)."""
    device_name: Optional[str] = None
    display_name: Optional[str] = None
    account_id: Optional[str] = None
    api_key: Optional[str] = None  # mode-agnostic, e.g. from --api-key
    live_mode_api_key: Optional[str] = None
    live_mode_publishable_key: Optional[str] = None
    test_mode_api_key: Optional[str] = None
    test_mode_publishable_key: Optional[str] = None
    terminal_pos_device_id: Optional[str] = None

    @field_validator("*")
    @classmethod
    def _strip(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    def api_key_for(self, mode: Mode) -> Optional[str]:
        return getattr(self, mode.api_key_name)

    def publishable_key_for(self, mode: Mode) -> Optional[str]:
        return getattr(self, mode.publishable_key_name)


class CleanupOutcome(BaseModel):
    """
    what happened to superseded legacy fields during a write.

    informational only: a failed removal never fails the write.
    """
    removed: List[str] = Field(default_factory=list)
    failed: Dict[str, str] = Field(default_factory=dict)

    @property
    def clean(self) -> bool:
        return not self.failed


class WriteResult(BaseModel):
    """summary of a profile write."""
    config_file: str
    written: List[str] = Field(default_factory=list)  # plaintext keys
    secured: List[str] = Field(default_factory=list)  # secret store keys
    cleanup: CleanupOutcome = Field(default_factory=CleanupOutcome)
