import logging
import os
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, Optional

from ..config import (
    COLOR_AUTO,
    COLOR_OFF,
    COLOR_ON,
    DATE_STRING_FORMAT,
    ENV_API_KEY,
    ENV_DEVICE_NAME,
    KEY_VALID_IN_DAYS,
)
from ..domain.errors import (
    AccountIDNotConfigured,
    DevProfileError,
    DeviceNameNotConfigured,
    UnsupportedColorError,
)
from ..utils.redact import redact_api_key
from ..validators import validate_api_key
from .models import (
    ACCOUNT_ID_NAME,
    COLOR_NAME,
    DEVICE_NAME_NAME,
    DISPLAY_NAME_NAME,
    LEGACY_API_KEY_NAMES,
    LEGACY_PUBLISHABLE_KEY_NAME,
    TERMINAL_POS_DEVICE_ID_NAME,
    CleanupOutcome,
    Mode,
    ProfileFields,
    WriteResult,
)
from .secrets import SecretStore
from .store import ConfigStore

logger = logging.getLogger(__name__)

SUPPORTED_COLORS = (COLOR_AUTO, COLOR_ON, COLOR_OFF)


def get_key_expires_at(now: Optional[datetime] = None) -> str:
    """expiry date for a key written now."""
    now = now or datetime.now(timezone.utc)
    return (now + timedelta(days=KEY_VALID_IN_DAYS)).astimezone(timezone.utc).strftime(DATE_STRING_FORMAT)


class Profile:
    """
    one named profile and the credentials stored for it.

    every persisted field is namespaced as "<name>.<field>". plaintext values
    live in the config store; live mode secrets live in the secret store and
    only a redacted copy reaches plaintext.
    """

    def __init__(
        self,
        name: str,
        config: ConfigStore,
        secrets: SecretStore,
        fields: Optional[ProfileFields] = None,
    ):
        self.name = name
        self.config = config
        self.secrets = secrets
        self.fields = fields or ProfileFields()

    def get_config_field(self, field: str) -> str:
        return f"{self.name}.{field}"

    def register_alias(self, alias: str, key: str) -> None:
        """make reads of this profile's `alias` field resolve to its `key` field."""
        self.config.register_alias(self.get_config_field(alias), self.get_config_field(key))

    # read path

    def get_device_name(self) -> str:
        env_name = os.environ.get(ENV_DEVICE_NAME)
        if env_name:
            return env_name

        if self.fields.device_name:
            return self.fields.device_name

        name = self._read_field(DEVICE_NAME_NAME)
        if name:
            return name

        raise DeviceNameNotConfigured()

    def get_account_id(self) -> str:
        if self.fields.account_id:
            return self.fields.account_id

        account_id = self._read_field(ACCOUNT_ID_NAME)
        if account_id:
            return account_id

        raise AccountIDNotConfigured()

    def get_api_key(self, livemode: bool) -> str:
        """
        resolve the API key to use.

        the STRIPE_API_KEY environment variable wins, then a key given in this
        process, then the stored key for the mode. test mode keys are read
        from the profiles file; live mode keys only from the secret store.

        raises:
            APIKeyNotConfigured: if no key is found anywhere
            InvalidAPIKey: if the key found is malformed
        """
        env_key = os.environ.get(ENV_API_KEY)
        if env_key:
            validate_api_key(env_key)
            return env_key

        if self.fields.api_key:
            validate_api_key(self.fields.api_key)
            return self.fields.api_key

        mode = Mode.from_livemode(livemode)
        self.config.read_in_config()

        if mode.is_secret:
            key = self.secrets.retrieve(self.get_config_field(mode.api_key_name)) or ""
        else:
            # older files kept the test key under api_key or secret_key
            self._migrate_legacy_field(mode.api_key_name, LEGACY_API_KEY_NAMES)
            key = self.config.get_string(self.get_config_field(mode.api_key_name))

        validate_api_key(key)
        return key

    def get_publishable_key(self) -> str:
        mode = Mode.TEST
        self.config.read_in_config()
        self._migrate_legacy_field(mode.publishable_key_name, (LEGACY_PUBLISHABLE_KEY_NAME,))
        return self.config.get_string(self.get_config_field(mode.publishable_key_name))

    def get_display_name(self) -> str:
        return self._read_field(DISPLAY_NAME_NAME)

    def get_terminal_pos_device_id(self) -> str:
        return self._read_field(TERMINAL_POS_DEVICE_ID_NAME)

    def get_color(self) -> str:
        """
        get the color setting, from the global override or this profile.

        raises:
            UnsupportedColorError: if the value is not auto, on or off
        """
        self.config.read_in_config()
        color = self.config.get_string(COLOR_NAME)
        if not color:
            color = self.config.get_string(self.get_config_field(COLOR_NAME))
        if not color:
            return COLOR_AUTO

        if color not in SUPPORTED_COLORS:
            raise UnsupportedColorError(color)
        return color

    def get_key_expires_at(self, livemode: bool) -> Optional[date]:
        """stored expiry date of the mode's API key, if there is one."""
        mode = Mode.from_livemode(livemode)
        value = self._read_field(mode.expires_at_name)
        if not value:
            return None

        try:
            return datetime.strptime(value, DATE_STRING_FORMAT).date()
        except ValueError:
            logger.warning("ignoring malformed %s for profile %s: %r", mode.expires_at_name, self.name, value)
            return None

    def is_key_expired(self, livemode: bool, today: Optional[date] = None) -> bool:
        expires_at = self.get_key_expires_at(livemode)
        if expires_at is None:
            return False
        today = today or datetime.now(timezone.utc).date()
        return today > expires_at

    def settings(self) -> Dict[str, object]:
        """everything stored in plaintext for this profile (live keys are redacted)."""
        self.config.read_in_config()
        section = self.config.all_settings().get(self.name, {})
        return dict(section) if isinstance(section, dict) else {}

    # write path

    def create_profile(self) -> WriteResult:
        """persist the fields given in this process, e.g. after logging in."""
        return self.write_profile(self.config)

    def write_profile(self, config: ConfigStore) -> WriteResult:
        """
        write every non-empty field to the right backend and persist.

        live mode material goes to the secret store in full and to the
        profiles file redacted. legacy fields superseded by what was written
        are removed on a best-effort basis.

        raises:
            ConfigPathError: if the profiles file location cannot be created
            SecretStoreError: if the secret store rejects a live mode value
            ConfigWriteError: if the profiles file cannot be written
        """
        config.ensure_parent()
        result = WriteResult(config_file=str(config.config_file_used()))
        fields = self.fields

        for name, value in (
            (DEVICE_NAME_NAME, fields.device_name),
            (DISPLAY_NAME_NAME, fields.display_name),
            (ACCOUNT_ID_NAME, fields.account_id),
            (TERMINAL_POS_DEVICE_ID_NAME, fields.terminal_pos_device_id),
        ):
            if value:
                self._put(config, result, name, value)

        for mode in (Mode.LIVE, Mode.TEST):
            api_key = fields.api_key_for(mode)
            if api_key:
                expires_at = get_key_expires_at()
                self._put_credential(config, result, mode, mode.api_key_name, api_key, mode.label_for(mode.api_key_name))
                # expiry is not secret, but travels with its key
                self._put(config, result, mode.expires_at_name, expires_at)
                if mode.is_secret:
                    self._store_secret(result, mode.expires_at_name, expires_at, mode.label_for(mode.expires_at_name))

            publishable_key = fields.publishable_key_for(mode)
            if publishable_key:
                self._put_credential(
                    config, result, mode, mode.publishable_key_name, publishable_key, mode.label_for(mode.publishable_key_name)
                )

        config.merge_in_config()

        # only after merging, so the file's legacy values are seen
        if fields.test_mode_api_key:
            for legacy in LEGACY_API_KEY_NAMES:
                self._safe_remove(config, legacy, result.cleanup)
        if fields.test_mode_publishable_key:
            self._safe_remove(config, LEGACY_PUBLISHABLE_KEY_NAME, result.cleanup)

        config.write()
        logger.info("saved profile %s to %s", self.name, result.config_file)
        return result

    def write_config_field(self, field: str, value: str) -> WriteResult:
        """
        update one field and write the profiles file.

        live mode fields follow the same split as write_profile: the full
        value goes to the secret store, keys reach the profiles file redacted.

        raises:
            SecretStoreError: if the secret store rejects a live mode value
            ConfigWriteError: if the profiles file cannot be written
        """
        self.config.read_in_config()
        result = WriteResult(config_file=str(self.config.config_file_used()))

        mode = Mode.LIVE
        if field == mode.expires_at_name:
            self._store_secret(result, field, value, mode.label_for(field))
            self._put(self.config, result, field, value)
        elif field in mode.secret_names:
            self._put_credential(self.config, result, mode, field, value, mode.label_for(field))
        else:
            self._put(self.config, result, field, value)

        self.config.write()
        return result

    def delete_config_field(self, field: str) -> None:
        """
        delete one field from the profiles file.

        the secret store is left alone: deleting a redacted live mode field
        does not revoke the full value kept there. use remove_profile for that.

        raises:
            ConfigKeyNotFound: if the field is not set
        """
        self.config.read_in_config()
        self.config.delete(self.get_config_field(field))
        self.config.write()

    def remove_profile(self) -> CleanupOutcome:
        """
        remove this profile from the profiles file and the secret store.

        raises:
            ConfigKeyNotFound: if the profile has nothing stored in the profiles file
        """
        outcome = CleanupOutcome()
        for mode in Mode:
            for name in mode.secret_names:
                key = self.get_config_field(name)
                if self.secrets.delete(key):
                    outcome.removed.append(key)

        self.config.read_in_config()
        self.config.delete(self.name)
        self.config.write()
        outcome.removed.append(self.name)
        return outcome

    # helpers

    def _read_field(self, field: str) -> str:
        self.config.read_in_config()
        return self.config.get_string(self.get_config_field(field))

    def _migrate_legacy_field(self, canonical: str, legacy_names: Iterable[str]) -> None:
        """point an unset canonical field at the newest legacy field that is set."""
        if self.config.is_set(self.get_config_field(canonical)):
            return

        for legacy in legacy_names:
            if self.config.is_set(self.get_config_field(legacy)):
                logger.debug("profile %s: reading %s from legacy field %s", self.name, canonical, legacy)
                self.register_alias(canonical, legacy)
                return

    def _put(self, config: ConfigStore, result: WriteResult, field: str, value: str) -> None:
        key = self.get_config_field(field)
        config.set(key, value)
        result.written.append(key)

    def _put_credential(
        self, config: ConfigStore, result: WriteResult, mode: Mode, field: str, value: str, label: str
    ) -> None:
        if mode.is_secret:
            self._store_secret(result, field, value, label)
            self._put(config, result, field, redact_api_key(value))
        else:
            self._put(config, result, field, value)

    def _store_secret(self, result: WriteResult, field: str, value: str, label: str) -> None:
        key = self.get_config_field(field)
        self.secrets.store(key, value, label)
        result.secured.append(key)

    def _safe_remove(self, config: ConfigStore, field: str, outcome: CleanupOutcome) -> None:
        key = self.get_config_field(field)
        if not config.is_set(key):
            return

        try:
            config.delete(key)
        except DevProfileError as e:
            # never fail a login over leftover legacy data
            outcome.failed[key] = str(e)
            logger.debug("could not remove legacy field %s: %s", key, e)
            return
        outcome.removed.append(key)
