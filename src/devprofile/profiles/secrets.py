import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from ..domain.errors import SecretStoreError

logger = logging.getLogger(__name__)


class SecretStore(ABC):
    """secure storage for live mode credential material."""

    @abstractmethod
    def store(self, key: str, value: str, label: str) -> None:
        """Store one secret under key, labelled with a human-readable description."""
        pass

    @abstractmethod
    def retrieve(self, key: str) -> Optional[str]:
        """Return the secret stored under key, or None."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove the secret stored under key. Returns False if there was none."""
        pass


class KeyringSecretStore(SecretStore):
    """secrets kept in the operating system keyring."""

    def __init__(self, service: str):
        self.service = service

    def store(self, key: str, value: str, label: str) -> None:
        try:
            keyring.set_password(self.service, key, value)
        except KeyringError as e:
            raise SecretStoreError(f"failed to store {label.lower()} in keyring: {e}") from e
        logger.debug("stored %s (%s) in keyring service %s", key, label, self.service)

    def retrieve(self, key: str) -> Optional[str]:
        try:
            return keyring.get_password(self.service, key)
        except KeyringError as e:
            logger.warning("could not read %s from keyring: %s", key, e)
            return None

    def delete(self, key: str) -> bool:
        try:
            keyring.delete_password(self.service, key)
        except PasswordDeleteError:
            return False
        except KeyringError as e:
            raise SecretStoreError(f"failed to delete {key} from keyring: {e}") from e
        return True


class MemorySecretStore(SecretStore):
    """secrets held in process memory, for tests and keyring-less sessions."""

    def __init__(self):
        self.values: Dict[str, str] = {}
        self.labels: Dict[str, str] = {}

    def store(self, key: str, value: str, label: str) -> None:
        self.values[key] = value
        self.labels[key] = label

    def retrieve(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def delete(self, key: str) -> bool:
        self.labels.pop(key, None)
        return self.values.pop(key, None) is not None
