import copy
import json
import logging
import os
import tempfile
import tomllib
from pathlib import Path
from typing import Any, Dict

import tomli_w

from ..domain.errors import (
    AliasCycleError,
    ConfigKeyNotFound,
    ConfigParseError,
    ConfigPathError,
    ConfigWriteError,
)

logger = logging.getLogger(__name__)

_MISSING = object()

SUPPORTED_FORMATS = (".toml", ".json")


class ConfigStore:
    """
    dotted key-value settings backed by the profiles file.

    values live in two layers: the file layer, loaded from disk, and the
    override layer, holding values set in this process. reads consult the
    override layer first. an alias table redirects reads of one key to
    another.
    """

    def __init__(self, config_file: Path):
        self.config_file = Path(config_file)
        self._config: Dict[str, Any] = {}
        self._override: Dict[str, Any] = {}
        self._aliases: Dict[str, str] = {}

    @property
    def format(self) -> str:
        suffix = self.config_file.suffix.lower()
        if suffix not in SUPPORTED_FORMATS:
            raise ConfigPathError(
                f"unsupported config file type '{suffix or self.config_file.name}', "
                f"expected one of: {', '.join(SUPPORTED_FORMATS)}"
            )
        return suffix

    def config_file_used(self) -> Path:
        return self.config_file

    def read_in_config(self) -> bool:
        """
        load the file layer from disk.

        returns:
            False if the file does not exist, True otherwise

        raises:
            ConfigParseError: if the file exists but is not valid
        """
        if not self.config_file.exists():
            self._config = {}
            return False

        fmt = self.format
        try:
            if fmt == ".toml":
                with open(self.config_file, "rb") as f:
                    data = tomllib.load(f)
            else:
                with open(self.config_file, "r") as f:
                    data = json.load(f)
        except (tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
            raise ConfigParseError(f"failed to parse {self.config_file}: {e}") from e
        except OSError as e:
            raise ConfigPathError(f"failed to read {self.config_file}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigParseError(f"{self.config_file} does not contain a table of settings")

        self._config = data
        return True

    def merge_in_config(self) -> None:
        """reload the file layer without discarding values set in this process."""
        self.read_in_config()

    # aliases

    def register_alias(self, alias: str, key: str) -> None:
        """
        make reads of `alias` resolve to `key`.

        registering the same alias twice is a no-op, and an alias onto itself
        is ignored.

        raises:
            AliasCycleError: if `key` already resolves back to `alias`
        """
        if alias == key:
            return
        if self.resolve(key) == alias:
            raise AliasCycleError(alias, key)
        if self._aliases.get(alias) == key:
            return

        self._aliases[alias] = key
        logger.debug("registered alias %s -> %s", alias, key)

    def resolve(self, key: str) -> str:
        """follow the alias table from `key` to the key that holds the value."""
        seen = {key}
        while key in self._aliases:
            key = self._aliases[key]
            if key in seen:
                raise AliasCycleError(key, self._aliases[key])
            seen.add(key)
        return key

    @property
    def aliases(self) -> Dict[str, str]:
        return dict(self._aliases)

    # values

    def get(self, key: str, default: Any = None) -> Any:
        path = self.resolve(key).split(".")
        value = _search(self._override, path)
        if value is _MISSING:
            value = _search(self._config, path)
        if value is _MISSING:
            return default
        return value

    def get_string(self, key: str) -> str:
        value = self.get(key)
        if value is None or isinstance(value, dict):
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def is_set(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def set(self, key: str, value: Any) -> None:
        # the key now owns a value of its own
        self._aliases.pop(key, None)
        _set_nested(self._override, key.split("."), value)

    def delete(self, key: str) -> None:
        """
        remove a key, or a whole table of keys, from both layers.

        raises:
            ConfigKeyNotFound: if the key is not set
        """
        path = self.resolve(key).split(".")
        removed_override = _delete_nested(self._override, path)
        removed_config = _delete_nested(self._config, path)
        if not (removed_override or removed_config):
            raise ConfigKeyNotFound(key)

    def all_settings(self) -> Dict[str, Any]:
        """merged view of the file layer and the override layer."""
        merged = copy.deepcopy(self._config)
        _deep_merge(merged, self._override)
        return merged

    # persistence

    def ensure_parent(self) -> None:
        """create the directory holding the profiles file."""
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigPathError(
                f"failed to create config directory {self.config_file.parent}: {e}"
            ) from e

    def write(self) -> None:
        """
        atomically rewrite the profiles file with the merged settings.

        raises:
            ConfigPathError: if the directory cannot be created or the type is unsupported
            ConfigWriteError: if the file cannot be written
        """
        fmt = self.format
        self.ensure_parent()
        data = self.all_settings()

        if fmt == ".toml":
            payload = tomli_w.dumps(data)
        else:
            payload = json.dumps(data, indent=2) + "\n"

        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self.config_file.parent,
                prefix=f".{self.config_file.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w") as f:
                f.write(payload)
            os.replace(tmp_path, self.config_file)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise ConfigWriteError(f"failed to write {self.config_file}: {e}") from e

        # the file now holds everything
        self._config = data
        self._override = {}
        logger.debug("wrote %s", self.config_file)


def _search(data: Dict[str, Any], path: list) -> Any:
    node: Any = data
    for part in path:
        if not isinstance(node, dict) or part not in node:
            return _MISSING
        node = node[part]
    return node


def _set_nested(data: Dict[str, Any], path: list, value: Any) -> None:
    node = data
    for part in path[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[path[-1]] = value


def _delete_nested(data: Dict[str, Any], path: list) -> bool:
    parents = []
    node: Any = data
    for part in path[:-1]:
        if not isinstance(node, dict) or part not in node:
            return False
        parents.append((node, part))
        node = node[part]

    if not isinstance(node, dict) or path[-1] not in node:
        return False
    del node[path[-1]]

    # drop tables left empty by the removal
    for parent, part in reversed(parents):
        if parent[part]:
            break
        del parent[part]
    return True


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> None:
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = copy.deepcopy(value)
