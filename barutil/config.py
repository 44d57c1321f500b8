"""Loading bar configuration files with includes and per-output selection."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Iterable, Sequence

from barutil.jsonparse import parse_json

log = logging.getLogger(__name__)

SYSCONFDIR = "/etc"
_MAX_INCLUDE_DEPTH = 100
_VARIABLE = re.compile(r"\$\{(\w+)\}|\$(\w+)")


class ConfigError(RuntimeError):
    """Raised when a configuration cannot be found, read or parsed."""


def _expand_path(path: str) -> str:
    expanded = os.path.expanduser(path)
    return _VARIABLE.sub(lambda m: os.environ.get(m.group(1) or m.group(2), ""), expanded)


def _existing_path(path: str) -> str | None:
    expanded = _expand_path(path)
    return expanded if os.path.exists(expanded) else None


def _merge(a: Any, b: Any) -> Any:
    """Merge ``b`` into ``a`` without overriding values already in ``a``."""
    if a is None:
        return b
    if isinstance(a, dict) and isinstance(b, dict):
        for key, value in b.items():
            if isinstance(a.get(key), dict) and isinstance(value, dict):
                _merge(a[key], value)
            elif key not in a:
                a[key] = value
        return a
    log.error("Cannot merge config, conflicting or invalid JSON types")
    return a


def _is_valid_output(config: dict[str, Any], name: str, identifier: str) -> bool:
    output = config.get("output")
    if isinstance(output, list):
        return any(isinstance(entry, str) and entry in (name, identifier) for entry in output)
    if isinstance(output, str) and output:
        if output.startswith("!"):
            return output[1:] not in (name, identifier)
        return output in (name, identifier)
    return True


class Config:
    """A bar configuration: one object or a list of per-bar objects."""

    CONFIG_DIRS: tuple[str, ...] = (
        "$XDG_CONFIG_HOME/waybar/",
        "$HOME/.config/waybar/",
        "$HOME/waybar/",
        SYSCONFDIR + "/xdg/waybar/",
        "./resources/",
    )

    def __init__(self) -> None:
        self._config_file = ""
        self._config: Any = None

    @staticmethod
    def find_config_path(names: Iterable[str], dirs: Sequence[str] | None = None) -> str | None:
        """Return the first existing ``dir + name``, trying each directory in turn."""
        names = list(names)
        for directory in Config.CONFIG_DIRS if dirs is None else dirs:
            for name in names:
                found = _existing_path(directory + name)
                if found is not None:
                    return found
        return None

    def load(self, config: str) -> None:
        """Load ``config``, or the first default config file when it is empty."""
        path = config or self.find_config_path(["config", "config.jsonc"])
        if not path:
            raise ConfigError("Missing required resource files")
        self._config_file = path
        log.info("Using configuration file %s", path)
        self._config = self._setup_config(self._config, path, 0)

    def get_config(self) -> Any:
        """The loaded configuration value."""
        return self._config

    def get_output_configs(self, name: str, identifier: str) -> list[dict[str, Any]]:
        """Bar configurations that apply to the output ``name`` / ``identifier``."""
        if isinstance(self._config, list):
            return [
                bar
                for bar in self._config
                if isinstance(bar, dict) and _is_valid_output(bar, name, identifier)
            ]
        if isinstance(self._config, dict) and _is_valid_output(self._config, name, identifier):
            return [self._config]
        return []

    def _setup_config(self, dst: Any, config_file: str, depth: int) -> Any:
        if depth > _MAX_INCLUDE_DEPTH:
            raise ConfigError("Aborting due to likely recursive include in config files")
        if not config_file:
            raise ConfigError("Can't open config file")
        try:
            text = Path(config_file).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Can't open config file {config_file}") from exc
        try:
            parsed = parse_json(text)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        for part in parsed if isinstance(parsed, list) else [parsed]:
            self._resolve_includes(part, depth)
        return _merge(dst, parsed)

    def _resolve_includes(self, config: Any, depth: int) -> None:
        if not isinstance(config, dict):
            return
        includes = config.get("include")
        if isinstance(includes, str):
            includes = [includes]
        elif not isinstance(includes, list):
            return
        for include in includes:
            depth += 1
            name = include if isinstance(include, str) else ""
            log.info("Including resource file: %s", name)
            self._setup_config(config, _existing_path(name) or "", depth)