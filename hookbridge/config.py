"""Per-repository hook settings read from ``.hooks/hooks.ini``."""

from __future__ import annotations

import configparser
import math
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional

import configupdater

from hookbridge.log_manager import log

SETTINGS_FILE = "hooks.ini"
SETTINGS_SECTION = "hooks"

_TRUE_VALUES = {"1", "yes", "true", "on"}
_FALSE_VALUES = {"0", "no", "false", "off"}


def _strip_comment(val: str) -> str:
    """Remove inline comments after # or ;"""
    return val.split("#", 1)[0].split(";", 1)[0].strip()


@dataclass(frozen=True)
class HookSettings:
    """Settings governing how hooks of one repository run."""

    enabled: bool = True
    echo_output: bool = True
    relay_join_timeout: float = 5.0
    skip: FrozenSet[str] = field(default_factory=frozenset)

    def is_skipped(self, hook_path: str | os.PathLike[str]) -> bool:
        """Return True when the hook file is disabled by configuration."""
        return not self.enabled or Path(hook_path).name in self.skip


def _parse_bool(key: str, raw: str, default: bool) -> bool:
    value = raw.lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    log.warning("Invalid boolean '%s' for '%s', using %s", raw, key, default)
    return default


def _parse_timeout(key: str, raw: str, default: float) -> float:
    try:
        value = float(raw)
    except ValueError:
        value = None
    if value is None or not math.isfinite(value) or value <= 0:
        log.warning("Invalid timeout '%s' for '%s', using %s", raw, key, default)
        return default
    return value


def load_settings(hooks_dir: Optional[str | os.PathLike[str]]) -> HookSettings:
    """
    Load the ``[hooks]`` section of ``<hooks_dir>/hooks.ini``.

    Args:
        hooks_dir: Directory holding the repository's hook files, or None

    Returns:
        HookSettings: defaults for any missing file, section or option
    """
    defaults = HookSettings()
    if hooks_dir is None:
        return defaults

    settings_path = Path(hooks_dir) / SETTINGS_FILE
    if not settings_path.is_file():
        return defaults

    updater = configupdater.ConfigUpdater()
    try:
        updater.read(settings_path, encoding="utf-8")
    except (OSError, configparser.Error) as exc:
        log.warning("Cannot read hook settings '%s': %s", settings_path, exc)
        return defaults

    if not updater.has_section(SETTINGS_SECTION):
        log.debug("No [%s] section in '%s'", SETTINGS_SECTION, settings_path)
        return defaults

    options = {
        key.lower(): _strip_comment(option.value or "")
        for key, option in updater[SETTINGS_SECTION].items()
    }
    log.debug("Hook settings from '%s': %s", settings_path, options)

    enabled = defaults.enabled
    if "enabled" in options:
        enabled = _parse_bool("enabled", options["enabled"], defaults.enabled)
    echo_output = defaults.echo_output
    if "echo_output" in options:
        echo_output = _parse_bool("echo_output", options["echo_output"], defaults.echo_output)
    relay_join_timeout = defaults.relay_join_timeout
    if "relay_join_timeout" in options:
        relay_join_timeout = _parse_timeout(
            "relay_join_timeout", options["relay_join_timeout"], defaults.relay_join_timeout
        )
    skip = frozenset(name for name in re.split(r"[\s,]+", options.get("skip", "")) if name)

    return HookSettings(
        enabled=enabled,
        echo_output=echo_output,
        relay_join_timeout=relay_join_timeout,
        skip=skip,
    )
