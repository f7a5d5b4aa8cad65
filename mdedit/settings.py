"""Editor settings and their persistence.

Settings are stored as JSON in the user's config directory. A missing or
damaged file never stops the editor: problems are logged and defaults are
used instead.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import platformdirs

logger = logging.getLogger(__name__)

# Keys bound by the editor itself; wrap shortcuts may not take them over.
RESERVED_KEYS = frozenset({'b', 'i', 'z', 'y'})


@dataclass(frozen=True)
class WrapShortcut:
    """A Ctrl/Cmd shortcut that wraps the selection in prefix and suffix.

    With ``select_inner`` the wrapped text stays selected afterwards,
    otherwise the cursor lands after the suffix.
    """
    key: str
    prefix: str
    suffix: str
    select_inner: bool = False


@dataclass
class EditorSettings:
    bold_marker: str = "**"
    italic_marker: str = "_"
    wrap_shortcuts: List[WrapShortcut] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> EditorSettings:
        """Build settings from a JSON dict, skipping invalid values."""
        settings = cls()
        for key in ('bold_marker', 'italic_marker'):
            if key not in data:
                continue
            value = data[key]
            if validate_marker(value):
                setattr(settings, key, value)
            else:
                logger.warning(f"Ignoring invalid {key}: {value!r}")

        shortcuts = data.get('wrap_shortcuts', [])
        if not isinstance(shortcuts, list):
            logger.warning("wrap_shortcuts is not a list, ignoring")
            shortcuts = []
        seen = set()
        for entry in shortcuts:
            shortcut = parse_wrap_shortcut(entry)
            if shortcut is None:
                logger.warning(f"Ignoring invalid wrap shortcut: {entry!r}")
                continue
            if shortcut.key in seen:
                logger.warning(f"Duplicate wrap shortcut for Ctrl-{shortcut.key}, keeping the first")
                continue
            seen.add(shortcut.key)
            settings.wrap_shortcuts.append(shortcut)
        return settings

    def to_dict(self) -> Dict[str, Any]:
        return {
            'bold_marker': self.bold_marker,
            'italic_marker': self.italic_marker,
            'wrap_shortcuts': [
                {
                    'key': s.key,
                    'prefix': s.prefix,
                    'suffix': s.suffix,
                    'select_inner': s.select_inner,
                }
                for s in self.wrap_shortcuts
            ],
        }


def validate_marker(value: Any) -> bool:
    """Markers must be non-empty single-line strings."""
    return isinstance(value, str) and value != "" and '\n' not in value


def parse_wrap_shortcut(entry: Any) -> Optional[WrapShortcut]:
    if not isinstance(entry, dict):
        return None
    key = entry.get('key')
    prefix = entry.get('prefix', '')
    suffix = entry.get('suffix', '')
    select_inner = entry.get('select_inner', False)
    if not isinstance(key, str) or len(key) != 1 or not key.isalpha():
        return None
    key = key.lower()
    if key in RESERVED_KEYS:
        return None
    if not isinstance(prefix, str) or not isinstance(suffix, str):
        return None
    if not (prefix or suffix):
        return None
    if not isinstance(select_inner, bool):
        return None
    return WrapShortcut(key=key, prefix=prefix, suffix=suffix, select_inner=select_inner)


class SettingsStore:
    """Loads and saves :class:`EditorSettings` as a JSON file."""

    def __init__(self, settings_file: Optional[Path] = None):
        if settings_file is None:
            config_dir = Path(platformdirs.user_config_dir("mdedit"))
            settings_file = config_dir / "settings.json"
        self._settings_file = Path(settings_file)
        self._cache: Optional[EditorSettings] = None

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    def _read_raw(self) -> Dict[str, Any]:
        if not self._settings_file.exists():
            return {}
        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            return {}
        return data

    def load(self) -> EditorSettings:
        """Load settings, falling back to defaults for anything unusable."""
        if self._cache is None:
            self._cache = EditorSettings.from_dict(self._read_raw())
        return self._cache

    def save(self, settings: EditorSettings) -> bool:
        """Save settings atomically (temp file + rename).

        Returns:
            True if save was successful, False otherwise.
        """
        temp_file = self._settings_file.with_suffix('.tmp')
        try:
            self._settings_file.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(settings.to_dict(), f, indent=2)
            temp_file.replace(self._settings_file)
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False
        self._cache = settings
        return True

    def clear_cache(self) -> None:
        self._cache = None


# Global instance
_store: Optional[SettingsStore] = None


def get_settings_store() -> SettingsStore:
    """Get the global settings store instance."""
    global _store
    if _store is None:
        _store = SettingsStore()
    return _store
