"""
disawsm - User Settings
=======================

User preferences that shape the formatted output. Settings can come from:
- Default values (defined here)
- A JSON settings file (merged over the defaults)
- Environment variables

None of these settings change the classification except ``use_patterns``,
which adds pattern-matcher seeds. Everything else is purely cosmetic.
"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Dict, Union
import json
import logging
import os

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _parse_bool(value: str) -> Union[bool, None]:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def _valid_setting(key: str, value) -> bool:
    if key in ("use_patterns", "show_comments"):
        return isinstance(value, bool)
    if key == "custom_syntax":
        return isinstance(value, dict) and all(
            isinstance(k, str) and isinstance(v, str) for k, v in value.items()
        )
    return isinstance(value, str)


@dataclass
class Settings:
    """
    Output preferences.

    Attributes:
        label_prefix: Prefix for synthesized labels (default: "_" -> "_c000")
        assembler_syntax: Syntax preset key, or "custom" (default: "acme")
        custom_syntax: comment_prefix / label_suffix / directive_prefix
                       used when assembler_syntax is "custom"
        use_patterns: Seed classification with pattern matches (default: off)
        show_comments: Include comments in exported assembly (default: on)
    """

    label_prefix: str = "_"
    assembler_syntax: str = "acme"
    custom_syntax: Dict[str, str] = field(default_factory=dict)
    use_patterns: bool = False
    show_comments: bool = True

    # ═══════════════════════════════════════════════════════════════════════════
    # FACTORY METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    @classmethod
    def from_env(cls, base: "Settings" = None) -> "Settings":
        """
        Apply environment variable overrides.

        Environment variables (all optional):
            DISAWSM_LABEL_PREFIX: Label prefix
            DISAWSM_SYNTAX: Syntax preset key
            DISAWSM_USE_PATTERNS: "1"/"true"/"yes"/"on" or the negatives
            DISAWSM_SHOW_COMMENTS: Same boolean spellings

        Args:
            base: Settings to start from (defaults when omitted)

        Returns:
            New Settings with environment values applied
        """
        settings = cls(**asdict(base)) if base is not None else cls()

        if (prefix := os.environ.get("DISAWSM_LABEL_PREFIX")) is not None:
            settings.label_prefix = prefix

        if syntax := os.environ.get("DISAWSM_SYNTAX"):
            settings.assembler_syntax = syntax.lower()

        if patterns := os.environ.get("DISAWSM_USE_PATTERNS"):
            value = _parse_bool(patterns)
            if value is not None:
                settings.use_patterns = value

        if show := os.environ.get("DISAWSM_SHOW_COMMENTS"):
            value = _parse_bool(show)
            if value is not None:
                settings.show_comments = value

        return settings

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """
        Create Settings from a dict, ignoring unknown keys.

        A value of the wrong type is dropped with a warning and the field
        keeps its default.
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                continue
            if not _valid_setting(key, value):
                logger.warning(f"Ignoring invalid setting {key}={value!r}")
                continue
            values[key] = value
        return cls(**values)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Settings":
        """
        Load settings from a JSON file, merged over the defaults.

        A missing or unreadable file is not an error: the defaults are
        returned and a warning is logged.
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.debug(f"No settings file at {path}, using defaults")
            return cls()
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load settings from {path}: {e}")
            return cls()

        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings file {path}: expected a JSON object")
            return cls()

        return cls.from_dict(data)

    # ═══════════════════════════════════════════════════════════════════════════
    # HELPER METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: Union[str, Path]) -> None:
        """Write the settings to a JSON file."""
        Path(path).write_text(json.dumps(self.to_dict(), indent=2) + "\n", encoding="utf-8")
