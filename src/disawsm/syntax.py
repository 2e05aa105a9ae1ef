"""
Assembler Syntax Definitions
============================

Different 6502 assemblers spell the same program slightly differently.
The formatter and exporter only depend on three textual conventions:

- comment_prefix: starts a comment (";" or "//")
- label_suffix: appended where a label is defined ("" or ":")
- directive_prefix: prefix of data directives ("!" gives "!byte",
  "." gives ".byte")

Presets are loaded from ``tables/syntax.json`` by the table loader; a
"custom" syntax can be assembled from user settings.
"""

from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass(frozen=True)
class AssemblerSyntax:
    """
    Textual conventions of one assembler.

    Attributes:
        name: Display name ("ACME", "KickAssembler", ...)
        comment_prefix: Comment introducer
        label_suffix: Text appended to label definitions
        directive_prefix: Prefix for data directives
    """
    name: str
    comment_prefix: str = ";"
    label_suffix: str = ""
    directive_prefix: str = "!"

    @classmethod
    def from_dict(cls, data: Mapping[str, str]) -> "AssemblerSyntax":
        """Build a syntax from its JSON form (camelCase keys)."""
        return cls(
            name=data["name"],
            comment_prefix=data.get("commentPrefix", ";"),
            label_suffix=data.get("labelSuffix", ""),
            directive_prefix=data.get("pseudoOpcodePrefix", "!"),
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "commentPrefix": self.comment_prefix,
            "labelSuffix": self.label_suffix,
            "pseudoOpcodePrefix": self.directive_prefix,
        }


# Fallback when neither the requested nor the "acme" preset is available
DEFAULT_SYNTAX = AssemblerSyntax(
    name="ACME",
    comment_prefix=";",
    label_suffix="",
    directive_prefix="!",
)

CUSTOM_SYNTAX_KEY = "custom"


def custom_syntax(values: Optional[Mapping[str, str]]) -> AssemblerSyntax:
    """
    Build the user-defined syntax.

    Empty comment and directive prefixes fall back to the default; an
    empty label suffix is a legitimate choice and is kept.
    """
    values = values or {}
    label_suffix = values.get("label_suffix")
    return AssemblerSyntax(
        name="Custom",
        comment_prefix=values.get("comment_prefix") or DEFAULT_SYNTAX.comment_prefix,
        label_suffix=DEFAULT_SYNTAX.label_suffix if label_suffix is None else label_suffix,
        directive_prefix=values.get("directive_prefix") or DEFAULT_SYNTAX.directive_prefix,
    )


def resolve_syntax(
    syntaxes: Mapping[str, AssemblerSyntax],
    key: str,
    custom: Optional[Mapping[str, str]] = None,
) -> AssemblerSyntax:
    """
    Pick the syntax for a settings key.

    Args:
        syntaxes: Loaded presets keyed by lowercase name
        key: Preset key, or "custom"
        custom: Values for the custom syntax

    Returns:
        The requested preset, else the "acme" preset, else DEFAULT_SYNTAX
    """
    if key == CUSTOM_SYNTAX_KEY:
        return custom_syntax(custom)
    return syntaxes.get(key.lower()) or syntaxes.get("acme") or DEFAULT_SYNTAX
