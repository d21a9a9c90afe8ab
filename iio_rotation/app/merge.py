"""Type-safe merging of untyped TOML documents.

The user configuration is layered over the embedded defaults one key at a
time. A user value whose TOML type differs from the default's is rejected for
that key only, so a single bad field never blocks the rest of the file.
"""

from __future__ import annotations

import copy
import datetime
from dataclasses import dataclass
from typing import Any

from iio_rotation.infrastructure.observability import get_logger

ConfigDocument = Any

_logger = get_logger(__name__)


@dataclass(frozen=True)
class MergeDiagnostic:
    """A user override that was rejected because its type did not match."""

    path: str
    expected: str
    found: str

    def __str__(self) -> str:
        return (
            f"Config error {self.path}: expected type {self.expected}, "
            f"but found {self.found}. Using default."
        )


def type_name(value: ConfigDocument) -> str:
    """Return the TOML variant name of a parsed value."""
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "Boolean"
    if isinstance(value, int):
        return "Integer"
    if isinstance(value, float):
        return "Float number"
    if isinstance(value, str):
        return "String"
    if isinstance(value, list):
        return "Array"
    if isinstance(value, dict):
        return "Table"
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return "Date/Time"
    return type(value).__name__


def merge_with_fallback(
    base: ConfigDocument,
    override: ConfigDocument,
    path: str = "",
    diagnostics: list[MergeDiagnostic] | None = None,
) -> ConfigDocument:
    """Return a copy of ``base`` with every key of ``override`` applied.

    Nested tables are merged recursively. A key present in ``base`` keeps its
    base value when ``override`` carries a different TOML type; each such
    rejection is logged and, if ``diagnostics`` is given, appended to it.
    Keys missing from ``base`` are inserted verbatim. When either side is not
    a table the result is simply a copy of ``base``.

    Neither input is modified.
    """
    merged = copy.deepcopy(base)
    if not isinstance(merged, dict) or not isinstance(override, dict):
        return merged
    _merge_into(merged, override, path, diagnostics)
    return merged


def _merge_into(
    base: dict[str, Any],
    override: dict[str, Any],
    path: str,
    diagnostics: list[MergeDiagnostic] | None,
) -> None:
    for key, override_value in override.items():
        key_path = f"{path}.{key}" if path else key

        if key not in base:
            base[key] = copy.deepcopy(override_value)
            continue

        base_value = base[key]
        if isinstance(base_value, dict) and isinstance(override_value, dict):
            _merge_into(base_value, override_value, key_path, diagnostics)
        elif type_name(base_value) == type_name(override_value):
            base[key] = copy.deepcopy(override_value)
        else:
            diagnostic = MergeDiagnostic(
                path=key_path,
                expected=type_name(base_value),
                found=type_name(override_value),
            )
            _logger.warning("%s", diagnostic)
            if diagnostics is not None:
                diagnostics.append(diagnostic)


__all__ = ["ConfigDocument", "MergeDiagnostic", "merge_with_fallback", "type_name"]
