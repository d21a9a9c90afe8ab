"""Configuration loading for iio-rotation.

The effective configuration is built in two phases: the embedded default TOML
document is merged with the user's file (tolerant, see
:mod:`iio_rotation.app.merge`), then the merged tree is validated into the
typed :class:`Configuration` (strict, all-or-nothing).
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    ValidationError,
)

from iio_rotation.app.merge import MergeDiagnostic, merge_with_fallback
from iio_rotation.domain.errors import ConfigError
from iio_rotation.domain.orientation import OrientationCategory
from iio_rotation.infrastructure.observability import get_logger

_logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(".config/iio-rotation/config.toml")
DEFAULT_DEBOUNCE_MS = 300


# Each default action writes a line to the journal (or syslog as fallback).
DEFAULT_CONFIG_TOML = r"""
# default debounce
debounce = 300

[orientation]
normal = "msg='normal orientation'; printf '%s\\n' \"$msg\" | systemd-cat -t iio-rotation 2>/dev/null || logger -t iio-rotation -p user.notice -- \"$msg\""
leftup = "msg='leftup orientation'; printf '%s\\n' \"$msg\" | systemd-cat -t iio-rotation 2>/dev/null || logger -t iio-rotation -p user.notice -- \"$msg\""
rightup = "msg='rightup orientation'; printf '%s\\n' \"$msg\" | systemd-cat -t iio-rotation 2>/dev/null || logger -t iio-rotation -p user.notice -- \"$msg\""
bottomup = "msg='bottomup orientation'; printf '%s\\n' \"$msg\" | systemd-cat -t iio-rotation 2>/dev/null || logger -t iio-rotation -p user.notice -- \"$msg\""
undefined = "msg='undefined orientation'; printf '%s\\n' \"$msg\" | systemd-cat -t iio-rotation 2>/dev/null || logger -t iio-rotation -p user.notice -- \"$msg\""
"""


class OrientationCommands(BaseModel):
    """Shell command templates keyed by normalized orientation."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    normal: StrictStr
    undefined: StrictStr
    leftup: StrictStr
    rightup: StrictStr
    bottomup: StrictStr

    def command_for(self, category: OrientationCategory) -> str:
        return getattr(self, category.value)


class Configuration(BaseModel):
    """Validated runtime configuration, immutable once loaded."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    debounce: StrictInt = Field(default=DEFAULT_DEBOUNCE_MS, ge=0)
    orientation: OrientationCommands

    @property
    def debounce_seconds(self) -> float:
        return self.debounce / 1000


def resolve_config_path(path: Path | str = DEFAULT_CONFIG_PATH) -> Path:
    """Resolve ``path`` against the invoking user's home directory.

    ``~`` is expanded and absolute paths are returned unchanged.
    """
    return Path.home() / Path(path).expanduser()


def parse_default_document() -> dict[str, Any]:
    """Parse the embedded defaults; a failure here is a packaging bug."""
    return tomllib.loads(DEFAULT_CONFIG_TOML)


def read_user_document(config_path: Path) -> dict[str, Any] | None:
    """Read and parse the user's TOML file.

    Returns ``None`` when the file does not exist or cannot be read or
    parsed; the latter two cases are logged.
    """
    if not config_path.exists():
        _logger.debug("No config file at %s, using defaults", config_path)
        return None
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        _logger.warning("Parse error in %s, ignoring it: %s", config_path, exc)
    except (OSError, UnicodeDecodeError) as exc:
        _logger.warning("Config %s exists, but is unreadable: %s", config_path, exc)
    return None


def build_configuration(
    document: dict[str, Any], debounce_override: int | None = None
) -> Configuration:
    """Convert a merged document into a :class:`Configuration`.

    Raises:
        ConfigError: If the document does not have the required shape.
    """
    try:
        config = Configuration.model_validate(document)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    if debounce_override is not None:
        if debounce_override < 0:
            raise ConfigError("Debounce override must be non-negative")
        config = config.model_copy(update={"debounce": debounce_override})
    return config


def load_config(
    path: Path | str = DEFAULT_CONFIG_PATH,
    debounce_override: int | None = None,
    diagnostics: list[MergeDiagnostic] | None = None,
) -> Configuration:
    """Load the effective configuration.

    Args:
        path: Config file path, relative to the user's home directory.
        debounce_override: Debounce in milliseconds that wins over both the
            default and the file value.
        diagnostics: Optional list collecting rejected overrides.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If the merged document cannot be converted.
    """
    config_path = resolve_config_path(path)
    document = parse_default_document()

    user_document = read_user_document(config_path)
    if user_document is not None:
        _logger.info("Loaded config from %s", config_path)
        document = merge_with_fallback(document, user_document, diagnostics=diagnostics)

    return build_configuration(document, debounce_override)


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_CONFIG_TOML",
    "DEFAULT_DEBOUNCE_MS",
    "Configuration",
    "OrientationCommands",
    "build_configuration",
    "load_config",
    "parse_default_document",
    "read_user_document",
    "resolve_config_path",
]
