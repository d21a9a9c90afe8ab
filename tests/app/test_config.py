from __future__ import annotations

import logging
import tomllib
from pathlib import Path

import pytest

from iio_rotation.app.config import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_CONFIG_TOML,
    Configuration,
    build_configuration,
    load_config,
    resolve_config_path,
)
from iio_rotation.app.merge import MergeDiagnostic
from iio_rotation.domain.errors import ConfigError
from iio_rotation.domain.orientation import OrientationCategory


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


def _write_config(home: Path, content: str, relative: Path = DEFAULT_CONFIG_PATH) -> Path:
    path = home / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _defaults() -> dict:
    return tomllib.loads(DEFAULT_CONFIG_TOML)


def test_default_document_has_every_orientation() -> None:
    document = _defaults()

    assert document["debounce"] == 300
    assert set(document["orientation"]) == {c.value for c in OrientationCategory}


def test_default_commands_log_their_orientation() -> None:
    document = _defaults()

    command = document["orientation"]["bottomup"]
    assert command.startswith("msg='bottomup orientation';")
    assert "printf '%s\\n' \"$msg\"" in command
    assert "systemd-cat -t iio-rotation" in command


def test_defaults_only_when_file_missing(home: Path) -> None:
    config = load_config()

    assert isinstance(config, Configuration)
    assert config.debounce == 300
    assert config.orientation.leftup == _defaults()["orientation"]["leftup"]


def test_user_file_overrides_defaults(home: Path) -> None:
    _write_config(
        home,
        'debounce = 120\n[orientation]\nleftup = "rotate left"\n',
    )

    config = load_config()

    assert config.debounce == 120
    assert config.orientation.leftup == "rotate left"
    assert config.orientation.normal == _defaults()["orientation"]["normal"]


def test_mismatched_field_falls_back_to_default(
    home: Path, caplog: pytest.LogCaptureFixture
) -> None:
    _write_config(
        home,
        "[orientation]\n"
        "normal = 1\n"
        'leftup = "rotate left"\n'
        'rightup = "rotate right"\n'
        'bottomup = "rotate inverted"\n',
    )
    diagnostics: list[MergeDiagnostic] = []

    with caplog.at_level(logging.WARNING):
        config = load_config(diagnostics=diagnostics)

    assert config.orientation.normal == _defaults()["orientation"]["normal"]
    assert config.orientation.leftup == "rotate left"
    assert config.orientation.rightup == "rotate right"
    assert config.orientation.bottomup == "rotate inverted"
    assert [d.path for d in diagnostics] == ["orientation.normal"]
    assert "orientation.normal" in caplog.text


def test_unparseable_file_is_ignored(home: Path, caplog: pytest.LogCaptureFixture) -> None:
    _write_config(home, "debounce = = 5\n[orientation\n")

    with caplog.at_level(logging.WARNING):
        config = load_config()

    assert config.debounce == 300
    assert "Parse error" in caplog.text


def test_undecodable_file_is_ignored(home: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = home / DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True)
    path.write_bytes(b"debounce = \xff\xfe\n")

    with caplog.at_level(logging.WARNING):
        config = load_config()

    assert config.debounce == 300
    assert "unreadable" in caplog.text


def test_custom_relative_path_resolves_against_home(home: Path) -> None:
    _write_config(home, "debounce = 42\n", Path("custom/rotation.toml"))

    config = load_config("custom/rotation.toml")

    assert config.debounce == 42


def test_absolute_path_is_kept(tmp_path: Path) -> None:
    absolute = tmp_path / "elsewhere.toml"

    assert resolve_config_path(absolute) == absolute


def test_debounce_override_wins_over_file(home: Path) -> None:
    _write_config(home, "debounce = 500\n")

    config = load_config(debounce_override=50)

    assert config.debounce == 50
    assert config.debounce_seconds == pytest.approx(0.05)


def test_unknown_top_level_keys_are_ignored(home: Path) -> None:
    _write_config(home, 'theme = "dark"\n[hooks]\nbefore = "true"\n')

    config = load_config()

    assert config.debounce == 300
    assert not hasattr(config, "theme")


def test_negative_debounce_is_fatal(home: Path) -> None:
    _write_config(home, "debounce = -5\n")

    with pytest.raises(ConfigError):
        load_config()


def test_missing_orientation_key_is_fatal() -> None:
    with pytest.raises(ConfigError):
        build_configuration({"debounce": 10, "orientation": {"normal": "true"}})


def test_wrong_final_type_is_fatal() -> None:
    document = _defaults()
    document["orientation"]["undefined"] = 7

    with pytest.raises(ConfigError):
        build_configuration(document)


def test_configuration_is_immutable(home: Path) -> None:
    config = load_config()

    with pytest.raises(Exception):
        config.debounce = 10  # type: ignore[misc]
