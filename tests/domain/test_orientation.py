from __future__ import annotations

import pytest

from iio_rotation.domain.orientation import OrientationCategory, normalize


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("bottom-up", "bottomup"),
        ("Bottom-Up", "bottomup"),
        ("LEFT_UP", "leftup"),
        ("  right up  ", "rightup"),
        ("normal", "normal"),
        ("", ""),
        ("-_-!", ""),
        ("Ünter-Zwei2", "ünterzwei2"),
    ],
)
def test_normalize(raw: str, expected: str) -> None:
    assert normalize(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["bottom-up", "Left-Up", "", "***", "ÀB-c_d 9", "undefined", "sideways!"],
)
def test_normalize_is_idempotent(raw: str) -> None:
    assert normalize(normalize(raw)) == normalize(raw)


def test_hyphenated_and_compact_forms_agree() -> None:
    assert normalize("Bottom-Up") == normalize("bottomup")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("normal", OrientationCategory.NORMAL),
        ("left-up", OrientationCategory.LEFT_UP),
        ("right-up", OrientationCategory.RIGHT_UP),
        ("bottom-up", OrientationCategory.BOTTOM_UP),
        ("undefined", OrientationCategory.UNDEFINED),
        ("sideways", OrientationCategory.UNDEFINED),
        ("", OrientationCategory.UNDEFINED),
        ("?!", OrientationCategory.UNDEFINED),
    ],
)
def test_from_string_is_total(raw: str, expected: OrientationCategory) -> None:
    assert OrientationCategory.from_string(raw) is expected
