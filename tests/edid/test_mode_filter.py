import io
from dataclasses import dataclass
from fractions import Fraction
from typing import Any

import pytest
import yaml

import edid_tools.edid.mode_filter as mode_filter
import edid_tools.edid.traversal as traversal
import tests.edid.util as util
from edid_tools.edid.mode_filter import ModeExclusion, ModeFilter
from edid_tools.edid.timing_modes import VideoTimingMode

EXAMPLE_FILTER = b"""
max_h_res: 1920
max_v_res: 1080
min_v_rate: 24
max_v_rate: 60000/1001
allow_interlaced: false
remove_unknown: true
exclude:
  - h_res: 1280
    v_res: 720
    v_rate: 50
"""


def test_load_mode_filter() -> None:
    assert mode_filter.load_mode_filter(io.BytesIO(EXAMPLE_FILTER)) == ModeFilter(
        max_h_res=1920,
        max_v_res=1080,
        min_v_rate=Fraction(24),
        max_v_rate=Fraction(60000, 1001),
        allow_interlaced=False,
        remove_unknown=True,
        exclude=[ModeExclusion(h_res=1280, v_res=720, v_rate=Fraction(50))],
    )


def test_load_empty_mode_filter() -> None:
    assert mode_filter.load_mode_filter(io.BytesIO(b"")) == ModeFilter()


def test_load_invalid_yaml() -> None:
    with pytest.raises(yaml.YAMLError):
        mode_filter.load_mode_filter(io.BytesIO(b"max_h_res: [1920"))


@pytest.mark.parametrize(
    "value,rate",
    [
        (60, Fraction(60)),
        ("60000/1001", Fraction(60000, 1001)),
        (59.94, Fraction(5994, 100)),
        ("23.976", Fraction(23976, 1000)),
    ],
)
def test_parse_rate(value: int | float | str, rate: Fraction) -> None:
    assert mode_filter.parse_rate(value) == rate


@pytest.mark.parametrize(
    "filter_yaml,failure",
    [
        ({"max_h_res": 1920, "max_resolution": 4}, "Unknown mode filter keys: max_resolution"),
        (
            {"exclude": [{"h_res": 1280, "v_res": 720, "rate": 50}]},
            "Unknown mode exclusion keys: rate",
        ),
        (["max_h_res"], "must contain a mapping of filter settings."),
    ],
)
def test_parse_mode_filter_errors(filter_yaml: Any, failure: str) -> None:
    with pytest.raises(ValueError, match=failure):
        mode_filter.parse_mode_filter(filter_yaml)


@dataclass
class RejectsTestCase:
    name: str
    filter: ModeFilter
    mode: VideoTimingMode
    rejected: bool


@pytest.mark.parametrize(
    "tc",
    [
        RejectsTestCase("empty filter", ModeFilter(), util.mode(3840, 2160, 60), False),
        RejectsTestCase(
            "horizontal resolution",
            ModeFilter(max_h_res=1920),
            util.mode(3840, 2160, 30),
            True,
        ),
        RejectsTestCase(
            "horizontal resolution at limit",
            ModeFilter(max_h_res=1920),
            util.mode(1920, 1080, 60),
            False,
        ),
        RejectsTestCase(
            "vertical resolution", ModeFilter(max_v_res=720), util.mode(1920, 1080, 60), True
        ),
        RejectsTestCase(
            "minimum rate", ModeFilter(min_v_rate=Fraction(50)), util.mode(1920, 1080, 24), True
        ),
        RejectsTestCase(
            "maximum NTSC rate rejects integer rate",
            ModeFilter(max_v_rate=Fraction(60000, 1001)),
            util.mode(1920, 1080, 60),
            True,
        ),
        RejectsTestCase(
            "maximum NTSC rate keeps NTSC rate",
            ModeFilter(max_v_rate=Fraction(60000, 1001)),
            util.mode(720, 480, Fraction(60000, 1001)),
            False,
        ),
        RejectsTestCase(
            "interlaced",
            ModeFilter(allow_interlaced=False),
            util.mode(1024, 768, 87, interlaced=True),
            True,
        ),
        RejectsTestCase(
            "exclusion without rate",
            ModeFilter(exclude=[ModeExclusion(h_res=1280, v_res=720)]),
            util.mode(1280, 720, 50),
            True,
        ),
        RejectsTestCase(
            "exclusion with other rate",
            ModeFilter(exclude=[ModeExclusion(h_res=1280, v_res=720, v_rate=Fraction(60))]),
            util.mode(1280, 720, 50),
            False,
        ),
        RejectsTestCase(
            "exclusion with other scan type",
            ModeFilter(exclude=[ModeExclusion(h_res=1024, v_res=768, interlaced=False)]),
            util.mode(1024, 768, 87, interlaced=True),
            False,
        ),
    ],
    ids=lambda tc: tc.name,
)
def test_rejects(tc: RejectsTestCase) -> None:
    assert tc.filter.rejects(tc.mode) == tc.rejected


def test_apply() -> None:
    tree = util.make_edid()
    filter = mode_filter.load_mode_filter(io.BytesIO(EXAMPLE_FILTER))
    filter.apply(tree)

    # Everything above 59.94 Hz goes, including 640x480 at 59.94 Hz and 720p50 by exclusion.
    assert list(traversal.iter_modes(tree)) == [
        util.mode(800, 600, 56),
        util.mode(1920, 1080, 50),
        util.mode(720, 480, Fraction(60000, 1001)),
        util.mode(720, 576, 50),
    ]
