"""Remove unwanted video modes from an EDID according to a user-provided YAML file.

Example filter file:

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

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, BinaryIO

import yaml

import edid_tools.edid.traversal as traversal
from edid_tools.edid.timing_modes import VideoTimingMode

FILTER_KEYS = {
    "max_h_res",
    "max_v_res",
    "min_v_rate",
    "max_v_rate",
    "allow_interlaced",
    "remove_unknown",
    "exclude",
}
EXCLUSION_KEYS = {"h_res", "v_res", "v_rate", "interlaced"}


def parse_rate(value: int | float | str) -> Fraction:
    """Parse a refresh rate given as a number or as a "numerator/denominator" string."""
    return Fraction(str(value))


@dataclass(frozen=True, kw_only=True)
class ModeExclusion:
    """A specific mode to remove.  The rate and scan type only need to match when given."""

    h_res: int
    v_res: int
    v_rate: Fraction | None = None
    interlaced: bool | None = None

    def matches(self, mode: VideoTimingMode) -> bool:
        return (
            mode.h_res == self.h_res
            and mode.v_res == self.v_res
            and (self.v_rate is None or mode.v_rate == self.v_rate)
            and (self.interlaced is None or mode.interlaced == self.interlaced)
        )


@dataclass(frozen=True, kw_only=True)
class ModeFilter:
    max_h_res: int | None = None
    max_v_res: int | None = None
    min_v_rate: Fraction | None = None
    max_v_rate: Fraction | None = None
    allow_interlaced: bool = True
    # Also remove timing codes that do not correspond to a known mode.
    remove_unknown: bool = False
    exclude: list[ModeExclusion] = field(default_factory=list)

    def rejects(self, mode: VideoTimingMode) -> bool:
        """Indicate whether the mode should be removed."""
        if self.max_h_res is not None and mode.h_res > self.max_h_res:
            return True
        if self.max_v_res is not None and mode.v_res > self.max_v_res:
            return True
        if self.min_v_rate is not None and mode.v_rate < self.min_v_rate:
            return True
        if self.max_v_rate is not None and mode.v_rate > self.max_v_rate:
            return True
        if mode.interlaced and not self.allow_interlaced:
            return True
        return any(exclusion.matches(mode) for exclusion in self.exclude)

    def apply(self, tree: traversal.Tree) -> None:
        """Remove the rejected modes from the tree, in place."""
        traversal.remove_mode_if(tree, self.rejects, remove_unknown=self.remove_unknown)


def _check_keys(section: str, values: dict[str, Any], allowed_keys: set[str]) -> None:
    unknown_keys = set(values.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown {section} keys: {', '.join(sorted(unknown_keys))}")


def parse_mode_filter(filter_yaml: dict[str, Any] | None) -> ModeFilter:
    """Create a mode filter from the contents of a filter file.  An empty file removes nothing."""
    if filter_yaml is None:
        return ModeFilter()
    if not isinstance(filter_yaml, dict):
        raise ValueError("The mode filter file must contain a mapping of filter settings.")
    _check_keys("mode filter", filter_yaml, FILTER_KEYS)

    exclusions: list[ModeExclusion] = []
    for exclusion_dict in filter_yaml.get("exclude", []) or []:
        _check_keys("mode exclusion", exclusion_dict, EXCLUSION_KEYS)
        exclusions.append(
            ModeExclusion(
                h_res=int(exclusion_dict["h_res"]),
                v_res=int(exclusion_dict["v_res"]),
                v_rate=(
                    parse_rate(exclusion_dict["v_rate"])
                    if exclusion_dict.get("v_rate") is not None
                    else None
                ),
                interlaced=(
                    bool(exclusion_dict["interlaced"])
                    if exclusion_dict.get("interlaced") is not None
                    else None
                ),
            )
        )

    max_h_res = filter_yaml.get("max_h_res")
    max_v_res = filter_yaml.get("max_v_res")
    min_v_rate = filter_yaml.get("min_v_rate")
    max_v_rate = filter_yaml.get("max_v_rate")
    return ModeFilter(
        max_h_res=int(max_h_res) if max_h_res is not None else None,
        max_v_res=int(max_v_res) if max_v_res is not None else None,
        min_v_rate=parse_rate(min_v_rate) if min_v_rate is not None else None,
        max_v_rate=parse_rate(max_v_rate) if max_v_rate is not None else None,
        allow_interlaced=bool(filter_yaml.get("allow_interlaced", True)),
        remove_unknown=bool(filter_yaml.get("remove_unknown", False)),
        exclude=exclusions,
    )


def load_mode_filter(filter_file: BinaryIO) -> ModeFilter:
    return parse_mode_filter(yaml.safe_load(filter_file))
