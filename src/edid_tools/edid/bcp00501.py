"""Generate AMWA BCP-005-01 (NMOS) receiver capability constraint sets from EDID video modes."""

from __future__ import annotations

from typing import Any

import edid_tools.edid.traversal as traversal
from edid_tools.edid.timing_modes import VideoTimingMode

CAP_FRAME_WIDTH = "urn:x-nmos:cap:format:frame_width"
CAP_FRAME_HEIGHT = "urn:x-nmos:cap:format:frame_height"
CAP_GRAIN_RATE = "urn:x-nmos:cap:format:grain_rate"
CAP_INTERLACE_MODE = "urn:x-nmos:cap:format:interlace_mode"

INTERLACED_MODES = ["interlaced_bff", "interlaced_psf", "interlaced_tff"]
PROGRESSIVE_MODES = ["progressive"]

# NTSC-style rates are nominal rates multiplied by 1000/1001.
NTSC_FACTOR_NUMERATOR = 1000
NTSC_FACTOR_DENOMINATOR = 1001


def _grain_rate(mode: VideoTimingMode) -> dict[str, int]:
    numerator = mode.v_rate.numerator
    denominator = mode.v_rate.denominator
    if denominator == 1:
        return {"numerator": numerator}
    if numerator % NTSC_FACTOR_NUMERATOR == 0 and denominator % NTSC_FACTOR_DENOMINATOR == 0:
        nominal_rate = (numerator // NTSC_FACTOR_NUMERATOR) // (
            denominator // NTSC_FACTOR_DENOMINATOR
        )
        return {
            "numerator": nominal_rate * NTSC_FACTOR_NUMERATOR,
            "denominator": NTSC_FACTOR_DENOMINATOR,
        }
    return {"numerator": numerator, "denominator": denominator}


def generate_constraint_set(mode: VideoTimingMode) -> dict[str, Any]:
    """Build the constraint set that matches exactly one video mode."""
    return {
        CAP_FRAME_WIDTH: {"enum": [mode.h_res]},
        CAP_FRAME_HEIGHT: {"enum": [mode.v_res]},
        CAP_GRAIN_RATE: {"enum": [_grain_rate(mode)]},
        CAP_INTERLACE_MODE: {
            "enum": list(INTERLACED_MODES if mode.interlaced else PROGRESSIVE_MODES)
        },
    }


def generate_constraint_sets(tree: traversal.Tree) -> list[dict[str, Any]]:
    """Build one constraint set per distinct video mode of the tree, in first-seen order."""
    constraint_sets: list[dict[str, Any]] = []
    for mode in traversal.iter_modes(tree):
        constraint_set = generate_constraint_set(mode)
        if constraint_set not in constraint_sets:
            constraint_sets.append(constraint_set)
    return constraint_sets
