"""Visit and remove the video timing modes advertised anywhere in an EDID."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterator
from enum import IntFlag
from typing import TypeVar

import edid_tools.edid.data_block as data_block
import edid_tools.edid.descriptor as descriptor
import edid_tools.edid.timing_modes as timing_modes
from edid_tools.edid.base_block import BaseBlock
from edid_tools.edid.cta861_block import Cta861Block
from edid_tools.edid.edid import EdidData
from edid_tools.edid.timing_modes import VideoTimingMode
from edid_tools.edid.vic_catalog import get_cta861_video_timing_mode, is_valid_vic

Tree = BaseBlock | Cta861Block | EdidData
Predicate = Callable[[VideoTimingMode], bool]

F = TypeVar("F", bound=IntFlag)


# Mode lookups for the individual timing codes.  Each returns None for a code without a known
# mode.


def vic_mode(vic: int) -> VideoTimingMode | None:
    return get_cta861_video_timing_mode(vic) if is_valid_vic(vic) else None


def hdmi_vic_mode(hdmi_vic: int) -> VideoTimingMode | None:
    vic = timing_modes.HDMI_VIC_TO_VIC.get(hdmi_vic)
    return vic_mode(vic) if vic is not None else None


def _flag_modes(flags: F, table: dict[F, VideoTimingMode]) -> Iterator[VideoTimingMode]:
    for flag, mode in table.items():
        if flag in flags:
            yield mode


def _descriptor_modes(desc: descriptor.Descriptor) -> Iterator[VideoTimingMode]:
    match desc:
        case descriptor.DetailedTimingDescriptor():
            yield timing_modes.to_video_timing_mode(desc)
        case descriptor.EstablishedTimings3():
            for flags, table in zip(desc.timing_bytes(), timing_modes.ESTABLISHED_TIMINGS_3):
                yield from _flag_modes(flags, table)
        case _:
            pass


def _base_block_modes(block: BaseBlock) -> Iterator[VideoTimingMode]:
    yield from _flag_modes(block.established_timings_1, timing_modes.ESTABLISHED_TIMINGS_1)
    yield from _flag_modes(block.established_timings_2, timing_modes.ESTABLISHED_TIMINGS_2)
    yield from _flag_modes(block.manufacturer_timings, timing_modes.MANUFACTURER_TIMINGS)
    for timing in block.standard_timings:
        if timing is not None:
            mode = timing_modes.standard_timing_mode(timing)
            if mode is not None:
                yield mode
    for desc in block.descriptors:
        yield from _descriptor_modes(desc)


def _cta861_block_modes(block: Cta861Block) -> Iterator[VideoTimingMode]:
    for db in block.data_blocks:
        match db:
            case data_block.VideoDataBlock():
                for vic in db.vics:
                    mode = vic_mode(vic)
                    if mode is not None:
                        yield mode
            case data_block.HdmiVendorDataBlock(hdmi_video=data_block.HdmiVideoSubblock()):
                assert db.hdmi_video is not None
                for hdmi_vic in db.hdmi_video.hdmi_vics:
                    mode = hdmi_vic_mode(hdmi_vic)
                    if mode is not None:
                        yield mode
            case _:
                pass
    for dtd in block.dtds:
        yield timing_modes.to_video_timing_mode(dtd)


def iter_modes(tree: Tree) -> Iterator[VideoTimingMode]:
    """Lazily generate every video timing mode reachable in the tree, in structural order.

    Base blocks yield their established timings, standard timings, then descriptors.  CTA-861
    blocks yield the VICs of their data blocks, then their DTDs.  A complete EDID yields its base
    block followed by each extension block.  Timing codes without a known mode are skipped.  Call
    the function again to restart the sequence.
    """
    match tree:
        case BaseBlock():
            yield from _base_block_modes(tree)
        case Cta861Block():
            yield from _cta861_block_modes(tree)
        case EdidData():
            yield from _base_block_modes(tree.base_block)
            for block in tree.extension_blocks:
                yield from _cta861_block_modes(block)
        case _:
            assert False


def for_each_mode(tree: Tree, visit: Callable[[VideoTimingMode], None]) -> None:
    """Invoke visit once for each mode produced by iter_modes."""
    for mode in iter_modes(tree):
        visit(mode)


# Removal


def _should_remove(
    mode: VideoTimingMode | None, predicate: Predicate, remove_unknown: bool
) -> bool:
    return remove_unknown if mode is None else predicate(mode)


def _remove_flags(
    flags: F, table: dict[F, VideoTimingMode], predicate: Predicate, remove_unknown: bool
) -> F:
    for flag in type(flags):
        if flag not in flags:
            continue
        if _should_remove(table.get(flag), predicate, remove_unknown):
            flags &= ~flag
    return flags


def _remove_from_descriptor(
    desc: descriptor.Descriptor, predicate: Predicate
) -> descriptor.Descriptor:
    match desc:
        case descriptor.DetailedTimingDescriptor():
            if predicate(timing_modes.to_video_timing_mode(desc)):
                return descriptor.Dummy()
            return desc
        case descriptor.EstablishedTimings3():
            # Reserved bits are not timings, so they are never removed as unknown.
            timing_bytes = [
                _remove_flags(flags, table, predicate, remove_unknown=False)
                for flags, table in zip(desc.timing_bytes(), timing_modes.ESTABLISHED_TIMINGS_3)
            ]
            return dataclasses.replace(
                desc,
                byte_6=descriptor.EstablishedTimings3Byte6(timing_bytes[0]),
                byte_7=descriptor.EstablishedTimings3Byte7(timing_bytes[1]),
                byte_8=descriptor.EstablishedTimings3Byte8(timing_bytes[2]),
                byte_9=descriptor.EstablishedTimings3Byte9(timing_bytes[3]),
                byte_10=descriptor.EstablishedTimings3Byte10(timing_bytes[4]),
                byte_11=descriptor.EstablishedTimings3Byte11(timing_bytes[5]),
            )
        case _:
            return desc


def _remove_from_base_block(block: BaseBlock, predicate: Predicate, remove_unknown: bool) -> None:
    block.established_timings_1 = _remove_flags(
        block.established_timings_1, timing_modes.ESTABLISHED_TIMINGS_1, predicate, remove_unknown
    )
    block.established_timings_2 = _remove_flags(
        block.established_timings_2, timing_modes.ESTABLISHED_TIMINGS_2, predicate, remove_unknown
    )
    block.manufacturer_timings = _remove_flags(
        block.manufacturer_timings, timing_modes.MANUFACTURER_TIMINGS, predicate, remove_unknown
    )
    for index, timing in enumerate(block.standard_timings):
        if timing is None:
            continue
        if _should_remove(timing_modes.standard_timing_mode(timing), predicate, remove_unknown):
            block.standard_timings[index] = None
    block.descriptors = [_remove_from_descriptor(desc, predicate) for desc in block.descriptors]


def _reindex_svd_references(block: Cta861Block, new_positions: dict[int, int]) -> None:
    """Update the blocks that refer to SVDs by position after SVDs were removed.

    new_positions maps each kept 0-based SVD position, counted across all video data blocks of the
    extension block, to its position after the removal.
    """
    for index, db in enumerate(block.data_blocks):
        match db:
            case data_block.YCbCr420CapabilityMapDataBlock():
                block.data_blocks[index] = data_block.YCbCr420CapabilityMapDataBlock(
                    svd_indices=frozenset(
                        new_positions[svd_index - 1] + 1
                        for svd_index in db.svd_indices
                        if svd_index - 1 in new_positions
                    )
                )
            case data_block.HdmiVendorDataBlock(hdmi_video=data_block.HdmiVideoSubblock()):
                hdmi_video = db.hdmi_video
                assert hdmi_video is not None
                hdmi_video.vic_3d_support = [
                    dataclasses.replace(vic_3d, vic_index=new_positions[vic_3d.vic_index])
                    for vic_3d in hdmi_video.vic_3d_support
                    if vic_3d.vic_index in new_positions
                    and new_positions[vic_3d.vic_index] <= 0xF
                ]
                support = hdmi_video.stereo_video_support
                if support is not None and support.vic_mask is not None:
                    vic_mask = 0
                    for old, new in new_positions.items():
                        if old <= 0xF and new <= 0xF and support.vic_mask & (1 << old):
                            vic_mask |= 1 << new
                    hdmi_video.stereo_video_support = dataclasses.replace(
                        support, vic_mask=vic_mask
                    )
            case _:
                pass


def _remove_from_cta861_block(
    block: Cta861Block, predicate: Predicate, remove_unknown: bool
) -> None:
    new_positions: dict[int, int] = {}
    old_position = 0
    for db in block.data_blocks:
        match db:
            case data_block.VideoDataBlock():
                kept: list[int] = []
                for svd in db.svds:
                    if not _should_remove(
                        vic_mode(data_block.svd_to_vic(svd)), predicate, remove_unknown
                    ):
                        new_positions[old_position] = len(new_positions)
                        kept.append(svd)
                    old_position += 1
                db.svds = kept
            case data_block.HdmiVendorDataBlock(hdmi_video=data_block.HdmiVideoSubblock()):
                assert db.hdmi_video is not None
                db.hdmi_video.hdmi_vics = [
                    hdmi_vic
                    for hdmi_vic in db.hdmi_video.hdmi_vics
                    if not _should_remove(hdmi_vic_mode(hdmi_vic), predicate, remove_unknown)
                ]
            case _:
                pass
    if len(new_positions) != old_position:
        _reindex_svd_references(block, new_positions)

    block.dtds = [
        dtd for dtd in block.dtds if not predicate(timing_modes.to_video_timing_mode(dtd))
    ]


def remove_mode_if(tree: Tree, predicate: Predicate, remove_unknown: bool = False) -> None:
    """Remove every timing in the tree whose mode satisfies the predicate, in place.

    Bitmask bits are cleared, standard timing slots are emptied, base block DTDs are replaced with
    dummy descriptors, and VICs and CTA-861 DTDs are erased from their lists.  Blocks that refer to
    SVDs by position are updated to match.  When remove_unknown is set, timing codes that have no
    known mode are removed too.
    """
    match tree:
        case BaseBlock():
            _remove_from_base_block(tree, predicate, remove_unknown)
        case Cta861Block():
            _remove_from_cta861_block(tree, predicate, remove_unknown)
        case EdidData():
            _remove_from_base_block(tree.base_block, predicate, remove_unknown)
            for block in tree.extension_blocks:
                _remove_from_cta861_block(block, predicate, remove_unknown)
        case _:
            assert False
