"""Model classes for the audio data block and its short audio descriptors."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import ClassVar

from edid_tools.edid.binary_types import _ShortAudioDescriptorBinaryFields
from edid_tools.edid.common import InvalidDataBlockLengthError

from .base import DataBlock, Tag

SHORT_AUDIO_DESCRIPTOR_SIZE = 3

# The channel count is transmitted minus one in a three bit field.
MAX_CHANNELS = 8


# Audio format codes
# CTA-861-G Table 37 - Audio Format Code
class AudioFormat(IntEnum):
    RESERVED_0 = 0b0000
    LPCM = 0b0001
    AC3 = 0b0010
    MPEG1 = 0b0011
    MP3 = 0b0100
    MPEG2 = 0b0101
    AAC_LC = 0b0110
    DTS = 0b0111
    ATRAC = 0b1000
    ONE_BIT_AUDIO = 0b1001
    ENHANCED_AC3 = 0b1010
    DTS_HD = 0b1011
    MAT = 0b1100
    DST = 0b1101
    WMA_PRO = 0b1110
    EXTENSION = 0b1111


# Supported sampling frequencies, byte 2 of the short audio descriptor
# CTA-861-G Table 46 - Short Audio Descriptor, byte 2
class SamplingFrequency(IntFlag):
    RESERVED = 1 << 7
    SF_192_KHZ = 1 << 6
    SF_176_4_KHZ = 1 << 5
    SF_96_KHZ = 1 << 4
    SF_88_2_KHZ = 1 << 3
    SF_48_KHZ = 1 << 2
    SF_44_1_KHZ = 1 << 1
    SF_32_KHZ = 1 << 0


# Supported L-PCM sample sizes, byte 3 of the short audio descriptor for L-PCM
# CTA-861-G Table 47 - Short Audio Descriptor for Audio Format Code = 1 (L-PCM)
class LpcmBitDepth(IntFlag):
    BD_24 = 1 << 2
    BD_20 = 1 << 1
    BD_16 = 1 << 0


# Short audio descriptor
# Standards:
#  - CTA-861-G Section 7.5.2 - Audio Data Block
# Important notes:
#  - The meaning of byte 3 depends on the audio format: supported sample sizes for L-PCM, the
#    maximum bit rate divided by 8 kHz for formats 2-8, and format dependent values otherwise.
#    It is kept as the raw byte in detail.
@dataclass(frozen=True, kw_only=True)
class ShortAudioDescriptor:
    format: AudioFormat
    channels: int
    sampling_frequencies: SamplingFrequency
    detail: int = 0

    @property
    def lpcm_bit_depths(self) -> LpcmBitDepth | None:
        if self.format != AudioFormat.LPCM:
            return None
        return LpcmBitDepth(self.detail & 0x07)

    def validate(self) -> str | None:
        if self.channels < 1 or self.channels > MAX_CHANNELS:
            return f"Audio channel count {self.channels} must be between 1 and {MAX_CHANNELS}."
        if self.detail < 0 or self.detail > 0xFF:
            return f"Short audio descriptor byte 3 value {self.detail} does not fit in a byte."
        return None

    @classmethod
    def parse_binary(cls, sad_bytes: bytes) -> ShortAudioDescriptor:
        assert len(sad_bytes) == SHORT_AUDIO_DESCRIPTOR_SIZE
        bin = _ShortAudioDescriptorBinaryFields.from_buffer_copy(sad_bytes)
        return cls(
            format=AudioFormat(bin.format),
            channels=bin.channels + 1,
            sampling_frequencies=SamplingFrequency(bin.sampling_frequencies),
            detail=bin.detail,
        )

    def to_binary(self) -> bytes:
        bin = _ShortAudioDescriptorBinaryFields(
            format=self.format,
            channels=self.channels - 1,
            sampling_frequencies=self.sampling_frequencies,
            detail=self.detail,
        )
        return bytes(bin)


# Audio data block
# Standards:
#  - CTA-861-G Section 7.5.2 - Audio Data Block
# Important notes:
#  - The payload is a sequence of 3 byte short audio descriptors, so at most 10 fit in a block.
@dataclass(kw_only=True)
class AudioDataBlock(DataBlock):
    sads: list[ShortAudioDescriptor] = field(default_factory=list)

    tag: ClassVar[Tag] = Tag.AUDIO

    def validate(self) -> str | None:
        for sad in self.sads:
            validation_message = sad.validate()
            if validation_message is not None:
                return validation_message
        return None

    @classmethod
    def _do_parse_binary(cls, payload: bytes) -> AudioDataBlock:
        if len(payload) % SHORT_AUDIO_DESCRIPTOR_SIZE != 0:
            raise InvalidDataBlockLengthError(
                f"Audio data block length {len(payload)} is not a multiple of "
                f"{SHORT_AUDIO_DESCRIPTOR_SIZE}."
            )
        return cls(
            sads=[
                ShortAudioDescriptor.parse_binary(
                    payload[offset : offset + SHORT_AUDIO_DESCRIPTOR_SIZE]
                )
                for offset in range(0, len(payload), SHORT_AUDIO_DESCRIPTOR_SIZE)
            ]
        )

    def _do_to_binary(self) -> bytes:
        return b"".join(sad.to_binary() for sad in self.sads)
