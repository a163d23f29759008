"""
Data Model
==========
Header, decoded file, and discovery record types shared by the codec,
discovery and the pipeline.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import numpy as np

FORMAT_PCM = 0x0001
FORMAT_IEEE_FLOAT = 0x0003
FORMAT_EXTENSIBLE = 0xFFFE

# KSDATAFORMAT_SUBTYPE_PCM / KSDATAFORMAT_SUBTYPE_IEEE_FLOAT
SUBFORMAT_PCM = bytes.fromhex("0100000000001000800000aa00389b71")
SUBFORMAT_IEEE_FLOAT = bytes.fromhex("0300000000001000800000aa00389b71")

Samples = List[np.ndarray]


@dataclass
class WavHeader:
    """Fields of the ``fmt `` chunk, plus the extensible extension when present."""
    audio_format: int = 0
    channels: int = 0
    sample_rate: int = 0
    byte_rate: int = 0
    block_align: int = 0
    bits_per_sample: int = 0
    fmt_size: int = 0
    valid_bits: int = 0
    channel_mask: int = 0
    sub_format: bytes = field(default=b"\x00" * 16)

    @property
    def bytes_per_sample(self) -> int:
        return self.bits_per_sample // 8

    @property
    def is_extensible(self) -> bool:
        return self.audio_format == FORMAT_EXTENSIBLE

    @property
    def encoding(self) -> Optional[str]:
        """
        Resolve the sample encoding.

        Returns 'pcm' or 'float', or None when neither the format code nor
        the extensible sub-format identifies a supported encoding.
        """
        if self.audio_format == FORMAT_PCM:
            return "pcm"
        if self.audio_format == FORMAT_IEEE_FLOAT:
            return "float"
        if self.is_extensible:
            if self.sub_format == SUBFORMAT_PCM:
                return "pcm"
            if self.sub_format == SUBFORMAT_IEEE_FLOAT:
                return "float"
        return None


@dataclass
class WavFile:
    """A fully decoded WAV file."""
    path: Optional[Path]
    header: WavHeader
    samples: Samples
    data_size: int
    file_size: int

    @property
    def num_frames(self) -> int:
        return len(self.samples[0]) if self.samples else 0

    @property
    def duration(self) -> float:
        if self.header.sample_rate == 0:
            return 0.0
        return self.num_frames / self.header.sample_rate


@dataclass(frozen=True)
class FileRecord:
    """A discovered input file, described from its header alone."""
    path: Path
    size: int
    sample_rate: int
    channels: int
    bit_depth: int
    num_frames: int

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def duration(self) -> float:
        return self.num_frames / self.sample_rate
