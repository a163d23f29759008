"""
Run configuration for the slicer.

The hardware budget is a fixed number of sample frames shared by all slices
of one output file; stereo output halves it.
"""

from pydantic import BaseModel, ConfigDict, field_validator

MAX_TOTAL_FRAMES = 260000

VALID_SAMPLE_RATES = frozenset({44100, 22050, 14700, 11025})
VALID_CHANNELS = frozenset({1, 2})
MIN_SLICES = 1
MAX_SLICES = 64


class SliceConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    sample_rate: int = 44100
    channels: int = 1
    slice_count: int = 32
    normalize: bool = False
    keep_slices: bool = False

    @field_validator("sample_rate")
    @classmethod
    def _check_rate(cls, value: int) -> int:
        if value not in VALID_SAMPLE_RATES:
            allowed = ", ".join(str(r) for r in sorted(VALID_SAMPLE_RATES, reverse=True))
            raise ValueError(f"sample rate must be one of: {allowed}")
        return value

    @field_validator("channels")
    @classmethod
    def _check_channels(cls, value: int) -> int:
        if value not in VALID_CHANNELS:
            raise ValueError("channels must be 1 (mono) or 2 (stereo)")
        return value

    @field_validator("slice_count")
    @classmethod
    def _check_slices(cls, value: int) -> int:
        if not MIN_SLICES <= value <= MAX_SLICES:
            raise ValueError(f"slice count must be between {MIN_SLICES} and {MAX_SLICES}")
        return value

    @property
    def max_frames(self) -> int:
        return MAX_TOTAL_FRAMES // self.channels

    @property
    def frames_per_slice(self) -> int:
        return self.max_frames // self.slice_count

    @property
    def slice_duration_ms(self) -> float:
        return self.frames_per_slice / self.sample_rate * 1000.0

    @property
    def max_duration_seconds(self) -> float:
        return self.max_frames / self.sample_rate
