import pytest
from pydantic import ValidationError

from wavslice.config import MAX_TOTAL_FRAMES, SliceConfig


def test_defaults():
    config = SliceConfig()
    assert config.sample_rate == 44100
    assert config.channels == 1
    assert config.slice_count == 32
    assert config.normalize is False
    assert config.frames_per_slice == MAX_TOTAL_FRAMES // 32


@pytest.mark.parametrize("channels, slices, expected", [
    (1, 1, 260000),
    (2, 1, 130000),
    (1, 64, 4062),
    (2, 3, 43333),
])
def test_frames_per_slice(channels, slices, expected):
    config = SliceConfig(channels=channels, slice_count=slices)
    assert config.frames_per_slice == expected


@pytest.mark.parametrize("kwargs", [
    {"sample_rate": 48000},
    {"channels": 3},
    {"channels": 0},
    {"slice_count": 0},
    {"slice_count": 65},
])
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValidationError):
        SliceConfig(**kwargs)


def test_config_is_frozen():
    config = SliceConfig()
    with pytest.raises(ValidationError):
        config.normalize = True
