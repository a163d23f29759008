import numpy as np
import pytest

from wavslice.transforms import Transforms


def _stream(*channels):
    return [np.asarray(ch, dtype=np.float64) for ch in channels]


# ---------------------------------------------------------------------------
# resample
# ---------------------------------------------------------------------------

def test_resample_same_rate_is_identity():
    samples = _stream([0.1, 0.2, 0.3, 0.4])
    assert Transforms.resample(samples, 44100, 44100) is samples


def test_resample_downsample_by_two():
    out = Transforms.resample(_stream([0, 1, 0, -1]), 4, 2)
    np.testing.assert_allclose(out[0], [0.0, 0.0])


def test_resample_upsample_interpolates_and_holds_last_sample():
    out = Transforms.resample(_stream([0.0, 1.0]), 1, 2)
    # Positions 0, 0.5, 1.0, 1.5; the last two have no right-hand neighbour
    np.testing.assert_allclose(out[0], [0.0, 0.5, 1.0, 1.0])


def test_resample_length_is_floored():
    out = Transforms.resample(_stream(np.ones(10)), 48000, 44100)
    assert len(out[0]) == int(10 / (48000 / 44100))


def test_resample_channels_independently():
    out = Transforms.resample(_stream([0, 0.5, 1.0, 0.5], [1.0, 0.5, 0, 0.5]), 4, 2)
    assert len(out) == 2
    np.testing.assert_allclose(out[0], [0.0, 1.0])
    np.testing.assert_allclose(out[1], [1.0, 0.0])


# ---------------------------------------------------------------------------
# convert_channels
# ---------------------------------------------------------------------------

def test_convert_same_count_is_identity():
    samples = _stream([0.1], [0.2])
    assert Transforms.convert_channels(samples, 2) is samples


def test_downmix_stereo_cancels():
    out = Transforms.convert_channels(_stream([1.0, 0.0], [-1.0, 0.0]), 1)
    assert len(out) == 1
    np.testing.assert_allclose(out[0], [0.0, 0.0])


def test_downmix_averages_all_channels():
    out = Transforms.convert_channels(_stream([0.3, 0.0], [0.6, 0.3], [0.0, 0.9]), 1)
    np.testing.assert_allclose(out[0], [0.3, 0.4])


def test_mono_to_stereo_duplicates_without_scaling():
    mono = _stream([0.5, -0.25, 1.0])
    out = Transforms.convert_channels(mono, 2)

    np.testing.assert_array_equal(out[0], mono[0])
    np.testing.assert_array_equal(out[1], mono[0])
    out[0][0] = 0.0
    assert out[1][0] == 0.5


def test_down_then_up_gives_identical_channels():
    rng = np.random.default_rng(3)
    stereo = _stream(rng.uniform(-1, 1, 64), rng.uniform(-1, 1, 64))
    out = Transforms.convert_channels(Transforms.convert_channels(stereo, 1), 2)
    np.testing.assert_array_equal(out[0], out[1])


def test_other_layouts_copy_or_zero_fill():
    out = Transforms.convert_channels(_stream([0.5, 0.5]), 4)
    assert len(out) == 4
    np.testing.assert_array_equal(out[0], [0.5, 0.5])
    for ch in out[1:]:
        np.testing.assert_array_equal(ch, [0.0, 0.0])

    out = Transforms.convert_channels(_stream([0.1], [0.2], [0.3]), 2)
    np.testing.assert_allclose([ch[0] for ch in out], [0.1, 0.2])


# ---------------------------------------------------------------------------
# remove_leading_silence
# ---------------------------------------------------------------------------

def test_silence_threshold_is_inclusive():
    out = Transforms.remove_leading_silence(_stream([0, 0.001, 0.002, 1.0]))
    np.testing.assert_array_equal(out[0], [0.002, 1.0])


def test_leading_silence_scenario():
    out = Transforms.remove_leading_silence(_stream([0, 0, 0.002, 1.0]))
    np.testing.assert_array_equal(out[0], [0.002, 1.0])


def test_any_loud_channel_ends_silence():
    out = Transforms.remove_leading_silence(_stream([0, 0, 0.5], [0, -0.2, 0]))
    np.testing.assert_array_equal(out[0], [0, 0.5])
    np.testing.assert_array_equal(out[1], [-0.2, 0])


@pytest.mark.parametrize("length", [1, 5, 1000])
def test_all_silent_becomes_single_zero_frame(length):
    out = Transforms.remove_leading_silence(_stream(np.zeros(length), np.full(length, 0.0005)))
    assert len(out) == 2
    for ch in out:
        np.testing.assert_array_equal(ch, [0.0])


def test_loud_first_frame_returns_input():
    samples = _stream([0.5, 0.0])
    assert Transforms.remove_leading_silence(samples) is samples


def test_empty_input_returned_unchanged():
    assert Transforms.remove_leading_silence([]) == []
    empty = _stream([])
    assert Transforms.remove_leading_silence(empty) is empty


# ---------------------------------------------------------------------------
# fit_to_length
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("source_length", [0, 3, 5, 9])
def test_fit_always_yields_target_length(source_length):
    samples = _stream(np.arange(source_length) + 1.0, -(np.arange(source_length) + 1.0))
    out = Transforms.fit_to_length(samples, 5)

    for ch in out:
        assert len(ch) == 5
    keep = min(source_length, 5)
    np.testing.assert_array_equal(out[0][:keep], samples[0][:keep])
    np.testing.assert_array_equal(out[0][keep:], np.zeros(5 - keep))


def test_fit_without_channels():
    assert Transforms.fit_to_length([], 10) == []


# ---------------------------------------------------------------------------
# concatenate
# ---------------------------------------------------------------------------

def test_fit_then_concatenate_scenario():
    first = Transforms.fit_to_length(_stream([0.1, 0.2, 0.3]), 2)
    second = Transforms.fit_to_length(_stream([0.4]), 2)

    out = Transforms.concatenate([first, second], 1)

    assert len(out) == 1
    np.testing.assert_allclose(out[0], [0.1, 0.2, 0.4, 0.0])


def test_concatenate_skips_empty_streams():
    out = Transforms.concatenate([_stream([1.0]), [], _stream([2.0, 3.0])], 1)
    np.testing.assert_array_equal(out[0], [1.0, 2.0, 3.0])


def test_concatenate_zero_fills_missing_channels():
    out = Transforms.concatenate([_stream([0.5, 0.5]), _stream([0.1], [0.2])], 2)
    np.testing.assert_array_equal(out[0], [0.5, 0.5, 0.1])
    np.testing.assert_array_equal(out[1], [0.0, 0.0, 0.2])


def test_concatenate_nothing():
    out = Transforms.concatenate([], 2)
    assert len(out) == 2
    assert all(len(ch) == 0 for ch in out)


# ---------------------------------------------------------------------------
# normalize
# ---------------------------------------------------------------------------

def test_normalize_scales_peak_to_one_in_place():
    samples = _stream([0.25, 0.5], [0.1, 0.2])
    left = samples[0]
    out = Transforms.normalize(samples)

    assert out is samples
    assert left[1] == pytest.approx(1.0)
    np.testing.assert_allclose(out[1], [0.2, 0.4])


def test_normalize_negative_peak():
    out = Transforms.normalize(_stream([0.1, -0.8, 0.2]))
    assert out[0][1] == pytest.approx(-1.0)


def test_normalize_silence_and_empty_unchanged():
    zeros = _stream([0.0, 0.0, 0.0])
    np.testing.assert_array_equal(Transforms.normalize(zeros)[0], [0.0, 0.0, 0.0])
    assert Transforms.normalize([]) == []
    assert len(Transforms.normalize(_stream([]))[0]) == 0


def test_normalize_is_idempotent():
    rng = np.random.default_rng(11)
    once = Transforms.normalize(_stream(rng.uniform(-0.3, 0.3, 128)))
    expected = once[0].copy()
    twice = Transforms.normalize(once)
    np.testing.assert_allclose(twice[0], expected)
