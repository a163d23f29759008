"""
Signal Transforms
=================
Pure operations over a stream of per-channel float64 arrays: resampling,
channel conversion, leading-silence removal, fixed-length fitting,
concatenation and peak normalization.
"""

from typing import List, Sequence

import numpy as np

from .models import Samples


def _num_frames(samples: Samples) -> int:
    return len(samples[0]) if samples else 0


class Transforms:
    """
    Sample-processing utilities for the slicer.

    Every method takes and returns a list with one 1-D float64 array per
    channel. Only ``normalize`` modifies its input.
    """

    # About -60 dBFS
    SILENCE_THRESHOLD = 0.001

    @staticmethod
    def resample(samples: Samples, from_rate: int, to_rate: int) -> Samples:
        """
        Resample each channel independently using linear interpolation.

        Output position ``i`` reads the source at ``i * from_rate / to_rate``.
        The last source sample is copied where no right-hand neighbour exists.

        Args:
            samples: Input channels
            from_rate: Source sample rate in Hz
            to_rate: Target sample rate in Hz

        Returns:
            Resampled channels (the input itself when the rates match)
        """
        if from_rate == to_rate:
            return samples

        ratio = from_rate / to_rate
        new_length = int(_num_frames(samples) / ratio)
        positions = np.arange(new_length, dtype=np.float64) * ratio

        result = []
        for channel in samples:
            out = np.zeros(new_length, dtype=np.float64)
            reachable = positions < len(channel)
            if len(channel):
                out[reachable] = np.interp(
                    positions[reachable],
                    np.arange(len(channel), dtype=np.float64),
                    channel
                )
            result.append(out)
        return result

    @staticmethod
    def convert_channels(samples: Samples, target_channels: int) -> Samples:
        """
        Convert between channel layouts.

        - Two or more channels to mono: mean of all channels
        - Mono to stereo: the channel duplicated
        - Anything else: channels copied by index, missing ones silent
        """
        current_channels = len(samples)
        if current_channels == target_channels:
            return samples

        num_frames = _num_frames(samples)

        if target_channels == 1 and current_channels >= 2:
            return [np.mean(np.vstack(samples), axis=0)]

        if target_channels == 2 and current_channels == 1:
            mono = np.asarray(samples[0], dtype=np.float64)
            return [mono.copy(), mono.copy()]

        result = []
        for ch in range(target_channels):
            out = np.zeros(num_frames, dtype=np.float64)
            if ch < current_channels:
                out[:] = samples[ch]
            result.append(out)
        return result

    @staticmethod
    def remove_leading_silence(samples: Samples) -> Samples:
        """
        Drop frames before the first frame where any channel exceeds the
        silence threshold.

        An entirely silent stream becomes a single zero frame per channel.
        """
        if not samples or len(samples[0]) == 0:
            return samples

        loud = np.zeros(len(samples[0]), dtype=bool)
        for channel in samples:
            loud |= np.abs(channel) > Transforms.SILENCE_THRESHOLD

        if not loud.any():
            return [np.zeros(1, dtype=np.float64) for _ in samples]

        start = int(np.argmax(loud))
        if start == 0:
            return samples
        return [channel[start:] for channel in samples]

    @staticmethod
    def fit_to_length(samples: Samples, target_length: int) -> Samples:
        """Truncate or zero-pad every channel to exactly ``target_length`` frames."""
        if not samples:
            return samples

        result = []
        for channel in samples:
            out = np.zeros(target_length, dtype=np.float64)
            keep = min(len(channel), target_length)
            out[:keep] = channel[:keep]
            result.append(out)
        return result

    @staticmethod
    def concatenate(streams: Sequence[Samples], num_channels: int) -> Samples:
        """
        Join streams end to end into ``num_channels`` channels.

        Empty streams are skipped. A stream with fewer channels still
        advances the offset by its full length, leaving its missing
        channels silent.
        """
        total_length = sum(_num_frames(s) for s in streams if s)
        result: List[np.ndarray] = [
            np.zeros(total_length, dtype=np.float64) for _ in range(num_channels)
        ]

        offset = 0
        for stream in streams:
            if not stream:
                continue
            length = len(stream[0])
            for ch in range(min(num_channels, len(stream))):
                data = stream[ch][:length]
                result[ch][offset:offset + len(data)] = data
            offset += length
        return result

    @staticmethod
    def normalize(samples: Samples) -> Samples:
        """
        Scale all channels in place so the global peak magnitude is 1.0.

        Silent and empty streams are returned untouched.
        """
        if not samples or len(samples[0]) == 0:
            return samples

        peak = max(float(np.max(np.abs(channel))) if len(channel) else 0.0 for channel in samples)
        if peak == 0:
            return samples

        scale = 1.0 / peak
        for channel in samples:
            channel *= scale
        return samples
