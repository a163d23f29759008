"""
Test Sample Generator
=====================
Writes short one-shot samples (decaying tones and noise hits, with a little
leading silence) in every encoding the reader supports. Useful for trying
out the slicer and for codec fixtures.

Usage:
    python -m wavslice generate -o ./test_samples -n 8
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np
import soundfile as sf

logger = logging.getLogger(__name__)

# (libsndfile subtype, container format) pairs cycled through by create_sample_set
ENCODINGS: Tuple[Tuple[str, str], ...] = (
    ("PCM_16", "WAV"),
    ("PCM_24", "WAV"),
    ("PCM_32", "WAV"),
    ("PCM_U8", "WAV"),
    ("FLOAT", "WAV"),
    ("DOUBLE", "WAV"),
    ("PCM_16", "WAVEX"),
    ("FLOAT", "WAVEX"),
)

SAMPLE_RATES: Tuple[int, ...] = (44100, 48000, 22050, 96000)


class SampleGenerator:
    """Generates one-shot test samples and writes them with soundfile."""

    def __init__(self, output_dir: Union[str, Path] = "test_samples", seed: Optional[int] = None):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.rng = np.random.default_rng(seed)

    def generate_hit(
        self,
        sample_rate: int = 44100,
        duration_seconds: float = 0.25,
        frequency: float = 60.0,
        noise_mix: float = 0.2,
        amplitude: float = 0.8,
        lead_silence_seconds: float = 0.01,
        channels: int = 1
    ) -> np.ndarray:
        """
        Generate an exponentially decaying tone with a noise transient.

        Returns:
            Array of shape (frames,) for mono or (frames, channels) otherwise
        """
        num_samples = int(duration_seconds * sample_rate)
        t = np.arange(num_samples) / sample_rate

        envelope = np.exp(-t * 12.0)
        tone = np.sin(2 * np.pi * frequency * t)
        noise = self.rng.standard_normal(num_samples) * np.exp(-t * 60.0)
        hit = (tone * (1 - noise_mix) + noise * noise_mix) * envelope

        peak = np.max(np.abs(hit))
        if peak > 0:
            hit = hit / peak * amplitude

        silence = np.zeros(int(lead_silence_seconds * sample_rate))
        audio = np.concatenate([silence, hit])

        if channels == 1:
            return audio
        # Slightly different level per channel so layouts are distinguishable
        gains = np.linspace(1.0, 0.7, channels)
        return np.column_stack([audio * g for g in gains])

    def write(
        self,
        filename: str,
        audio: np.ndarray,
        sample_rate: int,
        subtype: str = "PCM_16",
        container: str = "WAV"
    ) -> Path:
        path = self.output_dir / filename
        sf.write(str(path), audio, sample_rate, subtype=subtype, format=container)
        return path

    def create_sample_set(self, count: int = 8, prefix: str = "kick") -> List[Path]:
        """
        Create ``count`` samples cycling through encodings, rates and layouts.

        Returns:
            Paths of the generated files
        """
        generated = []
        for i in range(count):
            subtype, container = ENCODINGS[i % len(ENCODINGS)]
            sample_rate = SAMPLE_RATES[i % len(SAMPLE_RATES)]
            channels = 2 if i % 3 == 1 else 1

            audio = self.generate_hit(
                sample_rate=sample_rate,
                duration_seconds=float(self.rng.uniform(0.1, 0.6)),
                frequency=float(self.rng.uniform(40.0, 120.0)),
                amplitude=float(self.rng.uniform(0.3, 0.9)),
                channels=channels,
            )
            filename = f"{prefix}_{i + 1:03d}.wav"
            path = self.write(filename, audio, sample_rate, subtype, container)
            generated.append(path)
            logger.info(
                "Created: %s (%dHz, %d ch, %s/%s)",
                filename, sample_rate, channels, container, subtype
            )
        return generated
