"""
WAV Sample Slicer
=================
Normalizes a collection of WAV samples to one format, fits each to a fixed
slice length, and concatenates them into batch files sized for a hardware
sampler's voice memory.

Modules:
- wav.py: RIFF/WAVE reader (PCM 8/16/24/32, float 32/64, extensible) and 16-bit writer
- transforms.py: resampling, channel conversion, silence trim, fitting, normalization
- batching.py: batch partitioning and output naming
- pipeline.py: per-file and per-batch processing
- discovery.py: pattern-based file search
- generator.py: test sample generator
"""

__version__ = "1.0.0"

from .batching import Batch, plan_batches
from .config import SliceConfig
from .errors import BatchProcessingError, FormatError, WavSliceError
from .models import FileRecord, WavFile, WavHeader
from .pipeline import SliceEngine
from .transforms import Transforms
from .wav import read_wav, read_wav_info, write_wav
