"""
Slicing Pipeline (pipeline.py)
==============================
Turns discovered sample files into batch WAV files for a hardware sampler.

For each file: read -> resample -> convert channels -> remove leading
silence -> fit to slice length. Each batch of slices is concatenated,
optionally peak-normalized, and written as 16-bit PCM.

Usage:
    config = SliceConfig(sample_rate=22050, channels=1, slice_count=16)
    engine = SliceEngine(config, output_dir="./output")
    outputs = engine.process_files(find_wav_files("./samples", "kick"), label="kick")
"""

import logging
import tempfile
from pathlib import Path
from typing import List, Sequence, Union

from .batching import Batch, plan_batches
from .config import SliceConfig
from .errors import BatchProcessingError
from .models import FileRecord, Samples
from .transforms import Transforms
from .wav import read_wav, write_wav

logger = logging.getLogger(__name__)


class SliceEngine:
    """
    Processes sample files into batch WAV files of fixed-length slices.

    A file that cannot be read aborts its whole batch and the run; there is
    no skip-and-continue.
    """

    def __init__(self, config: SliceConfig, output_dir: Union[str, Path] = "."):
        """
        Args:
            config: Target format and batching parameters
            output_dir: Directory for batch files (created on demand)
        """
        self.config = config
        self.output_dir = Path(output_dir)

        self.files_processed = 0
        self.batches_written = 0

    def process_file(self, record: FileRecord) -> Samples:
        """Read one file and fit it to a single slice in the target format."""
        wav = read_wav(record.path)
        samples = wav.samples

        if wav.header.sample_rate != self.config.sample_rate:
            samples = Transforms.resample(samples, wav.header.sample_rate, self.config.sample_rate)
            logger.debug(
                "Resampled %s: %dHz -> %dHz",
                record.name, wav.header.sample_rate, self.config.sample_rate
            )

        samples = Transforms.convert_channels(samples, self.config.channels)
        samples = Transforms.remove_leading_silence(samples)
        return Transforms.fit_to_length(samples, self.config.frames_per_slice)

    def process_batch(
        self,
        records: Sequence[FileRecord],
        slice_dir: Union[str, Path],
        output_path: Union[str, Path]
    ) -> Path:
        """
        Process one batch and write its combined file.

        Every fitted slice is also written to ``slice_dir`` as
        ``slice_NNN.wav``. Errors from any file propagate unchanged.

        Returns:
            Path of the written batch file
        """
        slice_dir = Path(slice_dir)
        output_path = Path(output_path)
        processed: List[Samples] = []

        for index, record in enumerate(records, start=1):
            logger.info("  Processing %d/%d: %s", index, len(records), record.name)
            samples = self.process_file(record)

            write_wav(
                slice_dir / f"slice_{index:03d}.wav",
                samples,
                self.config.sample_rate,
                self.config.channels
            )
            processed.append(samples)
            self.files_processed += 1

        combined = Transforms.concatenate(processed, self.config.channels)
        if self.config.normalize:
            combined = Transforms.normalize(combined)

        write_wav(output_path, combined, self.config.sample_rate, self.config.channels)
        self.batches_written += 1
        return output_path

    def _run_batch(self, batch: Batch, slice_root: Path) -> Path:
        logger.info("=== Processing Batch %d (%d files) ===", batch.number, len(batch))

        slice_dir = slice_root / f"batch{batch.number:03d}"
        slice_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.output_dir / batch.output_name

        try:
            self.process_batch(batch.records, slice_dir, output_path)
        except Exception as e:
            raise BatchProcessingError(batch.number, str(e)) from e

        logger.info("Created: %s", output_path)
        return output_path

    def process_files(self, records: Sequence[FileRecord], label: str) -> List[Path]:
        """
        Process all records in batches of ``config.slice_count``.

        Intermediate slices live in a temporary directory that is removed
        whether or not processing succeeds, unless ``config.keep_slices`` is
        set, in which case they are kept under ``<output_dir>/slices``.

        Args:
            records: Input files in processing order
            label: Prefix for the batch file names

        Returns:
            Paths of the batch files, in batch order

        Raises:
            BatchProcessingError: a file in a batch failed; later batches are skipped
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        batches = plan_batches(records, self.config.slice_count, label)
        outputs = []

        if self.config.keep_slices:
            slice_root = self.output_dir / "slices"
            for batch in batches:
                outputs.append(self._run_batch(batch, slice_root))
            return outputs

        with tempfile.TemporaryDirectory(prefix="wavslice-") as temp_dir:
            logger.info("Using temp directory: %s", temp_dir)
            for batch in batches:
                outputs.append(self._run_batch(batch, Path(temp_dir)))
        return outputs
