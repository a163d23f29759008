"""Exception types raised by the slicer."""


class WavSliceError(Exception):
    """Base error for wavslice."""


class FormatError(WavSliceError):
    """Raised when a WAV container is malformed or uses an unsupported encoding."""


class BatchProcessingError(WavSliceError):
    """Raised when a batch is aborted because one of its files failed."""

    def __init__(self, batch_number: int, message: str):
        super().__init__(f"failed to process batch {batch_number}: {message}")
        self.batch_number = batch_number
