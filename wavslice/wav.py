"""
WAV Codec
=========
Reads RIFF/WAVE files in integer PCM (8/16/24/32-bit) and IEEE float
(32/64-bit) encodings, including the WAVE_FORMAT_EXTENSIBLE variant, into
per-channel float64 arrays. Writes 16-bit PCM only.

Usage:
    wav = read_wav("kick_01.wav")
    write_wav("out.wav", wav.samples, wav.header.sample_rate, len(wav.samples))
"""

import logging
import os
import struct
from pathlib import Path
from typing import BinaryIO, Callable, Dict, Optional, Tuple, Union

import numpy as np

from .errors import FormatError
from .models import (
    FORMAT_EXTENSIBLE,
    FORMAT_IEEE_FLOAT,
    FORMAT_PCM,
    FileRecord,
    Samples,
    WavFile,
    WavHeader,
)

logger = logging.getLogger(__name__)

MAX_INPUT_DATA_SIZE = 1 << 30  # 1 GiB
MIN_FMT_SIZE = 16
EXTENSIBLE_EXTRA_SIZE = 24
HEADER_SIZE = 44

_RIFF_HEADER = struct.Struct("<4sI4s")
_CHUNK_HEADER = struct.Struct("<4sI")
_FMT_BODY = struct.Struct("<HHIIHH")
_PCM16_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")

Source = Union[str, os.PathLike, BinaryIO]


def _decode_u8(raw: bytes) -> np.ndarray:
    return (np.frombuffer(raw, dtype=np.uint8).astype(np.float64) - 128.0) / 128.0


def _decode_s16(raw: bytes) -> np.ndarray:
    return np.frombuffer(raw, dtype="<i2").astype(np.float64) / 32768.0


def _decode_s24(raw: bytes) -> np.ndarray:
    b = np.frombuffer(raw, dtype=np.uint8).reshape(-1, 3).astype(np.int32)
    value = b[:, 0] | (b[:, 1] << 8) | (b[:, 2] << 16)
    value = np.where(value & 0x800000, value - 0x1000000, value)
    return value.astype(np.float64) / 8388608.0


def _decode_s32(raw: bytes) -> np.ndarray:
    return np.frombuffer(raw, dtype="<i4").astype(np.float64) / 2147483648.0


def _decode_f32(raw: bytes) -> np.ndarray:
    return np.frombuffer(raw, dtype="<f4").astype(np.float64)


def _decode_f64(raw: bytes) -> np.ndarray:
    return np.frombuffer(raw, dtype="<f8").astype(np.float64)


# (encoding, bits per sample) -> decoder producing interleaved float64 values
DECODERS: Dict[Tuple[str, int], Callable[[bytes], np.ndarray]] = {
    ("pcm", 8): _decode_u8,
    ("pcm", 16): _decode_s16,
    ("pcm", 24): _decode_s24,
    ("pcm", 32): _decode_s32,
    ("float", 32): _decode_f32,
    ("float", 64): _decode_f64,
}


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if len(data) < size:
        raise FormatError(f"truncated {what}")
    return data


def _source_size(stream: BinaryIO) -> int:
    position = stream.tell()
    size = stream.seek(0, os.SEEK_END)
    stream.seek(position)
    return size


def read_header(stream: BinaryIO) -> Tuple[WavHeader, int]:
    """
    Parse the RIFF header and chunk list up to the start of the sample data.

    Unknown chunks are skipped. On return the stream is positioned at the
    first byte of the ``data`` chunk payload.

    Returns:
        Tuple of (header, declared data chunk size in bytes)
    """
    riff = stream.read(_RIFF_HEADER.size)
    if len(riff) < 4 or riff[:4] != b"RIFF":
        raise FormatError("not a valid WAV file (missing RIFF)")
    if len(riff) < _RIFF_HEADER.size or riff[8:12] != b"WAVE":
        raise FormatError("not a valid WAV file (missing WAVE)")

    header = WavHeader()
    fmt_found = False
    data_size: Optional[int] = None

    while True:
        chunk = stream.read(_CHUNK_HEADER.size)
        if not chunk:
            break
        if len(chunk) < _CHUNK_HEADER.size:
            raise FormatError("truncated chunk header")
        chunk_id, chunk_size = _CHUNK_HEADER.unpack(chunk)

        if chunk_id == b"fmt ":
            if chunk_size < MIN_FMT_SIZE:
                raise FormatError(f"invalid fmt chunk size: {chunk_size}")
            (
                header.audio_format,
                header.channels,
                header.sample_rate,
                header.byte_rate,
                header.block_align,
                header.bits_per_sample,
            ) = _FMT_BODY.unpack(_read_exact(stream, MIN_FMT_SIZE, "fmt chunk"))
            header.fmt_size = chunk_size

            if chunk_size > MIN_FMT_SIZE:
                extra = _read_exact(stream, chunk_size - MIN_FMT_SIZE, "fmt chunk extension")
                if header.is_extensible:
                    # cbSize(2) validBits(2) channelMask(4) subFormat(16)
                    if len(extra) < EXTENSIBLE_EXTRA_SIZE:
                        raise FormatError("invalid extensible fmt chunk size")
                    header.valid_bits, header.channel_mask = struct.unpack_from("<HI", extra, 2)
                    header.sub_format = bytes(extra[8:24])
            fmt_found = True

        elif chunk_id == b"data":
            if not fmt_found:
                raise FormatError("data chunk found before fmt chunk")
            data_size = chunk_size
            break

        else:
            logger.debug("Skipping chunk %r (%d bytes)", chunk_id, chunk_size)
            stream.seek(chunk_size, os.SEEK_CUR)

    if not fmt_found:
        raise FormatError("fmt chunk not found")
    if data_size is None:
        raise FormatError("data chunk not found")

    return header, data_size


def _validate_data(header: WavHeader, data_size: int, source_size: int) -> None:
    if header.block_align == 0:
        raise FormatError("invalid WAV header: block align is zero")
    if data_size == 0:
        raise FormatError("invalid WAV header: data size is zero")
    if data_size > MAX_INPUT_DATA_SIZE:
        raise FormatError(f"input data too large: {data_size} bytes")
    if data_size > source_size:
        raise FormatError("invalid WAV header: data size exceeds file size")
    if data_size % header.block_align != 0:
        raise FormatError("invalid WAV header: data size not aligned to block size")


def _resolve_decoder(header: WavHeader) -> Callable[[bytes], np.ndarray]:
    if header.audio_format not in (FORMAT_PCM, FORMAT_IEEE_FLOAT, FORMAT_EXTENSIBLE):
        raise FormatError(
            f"unsupported audio format: {header.audio_format} "
            "(supported: 1=PCM, 3=IEEE Float, 65534=Extensible)"
        )
    encoding = header.encoding
    if encoding is None:
        raise FormatError("unsupported extensible subformat")
    if header.channels == 0:
        raise FormatError("invalid WAV header: channel count is zero")

    decoder = DECODERS.get((encoding, header.bits_per_sample))
    if decoder is None:
        kind = "PCM" if encoding == "pcm" else "float"
        raise FormatError(f"unsupported {kind} bit depth: {header.bits_per_sample}")
    return decoder


def _read_wav_stream(stream: BinaryIO, path: Optional[Path]) -> WavFile:
    source_size = _source_size(stream)
    header, data_size = read_header(stream)
    _validate_data(header, data_size, source_size)
    decoder = _resolve_decoder(header)

    channels = header.channels
    frame_bytes = channels * header.bytes_per_sample
    num_frames = data_size // channels // header.bytes_per_sample

    raw = stream.read(num_frames * frame_bytes)
    frames_read = len(raw) // frame_bytes
    if frames_read < num_frames:
        logger.warning(
            "Truncated sample data in %s: read %d of %d frames",
            path or "<stream>", frames_read, num_frames
        )
        raw = raw[:frames_read * frame_bytes]

    interleaved = decoder(raw).reshape(frames_read, channels)
    samples = [np.ascontiguousarray(interleaved[:, ch]) for ch in range(channels)]

    return WavFile(
        path=path,
        header=header,
        samples=samples,
        data_size=data_size,
        file_size=source_size,
    )


def read_wav(source: Source) -> WavFile:
    """
    Read and decode a complete WAV file.

    A file whose data chunk is cut short is not an error: decoding stops at
    the last complete frame and the shorter result is returned.

    Args:
        source: Path to a WAV file, or a seekable binary file object

    Returns:
        WavFile with one float64 array per channel

    Raises:
        FormatError: malformed container or unsupported encoding
        OSError: the file could not be opened or read
    """
    if isinstance(source, (str, os.PathLike)):
        path = Path(source)
        with open(path, "rb") as f:
            return _read_wav_stream(f, path)
    return _read_wav_stream(source, None)


def read_wav_info(path: Union[str, os.PathLike]) -> FileRecord:
    """Read only the header of a WAV file and describe it as a FileRecord."""
    path = Path(path)
    with open(path, "rb") as f:
        header, data_size = read_header(f)

    if header.channels == 0 or header.bytes_per_sample == 0:
        raise FormatError(
            f"invalid WAV header: {header.channels} channels, "
            f"{header.bits_per_sample} bits per sample"
        )
    if header.sample_rate == 0:
        raise FormatError("invalid WAV header: sample rate is zero")

    return FileRecord(
        path=path,
        size=path.stat().st_size,
        sample_rate=header.sample_rate,
        channels=header.channels,
        bit_depth=header.bits_per_sample,
        num_frames=data_size // header.channels // header.bytes_per_sample,
    )


def encode_wav(samples: Samples, sample_rate: int, channels: int) -> bytes:
    """
    Encode samples as a 16-bit PCM WAV file.

    The frame count is taken from the first channel. Channels missing from
    ``samples`` are written as silence and surplus channels are dropped.
    Values are clamped to [-1.0, 1.0] and truncated toward zero after scaling
    by 32767.
    """
    if channels < 1:
        raise ValueError(f"channel count must be positive, got {channels}")

    num_frames = len(samples[0]) if samples else 0
    block_align = channels * 2
    data_size = num_frames * block_align

    frames = np.zeros((num_frames, channels), dtype=np.float64)
    for ch in range(min(channels, len(samples))):
        channel = np.asarray(samples[ch], dtype=np.float64)[:num_frames]
        frames[:len(channel), ch] = channel
    pcm = (np.clip(frames, -1.0, 1.0) * 32767).astype("<i2")

    header = _PCM16_HEADER.pack(
        b"RIFF", 36 + data_size, b"WAVE",
        b"fmt ", MIN_FMT_SIZE, FORMAT_PCM, channels, sample_rate,
        sample_rate * block_align, block_align, 16,
        b"data", data_size,
    )
    return header + pcm.tobytes()


def write_wav(
    destination: Source,
    samples: Samples,
    sample_rate: int,
    channels: int
) -> None:
    """
    Write samples as a 16-bit PCM WAV file.

    An empty stream produces a valid file with a zero-length data chunk;
    read_wav rejects such a file.
    """
    data = encode_wav(samples, sample_rate, channels)
    if isinstance(destination, (str, os.PathLike)):
        with open(destination, "wb") as f:
            f.write(data)
    else:
        destination.write(data)
