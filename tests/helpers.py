"""Byte-level WAV builders for codec tests."""

import struct

from wavslice.models import SUBFORMAT_PCM


def chunk(tag: bytes, payload: bytes, declared_size=None) -> bytes:
    size = len(payload) if declared_size is None else declared_size
    return tag + struct.pack("<I", size) + payload


def fmt_payload(audio_format=1, channels=1, sample_rate=44100, bits=16, block_align=None) -> bytes:
    if block_align is None:
        block_align = channels * (bits // 8)
    return struct.pack(
        "<HHIIHH", audio_format, channels, sample_rate,
        sample_rate * block_align, block_align, bits
    )


def extensible_fmt_payload(sub_format=SUBFORMAT_PCM, channels=1, sample_rate=44100,
                           bits=24, valid_bits=None, channel_mask=0x4) -> bytes:
    base = fmt_payload(0xFFFE, channels, sample_rate, bits)
    extension = struct.pack("<HHI", 22, bits if valid_bits is None else valid_bits, channel_mask)
    return base + extension + sub_format


def riff(*chunks: bytes, marker=b"RIFF", form=b"WAVE") -> bytes:
    body = form + b"".join(chunks)
    return marker + struct.pack("<I", len(body)) + body


def build_wav(payload: bytes, audio_format=1, channels=1, sample_rate=44100, bits=16,
              block_align=None, data_size=None) -> bytes:
    return riff(
        chunk(b"fmt ", fmt_payload(audio_format, channels, sample_rate, bits, block_align)),
        chunk(b"data", payload, data_size),
    )
