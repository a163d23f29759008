"""Human-readable run settings and file summaries."""

from collections import Counter
from typing import Sequence

from .config import SliceConfig
from .models import FileRecord

_RULE = "-" * 100


def format_size(num_bytes: int) -> str:
    """Format a byte count using binary units, e.g. 1536 -> '1.5 KB'."""
    unit = 1024
    if num_bytes < unit:
        return f"{num_bytes} B"
    div, exp = unit, 0
    n = num_bytes // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{num_bytes / div:.1f} {'KMGTPE'[exp]}B"


def _channel_label(channels: int) -> str:
    if channels == 1:
        return "mono"
    if channels == 2:
        return "stereo"
    return f"{channels}-ch"


def render_settings(config: SliceConfig, work_dir: str, pattern: str) -> str:
    lines = [
        "=== WAV Sample Slicer ===",
        f"Working Directory: {work_dir}",
        f"Pattern: {pattern}",
        f"Output Sample Rate: {config.sample_rate} Hz",
        f"Output Channels: {'Stereo' if config.channels == 2 else 'Mono'}",
        f"Slice Count: {config.slice_count}",
        f"Samples per Slice: {config.frames_per_slice}",
        f"Slice Duration: {config.slice_duration_ms:.2f} ms",
        f"Max Total Duration: {config.max_duration_seconds:.3f} s",
        f"Normalize: {'yes' if config.normalize else 'no'}",
    ]
    return "\n".join(lines)


def render_summary(records: Sequence[FileRecord]) -> str:
    """Tabulate discovered files followed by totals and format breakdowns."""
    lines = [
        f"Found {len(records)} matching WAV files:",
        _RULE,
        f"{'File':<50} {'Size':>10} {'Rate':>8} {'Ch':>8} {'Bits':>10} {'Duration':>12}",
        _RULE,
    ]

    total_size = 0
    total_duration = 0.0
    rates: Counter = Counter()
    layouts: Counter = Counter()

    for record in records:
        name = record.name
        if len(name) > 48:
            name = name[:45] + "..."
        lines.append(
            f"{name:<50} {format_size(record.size):>10} {record.sample_rate:>6d}Hz "
            f"{record.channels:>8d} {record.bit_depth:>8d} {record.duration:>10.3f}s"
        )
        total_size += record.size
        total_duration += record.duration
        rates[record.sample_rate] += 1
        layouts[record.channels] += 1

    lines.append(_RULE)
    lines.append("")
    lines.append("Summary:")
    lines.append(f"  Total files: {len(records)}")
    lines.append(f"  Total size: {format_size(total_size)}")
    lines.append(f"  Total duration: {total_duration:.2f}s")
    lines.append("  Sample rates: " + " ".join(
        f"{rate}Hz ({count} files)" for rate, count in sorted(rates.items())
    ))
    lines.append("  Channels: " + " ".join(
        f"{_channel_label(ch)} ({count} files)" for ch, count in sorted(layouts.items())
    ))
    return "\n".join(lines)
