#!/usr/bin/env python3
"""
wavslice - Main CLI Entry Point
===============================
Usage:
    wavslice slice -p kick -d ./samples -r 22050 -s 16 -o ./output
    wavslice slice -p snare --stereo --normalize -y
    wavslice info ./samples/kick_01.wav
    wavslice generate -o ./test_samples -n 8
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from .config import MAX_SLICES, MIN_SLICES, VALID_SAMPLE_RATES, SliceConfig
from .errors import WavSliceError

logger = logging.getLogger(__name__)


def setup_logging(level: Optional[str] = None) -> None:
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def confirm(prompt: str = "Proceed with processing? (y/n): ") -> bool:
    try:
        response = input(prompt)
    except EOFError:
        return False
    return response.strip().lower() in ("y", "yes")


def cmd_slice(args) -> int:
    """Handle slice command."""
    from .discovery import find_wav_files
    from .pipeline import SliceEngine
    from .report import render_settings, render_summary

    config = SliceConfig(
        sample_rate=args.rate,
        channels=2 if args.stereo else 1,
        slice_count=args.slices,
        normalize=args.normalize,
        keep_slices=args.keep_slices,
    )

    print(render_settings(config, args.dir, args.pattern))
    print()

    records = find_wav_files(args.dir, args.pattern)
    if not records:
        print("No matching WAV files found.")
        return 0

    print(render_summary(records))

    if not args.yes and not confirm("\nProceed with processing? (y/n): "):
        print("Aborted.")
        return 0

    engine = SliceEngine(config, output_dir=args.output)
    outputs = engine.process_files(records, label=args.pattern)

    print(f"\nProcessing complete! {len(outputs)} file(s) written to {args.output}")
    return 0


def cmd_info(args) -> int:
    """Handle info command."""
    from .wav import read_wav

    status = 0
    for path in args.files:
        try:
            wav = read_wav(path)
        except (WavSliceError, OSError) as e:
            print(f"{path}: {e}")
            status = 1
            continue

        header = wav.header
        print(f"\n{path}")
        print(f"  Format code: 0x{header.audio_format:04X} ({header.encoding})")
        print(f"  Sample Rate: {header.sample_rate} Hz")
        print(f"  Channels: {header.channels}")
        print(f"  Bits per Sample: {header.bits_per_sample}")
        if header.is_extensible:
            print(f"  Valid Bits: {header.valid_bits}")
            print(f"  Channel Mask: 0x{header.channel_mask:08X}")
        print(f"  Frames: {wav.num_frames}")
        print(f"  Duration: {wav.duration:.3f} s")
    return status


def cmd_generate(args) -> int:
    """Handle test sample generation command."""
    from .generator import SampleGenerator

    generator = SampleGenerator(output_dir=args.output, seed=args.seed)
    files = generator.create_sample_set(count=args.count, prefix=args.prefix)
    print(f"Generated {len(files)} files in {args.output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='wavslice',
        description='Slice WAV samples into fixed-length batches for hardware samplers',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--log-level', default=None, help='Log level (default: $LOG_LEVEL or INFO)')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # SLICE command
    slice_parser = subparsers.add_parser(
        'slice',
        help='Combine matching WAV files into batch files of fixed-length slices'
    )
    slice_parser.add_argument('-p', '--pattern', required=True,
                              help="File name pattern to search for (e.g. 'kick')")
    slice_parser.add_argument('-d', '--dir', default='.', help='Directory to search recursively')
    slice_parser.add_argument('-r', '--rate', type=int, default=44100,
                              help='Output sample rate: ' + ', '.join(
                                  str(r) for r in sorted(VALID_SAMPLE_RATES, reverse=True)))
    slice_parser.add_argument('--stereo', action='store_true', help='Output stereo (default is mono)')
    slice_parser.add_argument('-s', '--slices', type=int, default=32,
                              help=f'Slices per output file ({MIN_SLICES}-{MAX_SLICES})')
    slice_parser.add_argument('--normalize', action='store_true',
                              help='Peak-normalize each combined output')
    slice_parser.add_argument('-o', '--output', default=os.getenv('WAVSLICE_OUTPUT_DIR', '.'),
                              help='Output directory (default: $WAVSLICE_OUTPUT_DIR or .)')
    slice_parser.add_argument('--keep-slices', action='store_true',
                              help='Keep per-file slices under <output>/slices')
    slice_parser.add_argument('-y', '--yes', action='store_true', help='Do not ask for confirmation')
    slice_parser.set_defaults(func=cmd_slice)

    # INFO command
    info_parser = subparsers.add_parser('info', help='Display WAV header information')
    info_parser.add_argument('files', nargs='+', help='WAV files')
    info_parser.set_defaults(func=cmd_info)

    # GENERATE command
    gen_parser = subparsers.add_parser('generate', help='Generate test samples')
    gen_parser.add_argument('-o', '--output', default='./test_samples', help='Output directory')
    gen_parser.add_argument('-n', '--count', type=int, default=8, help='Number of samples')
    gen_parser.add_argument('--prefix', default='kick', help='File name prefix')
    gen_parser.add_argument('--seed', type=int, default=None, help='Random seed')
    gen_parser.set_defaults(func=cmd_generate)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if not args.command:
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except ValidationError as e:
        for error in e.errors():
            print(f"Error: {error['msg']}", file=sys.stderr)
        return 1
    except (WavSliceError, OSError) as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
