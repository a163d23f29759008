"""
File Discovery
==============
Recursive search for WAV files whose names contain a pattern.
"""

import logging
import os
import re
from pathlib import Path
from typing import List, Pattern, Union

from .errors import FormatError
from .models import FileRecord
from .wav import read_wav_info

logger = logging.getLogger(__name__)


def build_pattern(pattern: str) -> Pattern[str]:
    """Case-insensitive regex matching ``*<pattern>*.wav`` with the pattern taken literally."""
    return re.compile(rf"^.*{re.escape(pattern)}.*\.wav$", re.IGNORECASE)


def _raise(error: OSError) -> None:
    raise error


def find_wav_files(root: Union[str, os.PathLike], pattern: str) -> List[FileRecord]:
    """
    Find matching WAV files under ``root`` and read their headers.

    Files whose headers cannot be read are logged and skipped.

    Returns:
        Records sorted by file name
    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Input directory not found: {root}")

    regex = build_pattern(pattern)
    logger.info("Searching %s with regex: %s", root, regex.pattern)

    records = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        for filename in sorted(filenames):
            if not regex.match(filename):
                continue
            path = Path(dirpath) / filename
            try:
                records.append(read_wav_info(path))
            except (FormatError, OSError) as e:
                logger.warning("Could not read %s: %s", path, e)

    records.sort(key=lambda record: record.name)
    return records
