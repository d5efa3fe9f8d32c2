from __future__ import annotations

"""
Staged Output Writer.

Merged lines are written to a staging file next to the destination and
moved into place only once the whole merge has succeeded. Any failure
removes the staging file, so a broken run never leaves a partial mapping
behind.
"""

import logging
import os
from contextlib import contextmanager
from typing import Iterable, Iterator, TextIO

from tinymerge.domain.constants import DEFAULT_ENCODING, LINE_TERMINATOR, STAGING_SUFFIX

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# FILE OUTPUT MANAGEMENT
# -----------------------------------------------------------------------------

def get_staging_path(output_path: str) -> str:
    return output_path + STAGING_SUFFIX


@contextmanager
def staged_output(output_path: str, encoding: str = DEFAULT_ENCODING) -> Iterator[TextIO]:
    """
    Open a staging file for writing and publish it on clean exit.

    Args:
        output_path: Final destination of the mapping file.
        encoding: Output text encoding.

    Yields:
        TextIO: Writable handle on the staging file.

    Raises:
        OSError: If the staging file cannot be created or moved.
    """
    staging_path = get_staging_path(output_path)
    parent = os.path.dirname(os.path.abspath(output_path))
    os.makedirs(parent, exist_ok=True)

    try:
        with open(staging_path, "w", encoding=encoding, newline="") as out:
            yield out
        os.replace(staging_path, output_path)
        logger.debug(f"Published {output_path}")
    except BaseException:
        _discard(staging_path)
        raise


def write_lines(out: TextIO, lines: Iterable[str]) -> int:
    """
    Write each line followed by the format's line terminator.

    Returns:
        int: Number of lines written.
    """
    written = 0
    for line in lines:
        out.write(line)
        out.write(LINE_TERMINATOR)
        written += 1
    return written


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _discard(path: str) -> None:
    """Remove an abandoned staging file, logging instead of masking the original error."""
    try:
        if os.path.exists(path):
            os.remove(path)
            logger.debug(f"Discarded partial output {path}")
    except OSError as e:
        logger.warning(f"Could not remove partial output {path}: {e}")
