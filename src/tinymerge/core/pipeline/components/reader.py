from __future__ import annotations

"""
Mapping File Reading Component.

Streams mapping files line by line so the parser never needs the raw text
in memory next to the tree it builds. Decoding is strict: a mangled name
would silently corrupt the merged output.
"""

from typing import Iterator

from tinymerge.domain.constants import DEFAULT_ENCODING

# -----------------------------------------------------------------------------
# STREAM READING OPERATIONS
# -----------------------------------------------------------------------------

def stream_file_content(file_path: str, encoding: str = DEFAULT_ENCODING) -> Iterator[str]:
    """
    Generate a line-by-line stream of file content.

    Args:
        file_path: Path to the target file.
        encoding: Text encoding of the file.

    Yields:
        str: Raw lines, terminators included.

    Raises:
        OSError: If the file cannot be opened.
        UnicodeDecodeError: If the content is not valid for the encoding.
    """
    with open(file_path, "r", encoding=encoding) as f:
        for line in f:
            yield line
