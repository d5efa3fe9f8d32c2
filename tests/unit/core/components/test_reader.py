from __future__ import annotations

"""
Unit tests for the Stream Reader component.

Verifies:
1. Line-by-line streaming with terminators preserved.
2. Strict decoding of malformed input.
"""

import pytest

from tinymerge.core.pipeline.components.reader import stream_file_content


def test_stream_file_content_yields_lines(tmp_path) -> None:
    f = tmp_path / "map.tiny"
    f.write_text("v1\tofficial\tnamed\nCLASS\ta\tWorld\n", encoding="utf-8")

    lines = list(stream_file_content(str(f)))

    assert lines == ["v1\tofficial\tnamed\n", "CLASS\ta\tWorld\n"]


def test_stream_file_content_is_lazy(tmp_path) -> None:
    """Nothing is opened until the generator is consumed."""
    stream = stream_file_content(str(tmp_path / "missing.tiny"))

    with pytest.raises(FileNotFoundError):
        next(stream)


def test_stream_file_content_rejects_invalid_utf8(tmp_path) -> None:
    f = tmp_path / "broken.tiny"
    f.write_bytes(b"v1\tofficial\tnamed\nCLASS\ta\t\xff\xfe\n")

    with pytest.raises(UnicodeDecodeError):
        list(stream_file_content(str(f)))
