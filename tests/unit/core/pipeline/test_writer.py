from __future__ import annotations

"""
Unit tests for the Staged Output Writer.

Verifies:
1. Line terminator handling.
2. Publication of the staging file on success.
3. Removal of the staging file on failure, leaving any previous output intact.
"""

import os

import pytest

from tinymerge.core.pipeline.components.writer import get_staging_path, staged_output, write_lines


def test_get_staging_path() -> None:
    assert get_staging_path("/tmp/out.tiny") == "/tmp/out.tiny.partial"


def test_staged_output_publishes_on_success(tmp_path) -> None:
    target = tmp_path / "nested" / "merged.tiny"

    with staged_output(str(target)) as out:
        written = write_lines(out, ["v1\tofficial\tnamed", "CLASS\ta\tWorld"])
        assert os.path.exists(get_staging_path(str(target)))
        assert not target.exists()

    assert written == 2
    assert target.read_bytes() == b"v1\tofficial\tnamed\nCLASS\ta\tWorld\n"
    assert not os.path.exists(get_staging_path(str(target)))


def test_staged_output_discards_on_error(tmp_path) -> None:
    """TC-01: A failing merge must not replace an existing output file."""
    target = tmp_path / "merged.tiny"
    target.write_text("previous\n", encoding="utf-8")

    with pytest.raises(RuntimeError):
        with staged_output(str(target)) as out:
            out.write("partial")
            raise RuntimeError("merge failed")

    assert target.read_text(encoding="utf-8") == "previous\n"
    assert not os.path.exists(get_staging_path(str(target)))


def test_write_lines_consumes_generators(tmp_path) -> None:
    target = tmp_path / "gen.tiny"

    with staged_output(str(target)) as out:
        count = write_lines(out, (f"CLASS\tc{i}\tName{i}" for i in range(3)))

    assert count == 3
    assert target.read_text(encoding="utf-8").count("\n") == 3
