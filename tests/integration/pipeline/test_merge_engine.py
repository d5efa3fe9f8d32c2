from __future__ import annotations

"""
Integration tests for the Merge Engine.

Verifies the full run: configuration validation, overwrite protection,
parsing of real files, staged output publication and error reporting
through MergeResult.
"""

import io
import os

from tinymerge.core.analysis.mapping_parser import parse_mapping_text
from tinymerge.core.pipeline.components.writer import get_staging_path
from tinymerge.core.pipeline.engine import merge_mapping_files, run_merge
from tinymerge.domain.merge_models import MergeOptions

EXPECTED_OUTPUT = (
    "v1\tofficial\tintermediary\tnamed\n"
    "CLASS\ta\tnet/minecraft/class_1\tnet/minecraft/World\n"
    "CLASS\ta$b\tnet/minecraft/class_1$class_2\tnet/minecraft/World$Chunk\n"
    "FIELD\ta\tI\tb\tfield_1\ttime\n"
    "METHOD\ta\t()V\tc\tmethod_1\ttick\n"
    "METHOD\ta\t(I)V\tc\tmethod_2\tmethod_2\n"
)


def test_merge_mapping_files_to_stream(mapping_a_text: str, mapping_b_text: str) -> None:
    out = io.StringIO()

    namespaces, stats = merge_mapping_files(
        parse_mapping_text(mapping_a_text),
        parse_mapping_text(mapping_b_text),
        out,
        MergeOptions.from_fallback(["intermediary"]),
    )

    assert namespaces == ["official", "intermediary", "named"]
    assert stats.total_entries == 5
    assert out.getvalue() == EXPECTED_OUTPUT


def test_merge_file_with_itself_keeps_nested_records() -> None:
    """Inner classes and members under a never-defined outer class reach the output."""
    text = "v1\tofficial\tnamed\nCLASS\ta$b\tOuter$Inner\nFIELD\ta$b\tI\tc\tcount\n"
    out = io.StringIO()

    _, stats = merge_mapping_files(
        parse_mapping_text(text),
        parse_mapping_text(text),
        out,
        MergeOptions.from_fallback(["official"]),
    )

    assert out.getvalue() == "v1\tofficial\tnamed\nCLASS\ta$b\ta$Inner\nFIELD\ta$b\tI\tc\tcount\n"
    assert stats.orphans_skipped == 1


def test_merge_file_with_itself_keeps_empty_columns() -> None:
    text = "v1\tofficial\tintermediary\tnamed\nCLASS\ta\t\tFoo\n"
    out = io.StringIO()

    merge_mapping_files(parse_mapping_text(text), parse_mapping_text(text), out)

    assert out.getvalue() == text


def test_run_merge_writes_output(mock_config_dict, caplog) -> None:
    """TC-01: A successful run publishes the merged file and reports progress."""
    mock_config_dict["fallback_order"] = ["intermediary"]

    with caplog.at_level("INFO", logger="tinymerge"):
        result = run_merge(mock_config_dict)

    assert result.ok is True, result.error
    assert result.namespaces == ["official", "intermediary", "named"]
    assert result.summary["entries"] == {"CLASS": 2, "FIELD": 1, "METHOD": 2}

    with open(result.output_path, "r", encoding="utf-8", newline="") as f:
        assert f.read() == EXPECTED_OUTPUT
    assert not os.path.exists(get_staging_path(result.output_path))

    assert "Reading" in caplog.text
    assert "Processing..." in caplog.text
    assert "Done!" in caplog.text


def test_run_merge_refuses_existing_output(mock_config_dict) -> None:
    """TC-02: An existing output is kept unless overwrite is requested."""
    mock_config_dict["fallback_order"] = ["intermediary"]
    os.makedirs(os.path.dirname(mock_config_dict["output_path"]))
    with open(mock_config_dict["output_path"], "w", encoding="utf-8") as f:
        f.write("keep me\n")

    refused = run_merge(mock_config_dict)
    assert refused.ok is False
    assert refused.error_type == "FileExistsError"
    with open(mock_config_dict["output_path"], "r", encoding="utf-8") as f:
        assert f.read() == "keep me\n"

    replaced = run_merge(mock_config_dict, overwrite=True)
    assert replaced.ok is True
    with open(mock_config_dict["output_path"], "r", encoding="utf-8") as f:
        assert f.read() == EXPECTED_OUTPUT


def test_run_merge_dry_run_writes_nothing(mock_config_dict) -> None:
    """TC-03: Dry run validates the merge without touching the disk."""
    mock_config_dict["fallback_order"] = ["intermediary"]

    result = run_merge(mock_config_dict, dry_run=True)

    assert result.ok is True
    assert result.dry_run is True
    assert result.summary["total_entries"] == 5
    assert not os.path.exists(mock_config_dict["output_path"])
    assert not os.path.exists(os.path.dirname(mock_config_dict["output_path"]))


def test_run_merge_unresolved_name_leaves_no_output(mock_config_dict) -> None:
    """TC-04: Without a fallback the unpaired overload cannot be named; nothing is written."""
    result = run_merge(mock_config_dict)

    assert result.ok is False
    assert result.error_type == "UnresolvedNameError"
    assert result.namespaces == ["official", "intermediary", "named"]
    assert not os.path.exists(mock_config_dict["output_path"])
    assert not os.path.exists(get_staging_path(mock_config_dict["output_path"]))


def test_run_merge_namespace_mismatch(mock_config_dict, write_mapping) -> None:
    mock_config_dict["input_b"] = write_mapping("other.tiny", "v1\tintermediary\tnamed\n")

    result = run_merge(mock_config_dict)

    assert result.ok is False
    assert result.error_type == "NamespaceMismatchError"


def test_run_merge_reports_parse_error_with_path(mock_config_dict, write_mapping) -> None:
    bad = write_mapping("bad.tiny", "v2\tofficial\tnamed\n")
    mock_config_dict["input_b"] = bad

    result = run_merge(mock_config_dict)

    assert result.ok is False
    assert result.error_type == "InvalidHeaderError"
    assert result.error.startswith(f"{bad}: ")


def test_run_merge_missing_input(mock_config_dict, tmp_path) -> None:
    mock_config_dict["input_a"] = str(tmp_path / "nope.tiny")

    result = run_merge(mock_config_dict)

    assert result.ok is False
    assert result.error_type == "FileNotFoundError"
    assert "nope.tiny" in result.error


def test_run_merge_requires_output_path(mock_config_dict) -> None:
    mock_config_dict["output_path"] = ""

    result = run_merge(mock_config_dict)

    assert result.ok is False
    assert result.error_type == "ValueError"


def test_run_merge_warns_about_unknown_fallback(mock_config_dict, caplog) -> None:
    mock_config_dict["fallback_order"] = ["srg", "intermediary"]

    with caplog.at_level("WARNING", logger="tinymerge"):
        result = run_merge(mock_config_dict)

    assert result.ok is True
    assert "Fallback namespace 'srg' is not declared" in caplog.text
