import os

import pytest

from fnorm.batch import process_paths
from fnorm.errors import BatchError


def test_batch_continues_after_failure(tmp_path):
    first = tmp_path / "First File.txt"
    first.write_text("1", encoding="utf-8")
    third = tmp_path / "Third File.txt"
    third.write_text("3", encoding="utf-8")
    missing = tmp_path / "Second File.txt"

    report = process_paths([first, missing, third])

    assert not report.ok
    assert len(report.failures) == 1
    assert report.failures[0].kind == "PathNotFoundError"
    assert report.failures[0].path == str(missing)
    assert [o.new_name for o in report.renamed] == ["first-file.txt", "third-file.txt"]
    assert sorted(os.listdir(tmp_path)) == ["first-file.txt", "third-file.txt"]


def test_batch_separates_unchanged_from_renamed(tmp_path):
    (tmp_path / "fine.txt").write_text("", encoding="utf-8")
    (tmp_path / "Not Fine.txt").write_text("", encoding="utf-8")

    report = process_paths([tmp_path / "fine.txt", tmp_path / "Not Fine.txt"])

    assert report.ok
    assert [o.old_name for o in report.unchanged] == ["fine.txt"]
    assert [o.old_name for o in report.renamed] == ["Not Fine.txt"]
    report.raise_for_failures()


def test_batch_error_lists_each_failure_with_cause(tmp_path):
    (tmp_path / "Source File.txt").write_text("", encoding="utf-8")
    (tmp_path / "source-file.txt").write_text("", encoding="utf-8")

    report = process_paths([tmp_path / "Source File.txt", tmp_path / "gone.txt"])

    with pytest.raises(BatchError) as info:
        report.raise_for_failures()

    text = str(info.value)
    assert text.startswith("failed to process 2 paths:")
    assert "target file already exists" in text
    assert "caused by:" in text
    assert len(info.value.failures) == 2
