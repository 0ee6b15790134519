#!/usr/bin/env python
from __future__ import annotations
import pytest # type: ignore
from hllcount.hllcount import main, sketch_file, sketch_files, format_report
from hllcount.lib.hyperloglog import HyperLogLog
from hllcount.lib.exact import ExactCounter

TEST_TEXT = """the quick brown fox
jumps over the lazy dog
the end
"""


@pytest.fixture
def text_file(tmp_path):
    path = tmp_path / "fox.txt"
    path.write_text(TEST_TEXT, encoding="utf-8")
    return str(path)


@pytest.mark.quick
def test_sketch_file(text_file):
    filepath, hll, counter = sketch_file(text_file, exact=True)
    assert filepath == text_file
    assert hll.item_count == 11
    assert counter.count() == 9


@pytest.mark.quick
def test_sketch_file_without_exact(text_file):
    _, hll, counter = sketch_file(text_file, error_rate=0.05)
    assert counter is None
    assert hll.precision == 9


@pytest.mark.quick
def test_format_report():
    hll = HyperLogLog()
    counter = ExactCounter()
    lines = format_report(hll, counter, label="empty.txt")
    assert lines == ["empty.txt: Estimated 0 err(0.00575)", "empty.txt: Actual 0 err(0.00000)"]


@pytest.mark.quick
def test_main_single_file(text_file, capsys):
    main([text_file, "--exact"])
    out = capsys.readouterr().out
    assert "bits: 15" in out
    assert "m_counters: 32768" in out
    assert "Estimated " in out
    assert "err(0.00575)" in out
    assert "Actual 9 err(" in out


@pytest.mark.quick
def test_main_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / "missing.txt")])
    assert excinfo.value.code == 2
    assert "does not exist" in capsys.readouterr().err


@pytest.mark.quick
def test_main_directory_argument(tmp_path, text_file, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([text_file, str(tmp_path)])
    assert excinfo.value.code == 2
    captured = capsys.readouterr()
    assert "is not a regular file" in captured.err
    assert "bits:" not in captured.out


@pytest.mark.quick
def test_main_invalid_error_rate(text_file, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([text_file, "--error-rate", "0.9"])
    assert excinfo.value.code == 1
    assert "error rate too high" in capsys.readouterr().err


@pytest.mark.full
def test_main_merges_files(tmp_path, capsys):
    first = tmp_path / "a.txt"
    second = tmp_path / "b.txt"
    first.write_text("a b c\n", encoding="utf-8")
    second.write_text("c d e\n", encoding="utf-8")

    main([str(first), str(second), "--exact", "--verbose", "--threads", "2"])
    out = capsys.readouterr().out
    assert "a.txt: Actual 3 err(" in out
    assert "b.txt: Actual 3 err(" in out
    assert "\nActual 5 err(" in out


@pytest.mark.full
def test_sketch_files_pool_matches_serial(tmp_path):
    paths = []
    for i in range(3):
        path = tmp_path / f"part{i}.txt"
        path.write_text(" ".join(f"w{j}" for j in range(i * 100, i * 100 + 150)), encoding="utf-8")
        paths.append(str(path))

    serial = sketch_files(paths, threads=1)
    pooled = sketch_files(paths, threads=3)

    merged_serial = HyperLogLog()
    merged_pooled = HyperLogLog()
    for (_, a, _), (_, b, _) in zip(serial, pooled):
        merged_serial.merge(a)
        merged_pooled.merge(b)
    assert (merged_serial.registers == merged_pooled.registers).all()
    assert abs(merged_serial.count() - 350) <= 8


@pytest.mark.full
def test_main_fixed_text(tmp_path, fixed_text, capsys):
    path = tmp_path / "words.txt"
    path.write_text(fixed_text, encoding="utf-8")
    main([str(path), "--exact"])
    out = capsys.readouterr().out
    assert "Actual 1000 err(" in out
