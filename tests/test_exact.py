import gzip
import pytest # type: ignore
from hllcount.lib.exact import ExactCounter
from hllcount.lib.utils import read_tokens


@pytest.mark.quick
class TestExactCounter:
    """Tests for the set-backed ground truth counter."""

    def test_count(self):
        counter = ExactCounter()
        counter.add_batch(["a", "b", "a", "c"])
        counter.add_string("d")
        assert counter.count() == 4
        assert len(counter) == 4
        assert counter.estimate_cardinality() == 4.0

    def test_merge(self):
        a = ExactCounter()
        b = ExactCounter()
        a.add_batch(["a", "b"])
        b.add_batch(["b", "c"])
        assert a.merge(b) is a
        assert a.count() == 3

    def test_merge_wrong_type(self):
        with pytest.raises(TypeError):
            ExactCounter().merge(object())

    def test_relative_error(self):
        counter = ExactCounter()
        counter.add_batch(range(100))
        assert counter.relative_error(95) == pytest.approx(0.05)
        assert counter.relative_error(100) == 0.0

    def test_relative_error_empty(self):
        counter = ExactCounter()
        assert counter.relative_error(0) == 0.0
        assert counter.relative_error(3) == float('inf')


@pytest.mark.quick
class TestReadTokens:
    """Tests for whitespace tokenization of input files."""

    def test_plain_text(self, tmp_path):
        path = tmp_path / "words.txt"
        path.write_text("to be or\n  not\tto be\n\n", encoding="utf-8")
        assert list(read_tokens(str(path))) == ["to", "be", "or", "not", "to", "be"]

    def test_gzipped_text(self, tmp_path):
        path = tmp_path / "words.txt.gz"
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write("alpha beta\ngamma\n")
        assert list(read_tokens(str(path))) == ["alpha", "beta", "gamma"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("", encoding="utf-8")
        assert list(read_tokens(str(path))) == []
