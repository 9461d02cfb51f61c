"""Unit tests for corpus_topics/preprocessing/loader.py"""

import pytest

from corpus_topics.exceptions import CorpusTopicsError, InputNotFoundError
from corpus_topics.preprocessing import load_documents


class TestLoadText:

    def test_one_document_per_line(self, sample_text_file):
        documents = load_documents(sample_text_file)
        assert len(documents) == 4
        assert documents[0] == "Apple banana cherry apple banana."
        assert documents[2] == ""

    def test_accepts_string_path(self, sample_text_file):
        assert load_documents(str(sample_text_file)) == load_documents(sample_text_file)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("", encoding="utf-8")
        assert load_documents(path) == []

    def test_form_feed_and_line_separator_stay_in_document(self, tmp_path):
        path = tmp_path / "scraped.txt"
        path.write_bytes("one\u2028two\x0cthree\nfour\n".encode("utf-8"))
        assert load_documents(path) == ["one\u2028two\x0cthree", "four"]

    def test_crlf_and_cr_line_endings(self, tmp_path):
        path = tmp_path / "windows.txt"
        path.write_bytes(b"first\r\nsecond\rthird\r\n\r\n")
        assert load_documents(path) == ["first", "second", "third", ""]


class TestLoadCsv:

    def test_header_skipped_and_missing_cell_is_none(self, sample_csv_file):
        documents = load_documents(sample_csv_file)
        assert documents == [
            "Apple banana cherry apple banana",
            "Piston valve gasket piston valve",
            None,
            "Apple banana piston valve",
        ]

    def test_multiple_columns_flattened_column_by_column(self, tmp_path, caplog):
        path = tmp_path / "wide.csv"
        path.write_text("a,b\nx1,y1\nx2,y2\n", encoding="utf-8")

        with caplog.at_level("WARNING"):
            documents = load_documents(path)

        assert documents == ["x1", "x2", "y1", "y2"]
        assert "2 columns" in caplog.text

    def test_numeric_cells_read_as_text(self, tmp_path):
        path = tmp_path / "numbers.csv"
        path.write_text("text\n123\nabc\n", encoding="utf-8")
        assert load_documents(path) == ["123", "abc"]


class TestMissingInput:

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(InputNotFoundError, match="not found"):
            load_documents(tmp_path / "nope.csv")

    def test_error_is_file_not_found_and_pipeline_error(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_documents(tmp_path / "nope.txt")
        with pytest.raises(CorpusTopicsError):
            load_documents(tmp_path / "nope.txt")

    def test_directory_is_not_a_document_file(self, tmp_path):
        with pytest.raises(InputNotFoundError):
            load_documents(tmp_path)
