"""Unit tests for the python -m corpus_topics entry point."""

import json

import pytest

from corpus_topics.__main__ import main


def _run_dirs(base):
    return [p for p in base.iterdir() if p.is_dir()]


class TestMain:

    @pytest.fixture
    def base_args(self, tmp_path):
        return [
            "--output-dir", str(tmp_path / "out"),
            "--stopword-source", "none",
            "--max-iterations", "10",
            "--quiet",
        ]

    def test_success_exit_code(self, sample_text_file, base_args, tmp_path):
        assert main([str(sample_text_file), "--num-topics", "2", *base_args]) == 0
        run_dirs = _run_dirs(tmp_path / "out")
        assert len(run_dirs) == 1
        assert (run_dirs[0] / "topic_models.csv").is_file()

    def test_options_reach_the_model(self, sample_text_file, base_args, tmp_path):
        args = [
            str(sample_text_file), "--num-topics", "3", "--seed", "99",
            "--method", "gibbs", "--top-n", "2", "--stopwords", "apple", *base_args,
        ]
        assert main(args) == 0

        info = json.loads((_run_dirs(tmp_path / "out")[0] / "model_info.json").read_text())
        assert info["num_topics"] == 3
        assert info["seed"] == 99
        assert info["method"] == "gibbs"
        assert info["iterations"] == 10
        words = {word for entries in info["topic_top_words"].values() for word, _ in entries}
        assert "apple" not in words
        assert all(len(entries) == 2 for entries in info["topic_top_words"].values())

    def test_missing_input_exits_1(self, tmp_path, base_args, caplog):
        assert main([str(tmp_path / "missing.csv"), *base_args]) == 1
        assert "InputNotFoundError" in caplog.text

    def test_invalid_topic_count_exits_1(self, sample_text_file, base_args, tmp_path):
        assert main([str(sample_text_file), "--num-topics", "0", *base_args]) == 1
        assert not (tmp_path / "out").exists()

    @pytest.mark.parametrize("option", ["--max-iterations", "--workers", "--top-n"])
    def test_out_of_range_option_exits_1(self, sample_text_file, base_args, tmp_path, caplog, option):
        assert main([str(sample_text_file), *base_args, option, "0"]) == 1
        assert "Invalid options" in caplog.text
        assert not (tmp_path / "out").exists()

    def test_empty_corpus_exits_1(self, tmp_path, base_args):
        path = tmp_path / "blank.txt"
        path.write_text("\n\n", encoding="utf-8")
        assert main([str(path), "--exclude-placeholder", *base_args]) == 1

    def test_prints_topics_when_not_quiet(self, sample_text_file, tmp_path, capsys):
        args = [
            str(sample_text_file), "--num-topics", "2",
            "--output-dir", str(tmp_path), "--stopword-source", "none",
            "--max-iterations", "5",
        ]
        assert main(args) == 0
        out = capsys.readouterr().out
        assert "Topic 0:" in out
        assert "Total Words:" in out
        assert "Results saved to:" in out

    def test_input_is_required(self):
        with pytest.raises(SystemExit):
            main([])
