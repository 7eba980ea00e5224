"""Tests for the command-line entry point: stdout carries only the GPS offset."""

import pytest

from subgps import cli
from subgps.cli import CLIHandler, positive_float
from subgps.exceptions import StreamExtractionError


@pytest.fixture
def run_cli(tmp_path, monkeypatch, fake_extractor):
    """Runs the CLI in tmp_path with a fake extractor, returning the exit code."""
    monkeypatch.chdir(tmp_path)

    def _run(argv, timestamps=(), raw_stream=b"", error=None):
        extractor = fake_extractor(list(timestamps), raw_stream, error)
        monkeypatch.setattr(cli, "StreamExtractor", lambda **kwargs: extractor)
        with pytest.raises(SystemExit) as exc_info:
            CLIHandler().run(argv)
        return exc_info.value.code

    return _run


class TestCLI:
    """Test argument handling, output and exit codes."""

    def test_prints_offset_and_writes_gpx(self, run_cli, video_file, sample_stream, capsys):
        code = run_cli(["-v", str(video_file)], [0.0, 1.0, 2.0], sample_stream)

        assert code == 0
        assert capsys.readouterr().out == "1.0\n"
        assert video_file.with_suffix(".gpx").exists()

    def test_speed_option(self, run_cli, video_file, sample_stream, capsys):
        code = run_cli(["-v", str(video_file), "--speed", "2"], [0.0, 1.0, 2.0], sample_stream)

        assert code == 0
        assert capsys.readouterr().out == "0.5\n"

    def test_output_option(self, run_cli, video_file, tmp_path, sample_stream):
        out = tmp_path / "out.gpx"
        assert run_cli(["-v", str(video_file), "-o", str(out)], [0.0, 1.0, 2.0], sample_stream) == 0
        assert out.exists()

    def test_no_fix_prints_zero(self, run_cli, video_file, frame, capsys):
        code = run_cli(["-v", str(video_file)], [0.0], frame(b"caption"))

        assert code == 0
        assert capsys.readouterr().out == "0\n"
        assert not video_file.with_suffix(".gpx").exists()

    def test_config_file(self, run_cli, video_file, tmp_path, sample_stream, capsys):
        config = tmp_path / "settings.yaml"
        config.write_text("speed_factor: 4\n")

        assert run_cli(["-v", str(video_file), "-c", str(config)], [0.0, 2.0, 4.0], sample_stream) == 0
        assert capsys.readouterr().out == "0.5\n"

    def test_default_config_in_working_directory(self, run_cli, video_file, tmp_path, sample_stream, capsys):
        (tmp_path / "config.yaml").write_text("speed_factor: 2\n")

        assert run_cli(["-v", str(video_file)], [0.0, 2.0, 4.0], sample_stream) == 0
        assert capsys.readouterr().out == "1.0\n"

    def test_missing_config_file(self, run_cli, video_file, tmp_path, capsys):
        code = run_cli(["-v", str(video_file), "-c", str(tmp_path / "missing.yaml")])
        assert code == 1
        assert capsys.readouterr().out == ""

    def test_missing_video(self, run_cli, tmp_path, capsys):
        assert run_cli(["-v", str(tmp_path / "missing.mp4")]) == 1
        assert capsys.readouterr().out == ""

    def test_extraction_failure(self, run_cli, video_file, capsys):
        code = run_cli(["-v", str(video_file)], error=StreamExtractionError("ffprobe failed"))

        assert code == 1
        assert capsys.readouterr().out == ""

    def test_unexpected_pipeline_error_is_reported(self, run_cli, video_file, capsys):
        assert run_cli(["-v", str(video_file)], error=RuntimeError("boom")) == 1
        assert capsys.readouterr().out == ""

    @pytest.mark.parametrize("speed", ["0", "-3", "abc"])
    def test_invalid_speed_rejected_by_parser(self, run_cli, video_file, speed):
        assert run_cli(["-v", str(video_file), "-s", speed]) == 2


def test_positive_float():
    assert positive_float("3") == 3.0
