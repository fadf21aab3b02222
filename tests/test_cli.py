"""Tests for the command line interface."""

import json

import pytest
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from typer.testing import CliRunner

from cli.app import app
from musicbox import __version__
from musicbox.formats.reader import decode_song
from musicbox.formats.writer import encode_song

runner = CliRunner()


@pytest.fixture
def song_file(tmp_path, song_dict):
    """Write the sample song to a JSON file."""
    path = tmp_path / "song.json"
    path.write_text(json.dumps(song_dict))
    return path


class TestVersion:
    """Test cases for version output."""

    def test_version_command(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestEncode:
    """Test cases for the encode command."""

    def test_encode(self, song_file, sample_song):
        """Test a JSON song encodes to the same string as the library."""
        result = runner.invoke(app, ["encode", str(song_file)])
        assert result.exit_code == 0
        assert result.stdout.strip() == encode_song(sample_song)

    def test_encode_url(self, song_file):
        """Test building a share URL."""
        result = runner.invoke(app, ["encode", str(song_file), "--url", "https://example.com/mb/"])
        assert result.exit_code == 0
        assert result.stdout.strip().startswith("https://example.com/mb/?c=v5_")

    def test_encode_url_from_env(self, song_file):
        """Test the base URL environment variable."""
        result = runner.invoke(
            app, ["encode", str(song_file)], env={"MUSICBOX_BASE_URL": "https://example.com/"}
        )
        assert result.exit_code == 0
        assert result.stdout.strip().startswith("https://example.com/?c=v5_")

    def test_encode_to_file(self, song_file, tmp_path):
        """Test writing the result to a file."""
        output = tmp_path / "out" / "song.txt"
        result = runner.invoke(app, ["encode", str(song_file), "-o", str(output)])
        assert result.exit_code == 0
        assert decode_song(output.read_text().strip()) is not None

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["encode", str(tmp_path / "nope.json")])
        assert result.exit_code == 1

    def test_invalid_file(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"mode": "disco"}')
        result = runner.invoke(app, ["encode", str(path)])
        assert result.exit_code == 1


class TestDecode:
    """Test cases for the decode command."""

    def test_display(self, sample_song):
        """Test the song summary is shown."""
        result = runner.invoke(app, ["decode", encode_song(sample_song), "--notes"])
        assert result.exit_code == 0
        assert "G Major" in result.stdout
        assert "studio" in result.stdout

    def test_json(self, sample_song):
        """Test JSON output."""
        result = runner.invoke(app, ["decode", encode_song(sample_song), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["key"] == "G Major"
        assert data["beats"] == 32
        assert [row[1] for row in data["tracks"]["3"]] == ["kick", "snare", "shaker"]

    def test_url(self, sample_song):
        """Test decoding a share URL."""
        url = "https://example.com/?c=" + encode_song(sample_song)
        result = runner.invoke(app, ["decode", url, "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["mode"] == "studio"

    def test_output_file(self, sample_song, tmp_path):
        """Test JSON export feeds back into encode."""
        output = tmp_path / "song.json"
        encoded = encode_song(sample_song)
        result = runner.invoke(app, ["decode", encoded, "-o", str(output)])
        assert result.exit_code == 0

        result = runner.invoke(app, ["encode", str(output)])
        assert result.stdout.strip() == encoded

    @pytest.mark.parametrize("source", ["v99_AAAA", "v5_@@@@", "https://example.com/"])
    def test_errors(self, source):
        """Test undecodable input exits with an error."""
        result = runner.invoke(app, ["decode", source])
        assert result.exit_code == 1


class TestDump:
    """Test cases for the dump command."""

    def test_dump(self, sample_song):
        result = runner.invoke(app, ["dump", encode_song(sample_song)])
        assert result.exit_code == 0
        assert "Header" in result.stdout
        assert "key" in result.stdout

    def test_dump_options(self, sample_song):
        args = ["dump", encode_song(sample_song), "--non-empty", "--beats", "2", "--bits", "--hex"]
        result = runner.invoke(app, args)
        assert result.exit_code == 0
        assert "Legend" in result.stdout

    def test_dump_legacy(self, encode_fields):
        result = runner.invoke(app, ["dump", encode_fields(2, {"length": 1})])
        assert result.exit_code == 0

    def test_dump_unknown_version(self):
        result = runner.invoke(app, ["dump", "v42_AAAA"])
        assert result.exit_code == 1


class TestValidate:
    """Test cases for the validate command."""

    def test_valid_file(self, song_file):
        result = runner.invoke(app, ["validate", str(song_file)])
        assert result.exit_code == 0
        assert "VALID" in result.stdout

    def test_valid_string(self, sample_song):
        result = runner.invoke(app, ["validate", encode_song(sample_song), "--strict"])
        assert result.exit_code == 0

    def test_overlap_is_error(self, tmp_path):
        path = tmp_path / "overlap.json"
        path.write_text(json.dumps({"tracks": {"1": [[0, "C", 4], [2, "D"]]}}))
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1
        assert "INVALID" in result.stdout

    def test_cowbell_warning(self, tmp_path):
        """Test unencodable sounds only fail in strict mode."""
        path = tmp_path / "cowbell.json"
        path.write_text(json.dumps({"tracks": {"3": [[0, "cowbell"]]}}))

        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 0
        assert "cowbell" in result.stdout

        result = runner.invoke(app, ["validate", str(path), "--strict"])
        assert result.exit_code == 1

    def test_truncated_string_warning(self, sample_song):
        truncated = encode_song(sample_song)[: len("v5_") + 40]
        result = runner.invoke(app, ["validate", truncated, "--strict"])
        assert result.exit_code == 1
