"""Tests for file content access and whole-file reading."""

import tempfile
from pathlib import Path

import pytest

from readcon.errors import IncompleteFrameError, ParseError
from readcon.io.content import (
    MMAP_THRESHOLD,
    FileContents,
    read_all_frames,
    read_con,
    read_con_string,
    read_first_frame,
)

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def large_file(temp_dir):
    """A velocity trajectory larger than the mmap threshold."""
    frame = (DATA_DIR / "tiny_cuh2.convel").read_text()
    n_frames = MMAP_THRESHOLD // len(frame) + 2
    filepath = temp_dir / "large.convel"
    filepath.write_text(frame * n_frames)

    assert filepath.stat().st_size > MMAP_THRESHOLD
    return filepath


class TestFileContents:
    """Tests for the read-or-map strategy."""

    def test_small_file_is_read(self):
        """Test files below the threshold are read into memory."""
        with FileContents(DATA_DIR / "tiny_cuh2.con") as contents:
            assert not contents.is_mapped
            assert isinstance(contents.data, bytes)
            assert contents.data.startswith(b"Random Number Seed")

    def test_large_file_is_mapped(self, large_file):
        """Test files at or above the threshold are memory-mapped."""
        with FileContents(large_file) as contents:
            assert contents.is_mapped
            assert len(contents) == large_file.stat().st_size

    def test_threshold_override(self):
        """Test the threshold can be lowered per file."""
        with FileContents(DATA_DIR / "tiny_cuh2.con", threshold=1) as contents:
            assert contents.is_mapped

    def test_empty_file_is_read(self, temp_dir):
        """Test an empty file never goes through mmap."""
        filepath = temp_dir / "empty.con"
        filepath.write_bytes(b"")

        with FileContents(filepath, threshold=0) as contents:
            assert not contents.is_mapped
            assert list(contents.frames()) == []

    def test_data_requires_open(self):
        """Test the buffer is unavailable before open()."""
        contents = FileContents(DATA_DIR / "tiny_cuh2.con")

        with pytest.raises(RuntimeError, match="not open"):
            contents.data

    @pytest.mark.parametrize("threshold", [MMAP_THRESHOLD, 1])
    def test_invalid_utf8_fails_before_parsing(self, temp_dir, threshold):
        """Test invalid encoding is a decoding error, not a parse error."""
        filepath = temp_dir / "bad.con"
        filepath.write_bytes(b"Random Number Seed\n\xff\xfe\n")

        with pytest.raises(UnicodeDecodeError):
            read_all_frames(filepath, threshold=threshold)

    def test_missing_file(self):
        """Test a missing file raises OSError."""
        with pytest.raises(OSError):
            read_con("/nonexistent/path.con")


class TestReadFrames:
    """Tests for whole-file reading."""

    def test_read_all_frames(self):
        """Test every frame of a file is returned in order."""
        frames = read_all_frames(DATA_DIR / "tiny_multi_cuh2.con")

        assert len(frames) == 2
        assert frames[0].atom_data[2].x == pytest.approx(8.6823)
        assert frames[1].atom_data[2].x == pytest.approx(8.8549)

    def test_read_first_frame(self):
        """Test only the first frame is returned."""
        frame = read_first_frame(DATA_DIR / "tiny_multi_cuh2.convel")

        assert frame is not None
        assert frame.atom_data[0].vx == 0.001234

    def test_read_first_frame_ignores_later_errors(self, temp_dir):
        """Test reading stops after the first frame."""
        text = (DATA_DIR / "tiny_cuh2.con").read_text()
        filepath = temp_dir / "partial.con"
        filepath.write_text(text + "Random Number Seed\nTime\n")

        frame = read_first_frame(filepath)
        assert frame.natoms == 4

        with pytest.raises(ParseError):
            read_all_frames(filepath)

    def test_read_first_frame_empty(self, temp_dir):
        """Test an empty file has no first frame."""
        filepath = temp_dir / "empty.con"
        filepath.write_text("")

        assert read_first_frame(filepath) is None

    def test_read_all_short_circuits(self, temp_dir):
        """Test the first malformed frame aborts the read."""
        lines = (DATA_DIR / "tiny_multi_cuh2.con").read_text().splitlines()
        filepath = temp_dir / "truncated.con"
        filepath.write_text("\n".join(lines[:-1]) + "\n")

        with pytest.raises(IncompleteFrameError):
            read_all_frames(filepath)

    def test_read_con_string(self):
        """Test reading from an in-memory string."""
        text = (DATA_DIR / "tiny_cuh2.con").read_text()

        frames = read_con_string(text)
        assert len(frames) == 1
        assert len(frames[0]) == 4

    def test_read_con_string_malformed(self):
        """Test malformed strings raise a parse error."""
        with pytest.raises(ParseError):
            read_con_string("not a valid con file\n")

    def test_mapped_and_read_paths_agree(self, large_file):
        """Test both strategies give identical frames for the same bytes."""
        mapped = read_all_frames(large_file)
        read = read_all_frames(large_file, threshold=large_file.stat().st_size + 1)

        assert len(mapped) > 1
        assert mapped == read

    def test_threshold_crossing_keeps_output(self, temp_dir):
        """Test growing a file past the threshold keeps earlier frames."""
        frame_text = (DATA_DIR / "tiny_cuh2.convel").read_text()
        below = temp_dir / "below.convel"
        above = temp_dir / "above.convel"
        n_below = (MMAP_THRESHOLD - 1) // len(frame_text)
        below.write_text(frame_text * n_below)
        above.write_text(frame_text * (n_below + 1))

        assert below.stat().st_size < MMAP_THRESHOLD <= above.stat().st_size

        frames_below = read_all_frames(below)
        frames_above = read_all_frames(above)
        assert frames_above[:n_below] == frames_below
        assert frames_above[-1] == frames_below[0]
