"""Tests for lazy frame iteration and fast skipping."""

from pathlib import Path

import pytest

from readcon.errors import (
    IncompleteFrameError,
    IncompleteHeaderError,
    IncompleteVelocitySectionError,
    InvalidNumberFormatError,
    ParseError,
)
from readcon.io.cursor import LineCursor
from readcon.io.iterators import ConFrameIterator, count_frames, index_frames

DATA_DIR = Path(__file__).parent / "data"


def _read(name: str) -> str:
    return (DATA_DIR / name).read_text()


@pytest.fixture
def multi_con():
    """Two position-only frames."""
    return _read("tiny_multi_cuh2.con")


@pytest.fixture
def multi_convel():
    """Two frames with velocities."""
    return _read("tiny_multi_cuh2.convel")


class TestLineCursor:
    """Tests for the line cursor."""

    def test_lines_and_offsets(self):
        """Test lines are returned in order with byte offsets."""
        cursor = LineCursor("a\nbb\nccc")

        assert cursor.offset == 0
        assert cursor.next() == "a"
        assert cursor.offset == 2
        assert cursor.peek() == "bb"
        assert cursor.offset == 2
        assert cursor.next() == "bb"
        assert cursor.next() == "ccc"
        assert cursor.next() is None
        assert cursor.at_end()

    def test_trailing_newline_adds_no_line(self):
        """Test a final newline does not produce an empty line."""
        assert list(LineCursor("a\nb\n")) == ["a", "b"]

    def test_crlf(self):
        """Test carriage returns are dropped from line ends."""
        assert list(LineCursor(b"a\r\nb\r\n")) == ["a", "b"]

    def test_blank_lines_kept(self):
        """Test interior blank lines are returned."""
        assert list(LineCursor("a\n\nb")) == ["a", "", "b"]

    def test_bounded_range(self):
        """Test a cursor stops at its end offset."""
        cursor = LineCursor(b"a\nb\nc\n", start=2, end=4)

        assert list(cursor) == ["b"]

    def test_advance_skips_without_decoding(self):
        """Test advance moves past lines and reports exhaustion."""
        cursor = LineCursor(b"\xff\xfe\nok\n")

        assert cursor.advance()
        assert cursor.next() == "ok"
        assert not cursor.advance()


class TestConFrameIterator:
    """Tests for frame iteration."""

    def test_single_con(self):
        """Test a position-only file yields one frame without velocities."""
        frames = list(ConFrameIterator(_read("tiny_cuh2.con")))

        assert len(frames) == 1
        frame = frames[0]
        assert frame.header.natm_types == 2
        assert len(frame) == 4
        assert frame.atom_data[0].symbol == "Cu"
        assert frame.atom_data[0].x == pytest.approx(0.6394, abs=1e-4)
        assert frame.atom_data[0].is_fixed
        assert not frame.has_velocities()
        for atom in frame.atom_data:
            assert atom.vx is None and atom.vy is None and atom.vz is None
            assert not atom.has_velocity

    def test_single_convel(self):
        """Test a velocity file yields velocities for every atom."""
        frames = list(ConFrameIterator(_read("tiny_cuh2.convel")))

        assert len(frames) == 1
        frame = frames[0]
        assert frame.has_velocities()
        assert frame.atom_data[0].velocity == (0.001234, 0.002345, -0.003456)
        last = frame.atom_data[3]
        assert last.symbol == "H"
        assert last.velocity == (0.045678, -0.056789, -0.06789)
        assert not last.is_fixed

    def test_multi_convel(self, multi_convel):
        """Test both frames of a multi-frame velocity file."""
        frames = list(ConFrameIterator(multi_convel))

        assert len(frames) == 2
        assert all(frame.has_velocities() for frame in frames)
        assert frames[1].atom_data[0].velocity == (0.001111, 0.002222, -0.003333)
        assert frames[0].atom_data[2].x == pytest.approx(8.6823, abs=1e-4)
        assert frames[1].atom_data[2].x == pytest.approx(8.8549, abs=1e-4)

    def test_empty_input(self):
        """Test empty input ends immediately."""
        assert list(ConFrameIterator("")) == []

    def test_end_is_not_an_error(self, multi_con):
        """Test next() keeps signalling the end after exhaustion."""
        iterator = ConFrameIterator(multi_con)
        list(iterator)

        with pytest.raises(StopIteration):
            next(iterator)
        assert not iterator.forward()

    def test_truncated_trailing_frame(self, multi_con):
        """Test a partial trailing frame surfaces as an error."""
        lines = multi_con.splitlines()
        iterator = ConFrameIterator("\n".join(lines[:-1]) + "\n")

        next(iterator)
        with pytest.raises(IncompleteFrameError):
            next(iterator)

    def test_garbage_input(self):
        """Test non-format text fails as an incomplete header."""
        with pytest.raises(IncompleteHeaderError):
            next(ConFrameIterator("not a valid con file\n"))

    def test_error_does_not_end_iterator(self, multi_con):
        """Test the iterator can still be asked for frames after an error."""
        lines = multi_con.splitlines()
        lines[2] = "15.3 abc 100.0"
        iterator = ConFrameIterator("\n".join(lines) + "\n")

        with pytest.raises(InvalidNumberFormatError):
            next(iterator)
        # Cursor is left mid-frame; later results are unreliable but allowed
        with pytest.raises(ParseError):
            next(iterator)

    def test_results_yields_errors(self, multi_con):
        """Test results() reports per-frame errors inline."""
        lines = multi_con.splitlines()
        iterator = ConFrameIterator("\n".join(lines[:-1]) + "\n")

        results = list(iterator.results())

        assert len(results) == 2
        assert results[0].natoms == 4
        assert isinstance(results[1], IncompleteFrameError)


class TestForward:
    """Tests for header-only frame skipping."""

    def test_skip_then_parse_convel(self, multi_convel):
        """Test skipping the first velocity frame lands on the second."""
        iterator = ConFrameIterator(multi_convel)

        assert iterator.forward()
        frame = next(iterator)
        assert frame.has_velocities()
        assert frame.atom_data[0].vx == 0.001111
        with pytest.raises(StopIteration):
            next(iterator)

    @pytest.mark.parametrize(
        "name", ["tiny_multi_cuh2.con", "tiny_multi_cuh2.convel"]
    )
    def test_skip_parse_equivalence(self, name):
        """Test k skips then a parse equals the (k+1)th parsed frame."""
        contents = _read(name)
        parsed = list(ConFrameIterator(contents))

        for k in range(len(parsed)):
            iterator = ConFrameIterator(contents)
            for _ in range(k):
                assert iterator.forward()
            assert next(iterator) == parsed[k]

    def test_forward_at_end(self):
        """Test forward on empty input reports the end."""
        assert not ConFrameIterator("").forward()

    def test_forward_truncated_header(self, multi_con):
        """Test a header cut short is an incomplete header."""
        lines = multi_con.splitlines()[:5]

        with pytest.raises(IncompleteHeaderError):
            ConFrameIterator("\n".join(lines)).forward()

    def test_forward_truncated_coordinates(self, multi_con):
        """Test a coordinate section cut short is an incomplete frame."""
        lines = multi_con.splitlines()[:15]

        with pytest.raises(IncompleteFrameError):
            ConFrameIterator("\n".join(lines)).forward()

    def test_forward_truncated_velocities(self):
        """Test a velocity section cut short is reported as such."""
        lines = _read("tiny_cuh2.convel").splitlines()[:-1]

        with pytest.raises(IncompleteVelocitySectionError):
            ConFrameIterator("\n".join(lines)).forward()

    def test_forward_ignores_malformed_masses(self, multi_con):
        """Test the mass line is consumed without being parsed."""
        lines = multi_con.splitlines()
        lines[8] = "not masses"
        iterator = ConFrameIterator("\n".join(lines) + "\n")

        assert iterator.forward()
        assert next(iterator).atom_data[2].x == pytest.approx(8.8549)


class TestCounting:
    """Tests for frame counting and indexing."""

    def test_count_frames(self, multi_con, multi_convel):
        """Test frames are counted without parsing atoms."""
        assert count_frames(multi_con) == 2
        assert count_frames(multi_convel) == 2
        assert count_frames("") == 0

    def test_index_frames(self, multi_con):
        """Test frame ranges cover the buffer back to back."""
        ranges = index_frames(multi_con)
        data = multi_con.encode()

        assert len(ranges) == 2
        assert ranges[0][0] == 0
        assert ranges[0][1] == ranges[1][0]
        assert ranges[1][1] == len(data)
        assert data[ranges[1][0] :].startswith(b"Random Number Seed")

    def test_index_frames_stops_at_malformed_header(self, multi_con):
        """Test indexing stops at the first frame it cannot follow."""
        lines = multi_con.splitlines()
        lines[17 + 6] = "two"
        contents = "\n".join(lines) + "\n"

        ranges = index_frames(contents)

        assert len(ranges) == 2
        assert ranges[1][1] == len(contents.encode())
