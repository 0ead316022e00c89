"""Tests for reading the source text and building the replay line."""

from __future__ import annotations

import io

import pytest

from txtmanip.errors import StartupError
from txtmanip.source import STDIN_DESCRIPTOR, Source, read_source, replay_line


class FakeTTY(io.BytesIO):
    """A byte stream that claims to be interactive."""

    def isatty(self) -> bool:
        return True


class TestSource:
    """Descriptor used at the head of the replay line."""

    def test_file_descriptor(self) -> None:
        assert Source(b"x", "input.txt").descriptor == "cat input.txt"

    def test_stdin_descriptor(self) -> None:
        assert Source(b"x").descriptor == STDIN_DESCRIPTOR == "<source>"


class TestReadSource:
    """Reading the source from a file or standard input."""

    def test_reads_file(self, tmp_path) -> None:
        path = tmp_path / "input.txt"
        path.write_bytes(b"a\nb\n")
        source = read_source(str(path))
        assert source.content == b"a\nb\n"
        assert source.filename == str(path)

    def test_file_wins_over_stdin(self, tmp_path) -> None:
        path = tmp_path / "input.txt"
        path.write_bytes(b"file\n")
        source = read_source(str(path), io.BytesIO(b"stdin\n"))
        assert source.content == b"file\n"

    def test_missing_file(self, tmp_path) -> None:
        missing = str(tmp_path / "nope.txt")
        with pytest.raises(StartupError) as exc_info:
            read_source(missing)
        assert str(exc_info.value) == f"{missing} is not exist: no such file or directory"

    def test_empty_file(self, tmp_path) -> None:
        path = tmp_path / "empty.txt"
        path.write_bytes(b"")
        with pytest.raises(StartupError, match="^Missing input$"):
            read_source(str(path))

    def test_unreadable_path(self, tmp_path) -> None:
        with pytest.raises(StartupError, match="^Open file failed: "):
            read_source(str(tmp_path))

    def test_reads_stdin(self) -> None:
        source = read_source(None, io.BytesIO(b"piped\n"))
        assert source.content == b"piped\n"
        assert source.filename is None

    def test_empty_stdin(self) -> None:
        with pytest.raises(StartupError, match="^Missing input$"):
            read_source(None, io.BytesIO(b""))

    def test_interactive_stdin(self) -> None:
        with pytest.raises(StartupError, match="^Missing input$"):
            read_source(None, FakeTTY(b"typed\n"))


class TestReplayLine:
    """Joining the descriptor and logged commands."""

    def test_no_entries(self) -> None:
        assert replay_line("cat input.txt", []) == "cat input.txt"

    def test_entries_joined(self) -> None:
        assert replay_line("<source>", ["grep b", "sort"]) == "<source> | grep b | sort"

    def test_entries_kept_verbatim(self) -> None:
        assert replay_line("cat f", ["grep 'a | b'"]) == "cat f | grep 'a | b'"
