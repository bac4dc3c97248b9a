import gzip
import io
import os
import threading
from pathlib import Path

import pytest

from fasta_io import EmptyInputError, FastaFormatError, FastaReader, read_fasta
from fasta_io.io.streams import open_input

SAMPLE = b">seq1\nACGT\nACGT\n>seq2\nTTTT\n"


def test_two_entries_are_grouped():
    assert read_fasta(io.BytesIO(SAMPLE)) == [("seq1", "ACGTACGT"), ("seq2", "TTTT")]


def test_read_entry_one_at_a_time_then_eof():
    reader = FastaReader(io.BytesIO(SAMPLE))
    assert not reader.eof
    assert reader.read_entry() == ("seq1", "ACGTACGT")
    assert reader.num_parsed == 1
    assert reader.read_entry() == ("seq2", "TTTT")
    assert reader.num_parsed == 2
    assert reader.eof
    with pytest.raises(EOFError):
        reader.read_entry()


def test_rewind_gives_identical_entries():
    stream = io.BytesIO(SAMPLE + b">seq3 with words\r\nGG\r\nCC\r\n")
    reader = FastaReader(stream, buffer_size=5)
    first = reader.read_all()
    assert reader.num_parsed == 3
    reader.rewind()
    assert reader.num_parsed == 0
    assert list(reader) == first
    assert first[2] == ("seq3 with words", "GGCC")


def test_iterating_twice_restarts_from_the_beginning():
    reader = FastaReader(io.BytesIO(SAMPLE))
    assert reader.read_entry()[0] == "seq1"
    assert [d for d, _ in reader] == ["seq1", "seq2"]


def test_whitespace_in_sequence_lines_is_dropped():
    data = b">a\n  AC GT  \n\tTT\t\n"
    assert read_fasta(io.BytesIO(data)) == [("a", "ACGTTT")]


def test_blank_lines_between_sequence_lines_are_skipped():
    data = b">a\nAC\n\nGT\n\n>b\nTT\n\n"
    assert read_fasta(io.BytesIO(data)) == [("a", "ACGT"), ("b", "TT")]


def test_missing_final_newline():
    assert read_fasta(io.BytesIO(b">a\nAC\n>b\nGT")) == [("a", "AC"), ("b", "GT")]


def test_entry_without_sequence_is_returned_empty():
    assert read_fasta(io.BytesIO(b">a\n>b\nGT\n>c")) == [("a", ""), ("b", "GT"), ("c", "")]


def test_empty_input_raises():
    with pytest.raises(EmptyInputError):
        read_fasta(io.BytesIO(b""))
    with pytest.raises(EmptyInputError):
        FastaReader(io.BytesIO(b"")).read_entry()


def test_missing_marker_raises():
    with pytest.raises(FastaFormatError, match="does not start with '>'"):
        read_fasta(io.BytesIO(b"ACGT\n>a\nAC\n"))
    with pytest.raises(FastaFormatError):
        read_fasta(io.BytesIO(b"\n>a\nAC\n"))


def test_empty_description_raises():
    with pytest.raises(FastaFormatError, match="empty description"):
        read_fasta(io.BytesIO(b">\nACGT\n"))


def test_non_ascii_description_raises():
    with pytest.raises(FastaFormatError, match="non-ASCII"):
        read_fasta(io.BytesIO(">séq\nACGT\n".encode("utf-8")))


def test_error_reports_entry_number():
    reader = FastaReader(io.BytesIO(b">a\nAC\n>\nGT\n"))
    reader.read_entry()
    with pytest.raises(FastaFormatError, match=r"entry 2 of FASTA input"):
        reader.read_entry()


def test_output_types():
    assert read_fasta(io.BytesIO(SAMPLE), bytes)[0] == ("seq1", b"ACGTACGT")
    entries = read_fasta(io.BytesIO(SAMPLE), bytearray)
    assert entries[1] == ("seq2", bytearray(b"TTTT"))
    assert read_fasta(io.BytesIO(SAMPLE), list)[1] == ("seq2", [84, 84, 84, 84])


def test_returned_sequences_do_not_alias_reader_buffers():
    reader = FastaReader(io.BytesIO(SAMPLE), out_type=bytearray)
    _, first = reader.read_entry()
    first[:] = b"XXXX"
    _, second = reader.read_entry()
    assert second == bytearray(b"TTTT")
    reader.rewind()
    assert reader.read_entry() == ("seq1", bytearray(b"ACGTACGT"))


def test_invalid_out_type():
    with pytest.raises(TypeError):
        FastaReader(io.BytesIO(SAMPLE), out_type=42)


def test_text_stream_is_rejected():
    with pytest.raises(TypeError):
        FastaReader(io.StringIO(">a\nAC\n"))


def test_path_input_is_owned_and_closed(tmp_path: Path):
    path = tmp_path / "in.fasta"
    path.write_bytes(SAMPLE)
    with FastaReader(path) as reader:
        stream = reader._stream
        assert reader.read_all() == [("seq1", "ACGTACGT"), ("seq2", "TTTT")]
    assert stream.closed


def test_path_input_closed_when_body_raises(tmp_path: Path):
    path = tmp_path / "in.fasta"
    path.write_bytes(SAMPLE)
    with pytest.raises(RuntimeError):
        with FastaReader(path) as reader:
            stream = reader._stream
            raise RuntimeError("boom")
    assert stream.closed


def test_caller_stream_is_left_open():
    stream = io.BytesIO(SAMPLE)
    with FastaReader(stream) as reader:
        reader.read_all()
    assert not stream.closed


@pytest.mark.parametrize("name", ["in.fasta.gz", "in.fasta"])
def test_gzip_input_is_detected(tmp_path: Path, name: str):
    path = tmp_path / name
    path.write_bytes(gzip.compress(SAMPLE))
    assert read_fasta(path) == [("seq1", "ACGTACGT"), ("seq2", "TTTT")]


def test_gzip_input_rewinds(tmp_path: Path):
    path = tmp_path / "in.fa.gz"
    path.write_bytes(gzip.compress(SAMPLE))
    with FastaReader(path, buffer_size=3) as reader:
        assert list(reader) == list(reader)


def test_repr_mentions_state():
    reader = FastaReader(io.BytesIO(SAMPLE), out_type=bytes)
    reader.read_all()
    text = repr(reader)
    assert "out_type=bytes" in text
    assert "num_parsed=2" in text
    assert "eof=True" in text


def test_non_ascii_sequence_raises_for_text_output():
    with pytest.raises(FastaFormatError, match="non-ASCII sequence data"):
        read_fasta(io.BytesIO(b">a\nAC\xe9\n"))
    assert read_fasta(io.BytesIO(b">a\nAC\xe9\n"), bytes) == [("a", b"AC\xe9")]


def test_invalid_buffer_size_closes_owned_file(tmp_path: Path, monkeypatch):
    path = tmp_path / "in.fasta"
    path.write_bytes(SAMPLE)
    opened = []

    def recording_open_input(source):
        stream = open_input(source)
        opened.append(stream)
        return stream

    monkeypatch.setattr("fasta_io.reader.open_input", recording_open_input)
    with pytest.raises(ValueError, match="buffer_size"):
        FastaReader(path, buffer_size=0)
    assert len(opened) == 1
    assert opened[0].closed


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="named pipes not available")
@pytest.mark.parametrize("entries", [1, 20000])
def test_fifo_path_is_read_once(tmp_path: Path, entries: int):
    fifo = tmp_path / "in.fifo"
    os.mkfifo(fifo)

    def feed() -> None:
        with open(fifo, "wb") as handle:
            handle.write(b">seq1\nACGT\n" * entries)

    writer = threading.Thread(target=feed, daemon=True)
    writer.start()
    records = read_fasta(fifo)
    writer.join(timeout=10)
    assert len(records) == entries
    assert records[0] == ("seq1", "ACGT")


def test_gzip_input_is_closed_with_reader(tmp_path: Path):
    path = tmp_path / "in.fa.gz"
    path.write_bytes(gzip.compress(SAMPLE))
    with FastaReader(path) as reader:
        stream = reader._stream
        reader.read_all()
    assert stream.closed
    assert stream._handle.closed
