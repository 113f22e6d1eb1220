import pytest
from hypothesis import given
from hypothesis import strategies as st

from aecodec.bitreader import BitReader, IncompleteInput
from aecodec.bitwriter import BitWriter
from aecodec.options import AecError, OutputBufferError


def test_get_reads_msb_first():
    reader = BitReader(b"\xa5")
    assert reader.get(4) == 0xA
    assert reader.get(4) == 0x5
    assert reader.bits_left() == 0


def test_get_zero_bits():
    reader = BitReader(b"\xff")
    assert reader.get(0) == 0
    assert reader.bit_position() == 0


def test_get_negative_raises():
    with pytest.raises(ValueError):
        BitReader(b"\x00").get(-1)


def test_get_incomplete_keeps_position():
    reader = BitReader(b"\xff")
    reader.get(3)
    with pytest.raises(IncompleteInput):
        reader.get(6)
    assert reader.bit_position() == 3
    assert reader.get(5) == 0x1F


def test_incomplete_is_codec_error():
    with pytest.raises(AecError):
        BitReader(b"").get(1)


def test_get_fs_incomplete_keeps_position():
    reader = BitReader(b"\x00\x00")
    with pytest.raises(IncompleteInput):
        reader.get_fs()
    assert reader.bit_position() == 0
    reader.feed(b"\x80")
    assert reader.get_fs() == 16
    assert reader.bit_position() == 17


def test_get_fs_empty_raises():
    with pytest.raises(IncompleteInput):
        BitReader().get_fs()


def test_feed_keeps_absolute_position():
    writer = BitWriter()
    for value in range(20):
        writer.emit(value, 7)
    data = writer.getvalue()
    reader = BitReader(data[:3])
    got = [reader.get(7), reader.get(7), reader.get(7)]
    reader.feed(data[3:])
    got += [reader.get(7) for _ in range(17)]
    assert got == list(range(20))
    assert reader.bit_position() == 140


def test_seek_and_read():
    writer = BitWriter()
    writer.emit(0, 13)
    writer.emit(0x1234, 16)
    reader = BitReader(writer.getvalue())
    reader.seek(13)
    assert reader.get(16) == 0x1234
    assert reader.bit_position() == 29


def test_seek_to_end_allowed_beyond_raises():
    reader = BitReader(b"\x00\x00")
    reader.seek(16)
    assert reader.bits_left() == 0
    with pytest.raises(OutputBufferError):
        reader.seek(17)


def test_seek_before_discarded_raises():
    reader = BitReader(b"\x00\x00")
    reader.get(16)
    reader.feed(b"\x00")
    with pytest.raises(ValueError):
        reader.seek(0)


def test_align():
    reader = BitReader(b"\x00\xff")
    reader.get(3)
    reader.align()
    assert reader.bit_position() == 8
    reader.align()
    assert reader.bit_position() == 8
    assert reader.get(8) == 0xFF


@given(st.lists(st.tuples(st.integers(1, 32), st.integers(0, 2**32 - 1)), max_size=50))
def test_round_trip_with_writer(fields):
    writer = BitWriter()
    for bits, value in fields:
        writer.emit(value, bits)
    reader = BitReader(writer.getvalue())
    for bits, value in fields:
        assert reader.get(bits) == value & ((1 << bits) - 1)
    assert reader.bit_position() == sum(bits for bits, _ in fields)


@given(st.lists(st.integers(0, 200), max_size=40))
def test_fs_round_trip_with_writer(sequences):
    writer = BitWriter()
    for fs in sequences:
        writer.emit_fs(fs)
    reader = BitReader(writer.getvalue())
    assert [reader.get_fs() for _ in sequences] == sequences
    assert reader.bits_left() < 8