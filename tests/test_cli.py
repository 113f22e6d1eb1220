import pytest

from aecodec.accessors import write_samples
from aecodec.cli import CHUNK, build_parser, main, run
from aecodec.encoder import encode
from aecodec.options import Flags, Params


def _samples_16():
    return write_samples([(i * 37) % 5000 for i in range(160)], 2, True)


def test_parser_defaults():
    args = build_parser().parse_args(["in.dat", "out.rz"])
    assert (args.bits_per_sample, args.block_size, args.rsi) == (8, 8, 2)
    assert args.chunk == 10485760 == CHUNK
    assert args.decode is False
    assert (args.source, args.dest) == ("in.dat", "out.rz")


def test_parser_attached_and_separate_values():
    args = build_parser().parse_args(["-n16", "-j", "32", "-r4", "-3", "-d", "a", "b"])
    assert args.bits_per_sample == 16
    assert args.block_size == 32
    assert args.rsi == 4
    assert args.three_byte is True
    assert args.decode is True


def test_parser_missing_value_is_usage_error():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["-j", "-m", "a", "b"])


def test_parser_missing_files_is_usage_error():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["-m"])


def test_encode_matches_library(tmp_path):
    raw = _samples_16()
    src = tmp_path / "in.dat"
    dst = tmp_path / "out.rz"
    src.write_bytes(raw)
    assert main(["-n", "16", "-m", str(src), str(dst)]) == 0
    expected = encode(raw, Params(16, 8, 2, Flags.DATA_PREPROCESS | Flags.DATA_MSB))
    assert dst.read_bytes() == expected


def test_round_trip_through_main(tmp_path):
    raw = _samples_16()
    src = tmp_path / "in.dat"
    enc = tmp_path / "out.rz"
    dec = tmp_path / "back.dat"
    src.write_bytes(raw)
    assert main(["-n16", "-m", str(src), str(enc)]) == 0
    assert main(["-d", "-n16", "-m", str(enc), str(dec)]) == 0
    assert dec.read_bytes() == raw


def test_small_chunks_give_same_output(tmp_path):
    raw = _samples_16()
    src = tmp_path / "in.dat"
    whole = tmp_path / "whole.rz"
    pieces = tmp_path / "pieces.rz"
    src.write_bytes(raw)
    params = Params(16, 8, 2, Flags.DATA_PREPROCESS)
    written = run(src, whole, params)
    assert written == len(whole.read_bytes())
    run(src, pieces, params, chunk=3)
    assert pieces.read_bytes() == whole.read_bytes()


def test_decode_in_small_chunks(tmp_path):
    raw = _samples_16()
    params = Params(16, 8, 2, Flags.DATA_PREPROCESS)
    enc = tmp_path / "in.rz"
    dec = tmp_path / "out.dat"
    enc.write_bytes(encode(raw, params))
    run(enc, dec, params, decode=True, chunk=1)
    assert dec.read_bytes() == raw


def test_missing_input_file(tmp_path, capsys):
    status = main([str(tmp_path / "absent.dat"), str(tmp_path / "out.rz")])
    assert status == 99
    assert "cannot open" in capsys.readouterr().err


def test_invalid_parameters(tmp_path, capsys):
    src = tmp_path / "in.dat"
    src.write_bytes(bytes(16))
    status = main(["-t", "-n", "8", str(src), str(tmp_path / "out.rz")])
    assert status == 1
    assert "initialization failed" in capsys.readouterr().err


def test_run_rejects_non_positive_chunk(tmp_path):
    src = tmp_path / "in.dat"
    src.write_bytes(bytes(16))
    with pytest.raises(ValueError):
        run(src, tmp_path / "out.rz", Params(), chunk=0)