"""Command line front end: encode or decode files."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Sequence

from .decoder import Decoder
from .encoder import Encoder
from .options import AecError, ConfigError, Flags, Params

CHUNK = 10485760


def build_parser() -> argparse.ArgumentParser:
    """Parser for the command line options."""
    parser = argparse.ArgumentParser(
        prog="aecodec",
        description="Encode or decode files with Adaptive Entropy Coding.",
    )
    parser.add_argument(
        "-3", dest="three_byte", action="store_true",
        help="24 bit samples are stored in 3 bytes",
    )
    parser.add_argument(
        "-N", dest="no_preprocess", action="store_true",
        help="disable pre/post processing",
    )
    parser.add_argument(
        "-b", dest="chunk", type=int, default=CHUNK, metavar="size",
        help="internal buffer size in samples",
    )
    parser.add_argument(
        "-d", dest="decode", action="store_true",
        help="decode SOURCE; encode if not given",
    )
    parser.add_argument(
        "-j", dest="block_size", type=int, default=8, metavar="samples",
        help="block size in samples",
    )
    parser.add_argument(
        "-m", dest="msb", action="store_true",
        help="samples are MSB first; default is LSB",
    )
    parser.add_argument(
        "-n", dest="bits_per_sample", type=int, default=8, metavar="bits",
        help="bits per sample",
    )
    parser.add_argument(
        "-p", dest="pad_rsi", action="store_true",
        help="pad RSI to byte boundary",
    )
    parser.add_argument(
        "-r", dest="rsi", type=int, default=2, metavar="blocks",
        help="reference sample interval in blocks",
    )
    parser.add_argument(
        "-s", dest="signed", action="store_true",
        help="samples are signed; default is unsigned",
    )
    parser.add_argument(
        "-t", dest="restricted", action="store_true",
        help="use restricted set of code options",
    )
    parser.add_argument("source", help="input file")
    parser.add_argument("dest", help="output file")
    return parser


def _params_from_args(args: argparse.Namespace) -> Params:
    flags = Flags.NONE if args.no_preprocess else Flags.DATA_PREPROCESS
    for enabled, flag in (
        (args.three_byte, Flags.DATA_3BYTE),
        (args.msb, Flags.DATA_MSB),
        (args.pad_rsi, Flags.PAD_RSI),
        (args.signed, Flags.DATA_SIGNED),
        (args.restricted, Flags.RESTRICTED),
    ):
        if enabled:
            flags |= flag
    return Params(
        bits_per_sample=args.bits_per_sample,
        block_size=args.block_size,
        rsi=args.rsi,
        flags=flags,
    )


def run(
    source: str | os.PathLike,
    dest: str | os.PathLike,
    params: Params,
    decode: bool = False,
    chunk: int = CHUNK,
) -> int:
    """Encode or decode ``source`` into ``dest``; return the bytes written."""
    if chunk <= 0:
        raise ValueError(f"buffer size must be positive, got {chunk}")
    chunk *= params.bytes_per_sample
    written = 0
    with open(source, "rb") as infp, open(dest, "wb") as outfp:
        if decode:
            decoder = Decoder(params)
            while piece := infp.read(chunk):
                out = decoder.decode(piece)
                outfp.write(out)
                written += len(out)
        else:
            encoder = Encoder(params)
            while piece := infp.read(chunk):
                out = encoder.encode(piece)
                outfp.write(out)
                written += len(out)
            out = encoder.finish()
            outfp.write(out)
            written += len(out)
    return written


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command; return the exit status."""
    args = build_parser().parse_args(argv)
    params = _params_from_args(args)
    try:
        run(args.source, args.dest, params, args.decode, args.chunk)
    except OSError as exc:
        print(f"ERROR: cannot open file {exc.filename}", file=sys.stderr)
        return 99
    except ConfigError as exc:
        print(f"ERROR: initialization failed ({exc})", file=sys.stderr)
        return 1
    except AecError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())