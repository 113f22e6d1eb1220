"""Adaptive Entropy Coding (CCSDS 121.0-B-3) encoder, decoder and command line tool."""

__version__ = "1.1.3"
__all__ = [
    "options",
    "accessors",
    "bitwriter",
    "preprocess",
    "encoder",
    "bitreader",
    "postprocess",
    "decoder",
    "cli",
]