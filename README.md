# aecodec

Lossless compression of integer sample data with Adaptive Entropy Coding,
following the CCSDS 121.0-B-3 recommendation: adaptive Rice coding with
optional unit-delay preprocessing, zero-block runs, the second extension
option and uncompressed blocks. Samples of 1 to 32 bits are supported,
signed or unsigned, stored LSB or MSB first in 1, 2, 3 or 4 bytes.

## Installation

```
pip install .
```

## Library use

Describe your samples with `Params` (from `aecodec.options`), then encode and
decode whole buffers:

```python
from aecodec.options import Params, Flags
from aecodec.encoder import encode
from aecodec.decoder import decode

params = Params(bits_per_sample=16, block_size=16, rsi=128,
                flags=Flags.DATA_PREPROCESS | Flags.DATA_MSB)
raw = bytes(range(256)) * 8
packed = encode(raw, params)
assert decode(packed, params, len(raw)) == raw
```

`Params` holds `bits_per_sample` (default 8), `block_size` (default 8),
`rsi` — the reference sample interval in blocks (default 2) — and `flags`
(default `Flags.DATA_PREPROCESS`). The `Flags` values are `DATA_SIGNED`,
`DATA_3BYTE`, `DATA_MSB`, `DATA_PREPROCESS`, `RESTRICTED`, `PAD_RSI` and
`NOT_ENFORCE`. For encoding, the block size must be 8, 16, 32 or 64 unless
`NOT_ENFORCE` is set, in which case any positive even size is accepted; the
RSI may be at most 4096 blocks. `RESTRICTED` needs at most 4 bits per sample.

The third argument of `decode` limits the output to that many bytes. A
stream whose last RSI was incomplete is padded by the encoder, so pass the
original length to get exactly the input back.

### Streaming

`Encoder(params)` takes input piece by piece through
`Encoder.encode(data, flush=False)`, which returns the bytes completed so far;
`Encoder.finish()` (or a call with `flush=True`) pads the last partial RSI,
fills the last byte with zero bits and closes the stream.

`Decoder(params)` takes compressed input in pieces of any size through
`Decoder.decode(data, max_output=None)` and returns the whole samples decoded
so far. `Decoder.seek(offset)` makes it continue at an absolute bit offset of
the input.

### Random access

Reference sample intervals can be located by their bit offsets in the
compressed stream:

```python
from aecodec.encoder import encode_with_offsets
from aecodec.decoder import decode_range

packed, offsets = encode_with_offsets(raw, params)
chunk = decode_range(packed, params, offsets, pos=100, size=50)
assert chunk == raw[100:150]
```

`decode_with_offsets` returns the same offsets while decoding, and
`decode_at(data, params, offset, max_output)` decodes from any bit offset.
On the streaming classes, `enable_offsets()` starts recording and
`offsets()` returns the list.

### Errors

Failures raise subclasses of `AecError`: `ConfigError` (also a `ValueError`)
for invalid parameters, `DataError` for corrupt input or a range that cannot
be decoded, `StreamError` when an encoder is used after it was flushed,
`OutputBufferError` when an output limit is not a whole number of samples or a
seek goes past the input, and `OffsetsError` when offsets are requested
without being enabled, or enabled twice.

## Command line

```
aecodec [OPTION]... SOURCE DEST
```

Encodes SOURCE into DEST, or decodes it with `-d`. Options:

- `-3` 24 bit samples are stored in 3 bytes
- `-N` disable pre/post processing
- `-b size` internal buffer size in samples
- `-d` decode instead of encode
- `-j samples` block size in samples (default 8)
- `-m` samples are MSB first (default LSB)
- `-n bits` bits per sample (default 8)
- `-p` pad RSI to byte boundary
- `-r blocks` reference sample interval in blocks (default 2)
- `-s` samples are signed
- `-t` use the restricted set of code options

The exit status is 0 on success, 99 when a file cannot be opened and 1 for
invalid parameters or corrupt data.

Example:

```
aecodec -n 16 -j 32 -r 64 -m data.raw data.rz
aecodec -d -n 16 -j 32 -r 64 -m data.rz data.out
```

## What it does not do

There is no szip-style buffer-to-buffer interface (no scanline padding or
byte interleaving of 32- and 64-bit pixels); only the Adaptive Entropy Coding
stream format itself is handled.