# drillbook

A set of small, self-contained building blocks, each in its own module:

| Module | What it does |
| --- | --- |
| `drillbook.png_decoder` | Decodes PNG files (colour types 0, 2, 3, 4 and 6, Adam7 interlacing) into an `Image`; raises `PngError` on bad input |
| `drillbook.image` | `Image`, a grid of `RGB` pixels indexed as `image[row, col]` |
| `drillbook.crc`, `drillbook.inflater` | CRC-32 checks and bounded zlib inflation used by the decoder |
| `drillbook.trade`, `drillbook.trade_reader`, `drillbook.trade_index` | 28-byte binary trade records, a reader for them, and a prefix-sum index for turnover queries |
| `drillbook.pcapng` | Extracts the 40-byte `Message` at the end of each packet of a pcapng capture; describes Ethernet and IPv4 headers as text |
| `drillbook.orderbook` | Replays messages into sell and buy books (`SortedDict`); the `drillbook-orderbook` command |
| `drillbook.circular_orderbook` | `CircularOrderBook`, price levels in a fixed ring of 100 000 slots |
| `drillbook.thread_pool` | `ThreadPool`, a fixed set of worker threads usable as a context manager |
| `drillbook.reduce` | `reduce`, a chunked fold over several threads, plus `summator`, `multiplier` and `gen_test` |
| `drillbook.static_map` | `StaticMap`, a read-only sorted map with binary-search `find` |
| `drillbook.strategy`, `drillbook.my_strategy`, `drillbook.checker` | The tic-tac-toe `Strategy` interface, a rule-based player and a referee returning an `Outcome` |
| `drillbook.sse_search` | `sse_search`, every occurrence of an 8-byte little-endian word in a byte string |
| `drillbook.matrix`, `drillbook.shm_matrix` | Square `uint32` matrices (arithmetic wraps modulo 2**32) and a shared-memory matrix-power service |

## Installation

```
pip install drillbook
```

With the test tools:

```
pip install "drillbook[test]"
```

## Examples

Decode a PNG from a path or a binary stream:

```python
from drillbook.png_decoder import read_png

image = read_png("picture.png")
print(image.width, image.height)
print(image[0, 0])          # "r g b a" of the top-left pixel
```

Read trades and query turnover within a time range:

```python
from drillbook.trade_index import TradeIndex
from drillbook.trade_reader import TradeReader

with open("trades.data", "rb") as stream:
    trades = TradeReader(stream).read_all()

index = TradeIndex(trades)
print(index.total_volume(1_000, 2_000))   # sum of price * volume for 1000 <= ts < 2000
```

`TradeIndex` takes running totals in the order it is given the trades, so
pass them in timestamp order.

Parse messages out of a pcapng capture:

```python
from drillbook.pcapng import parse

with open("capture.pcapng", "rb") as f:
    messages = parse(f.read())
```

A static map:

```python
from drillbook.static_map import StaticMap

m = StaticMap([("b", 1), ("a", 2)])
m.find("a")   # 2
m.find("c")   # None
```

A parallel reduce:

```python
from drillbook.reduce import reduce, summator

reduce([1, 2, 3], 0, summator)   # 6
```

Find a word in bytes:

```python
from drillbook.sse_search import sse_search

found = []
sse_search(data, 0x1A2B3C4DD4C3B2A1, lambda pos: found.append(pos) or True)
```

The search stops after a callback that returns a false value.

Play two strategies against each other (the first plays X):

```python
from drillbook.checker import Checker
from drillbook.my_strategy import create_strategy

outcome = Checker(create_strategy(), create_strategy()).check_winner()
print(outcome)   # one of Outcome.X_WINS, O_WINS, DRAW, INVALID_MOVE
```

Iterating a `CircularOrderBook` cycles over its occupied slots without end, so
take only as many levels as you need (for example with `itertools.islice`).

## Command-line tools

Replay one or more captures, plain or `.lz4`-compressed, into sorted order
books on `-t` worker threads. For each file it prints the thread, the file,
the largest combined value of the twentieth level on both sides and the
elapsed time:

```
drillbook-orderbook -t 4 capture1.pcapng.lz4 capture2.pcapng
```

A `.lz4` file must hold exactly one LZ4 frame; it is decompressed next to the
input, read and removed again.

Serve matrix-exponentiation requests through a named shared-memory segment
(created with 64 MiB if it does not exist):

```
drillbook-shm-matrix my_segment
```

The segment starts with three native ints: status, exponent and matrix size.
The input matrix follows at byte 12 as unsigned 32-bit values, and the result
is written right after it. A client sets the status to `0` to make a request;
the service sets it to `1` while working and `2` when done. A status of `-1`
stops the service. The command exits with status 1 when no segment name is
given or the segment cannot be used.

## What it does not do

The PNG decoder only reads; there is no PNG writer. Sixteen-bit samples are
not scaled down to eight bits; only their low byte is kept. The shared-memory
service handles one segment in a single process and has no client helper:
clients write the header and matrix themselves.

## Running the tests

```
pytest
```