"""Order-book replay over captured market data."""

from __future__ import annotations

import argparse
import functools
import operator
import os
import sys
import threading
import time
from collections.abc import Sequence
from pathlib import Path
from typing import Union

import lz4.frame
from sortedcontainers import SortedDict

from drillbook.pcapng import Message, parse
from drillbook.thread_pool import ThreadPool

IN_CHUNK_SIZE = 16 * 1024
BOOK_DEPTH = 19
_META_FLAG = 1 << 63
_VOLUME_SCALE = 100_000_000.0

PathType = Union[str, "os.PathLike[str]"]


class DecompressError(RuntimeError):
    """Raised when an LZ4 file cannot be decompressed."""


def decompress_file(input_path: PathType, output_path: PathType) -> None:
    """Decompress a file holding exactly one LZ4 frame into ``output_path``."""
    decompressor = lz4.frame.LZ4FrameDecompressor()
    try:
        with open(input_path, "rb") as source, open(output_path, "wb") as target:
            while True:
                chunk = source.read(IN_CHUNK_SIZE)
                if not chunk:
                    raise DecompressError(
                        "Decompress: not enough input or error reading file"
                    )
                try:
                    target.write(decompressor.decompress(chunk))
                except (RuntimeError, ValueError) as exc:
                    raise DecompressError(f"Decompression error: {exc}") from exc
                if decompressor.eof:
                    if decompressor.unused_data or source.read(1):
                        raise DecompressError(
                            "Decompress: Trailing data left in file after frame"
                        )
                    return
    except OSError as exc:
        raise DecompressError(f"Failed to open or read file: {exc}") from exc


def _new_books() -> tuple[SortedDict, SortedDict]:
    """A sell book ordered by rising price and a buy book by falling price."""
    return SortedDict(), SortedDict(operator.neg)


def run_test(
    sell_book: SortedDict,
    buy_book: SortedDict,
    messages: Sequence[Message],
    test_name: str,
    file_name: str,
) -> float:
    """Replay ``messages`` into the two books and return the largest depth value.

    At the end of each update the value of the twentieth level on both sides
    (price times volume) is taken; updates are only measured once both books
    hold at least twenty levels.
    """
    result = 0.0
    scale: int | None = None
    start = time.perf_counter()
    for message in messages:
        if message.ts & _META_FLAG:
            scale = 10 ** (message.ts & 0x0F)
            continue
        if scale is None:
            raise ValueError("price message before the price scale was set")

        price = message.price / scale
        volume = message.volume / _VOLUME_SCALE
        book = sell_book if message.conf & 2 else buy_book
        if volume != 0:
            book[price] = volume
        else:
            book.pop(price, None)

        if message.conf & 1:
            continue
        if len(sell_book) > BOOK_DEPTH and len(buy_book) > BOOK_DEPTH:
            sell_price, sell_volume = sell_book.peekitem(BOOK_DEPTH)
            buy_price, buy_volume = buy_book.peekitem(BOOK_DEPTH)
            result = max(result, sell_price * sell_volume + buy_price * buy_volume)

    elapsed = int((time.perf_counter() - start) * 1_000_000)
    print(
        f"Thread ID: {threading.get_ident()} testType: {test_name} file: {file_name}"
        f" Result: {result} Elapsed time: {elapsed} microseconds"
    )
    return result


def load_messages(file_name: PathType) -> list[Message]:
    """Read the messages of a pcapng capture, decompressing ``.lz4`` files first."""
    path = os.fspath(file_name)
    if len(path) > 4 and path.endswith(".lz4"):
        output = path[:-4]
        decompress_file(path, output)
        try:
            data = Path(output).read_bytes()
        finally:
            try:
                os.remove(output)
            except OSError:
                print(f"Error: Can't remove file: {output}", file=sys.stderr)
    else:
        data = Path(path).read_bytes()
    return parse(data)


def process_file(file_name: PathType) -> float | None:
    """Replay one capture file; returns the result, or ``None`` if it can't be read."""
    try:
        messages = load_messages(file_name)
    except DecompressError:
        print(f"Error: Can't decompress: {os.fspath(file_name)}", file=sys.stderr)
        return None
    sell_book, buy_book = _new_books()
    return run_test(sell_book, buy_book, messages, "SortedDict", os.fspath(file_name))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Replay order books from captures.")
    parser.add_argument("-t", type=int, default=1, dest="threads", help="Number")
    parser.add_argument("files", nargs="*")
    args = parser.parse_args(argv)
    with ThreadPool(args.threads) as pool:
        for file_name in args.files:
            pool.enqueue(functools.partial(process_file, file_name))
    return 0


if __name__ == "__main__":
    sys.exit(main())