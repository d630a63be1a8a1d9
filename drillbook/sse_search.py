"""Search for every occurrence of an 8-byte word in a byte string."""

from __future__ import annotations

from collections.abc import Callable

_WORD = 8
_WINDOW = 16


def sse_search(data: bytes, word: int, callback: Callable[[int], object]) -> int:
    """Report each occurrence of ``word`` (8 bytes, little-endian) in ``data``.

    ``callback`` receives each position in increasing order; the search stops
    after a call whose result is false. Returns the number of occurrences
    reported. The data is scanned in 16-byte windows that advance 8 bytes at a
    time, the last one padded with zero bytes, so a word ending in zero bytes
    can also be reported where it would reach past the end of the data.
    """
    if not 0 <= word < 1 << 64:
        raise ValueError(f"word must fit in 64 unsigned bits, got {word}")
    buf = bytes(data)
    pattern = word.to_bytes(_WORD, "little")
    last_start = len(buf) - _WORD
    occurrences = 0
    for block in range(0, last_start + 1, _WORD):
        window = buf[block : block + _WINDOW].ljust(_WINDOW, b"\0")
        for index in range(_WORD):
            if index > last_start:
                break
            if window[index : index + _WORD] == pattern:
                occurrences += 1
                if not callback(block + index):
                    return occurrences
    return occurrences