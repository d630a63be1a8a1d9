"""Small systems building blocks: PNG decoding, trade indexing, pcapng order-book replay, a thread pool, parallel reduce, tic-tac-toe players and uint32 matrices."""

__version__ = "0.1.0"