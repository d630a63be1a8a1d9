import io

from drillbook.trade import Trade
from drillbook.trade_reader import TradeReader


def _stream(*trades):
    return io.BytesIO(b"".join(trade.pack() for trade in trades))


A = Trade(1, 2, 0, 7)
B = Trade(2, 3, 6, 9)
C = Trade(9, 1, 9, 11)


def test_small():
    reader = TradeReader(_stream(A, B, C))
    assert reader.read_next() == A
    assert reader.read_next() == B
    assert reader.read_next() == C
    assert reader.read_next() is None


def test_read_all():
    assert TradeReader(_stream(A, B, C)).read_all() == [A, B, C]


def test_read_all_empty():
    assert TradeReader(io.BytesIO()).read_all() == []


def test_partial_record_is_ignored():
    stream = io.BytesIO(A.pack() + B.pack()[:10])
    reader = TradeReader(stream)
    assert reader.read_next() == A
    assert reader.read_next() is None


def test_iteration():
    assert list(TradeReader(_stream(C, A))) == [C, A]


def test_read_all_after_read_next():
    reader = TradeReader(_stream(A, B, C))
    reader.read_next()
    assert reader.read_all() == [B, C]