"""Extraction of market-data messages from pcapng captures."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from dataclasses import dataclass
from typing import ClassVar

PACKET_BLOCK_TYPE = 0x00000006

_BLOCK_HEAD = struct.Struct("<ii")
_PACKET_HEAD = struct.Struct("<iiiiiii")
_PACKET_DATA_OFFSET = _PACKET_HEAD.size


@dataclass(frozen=True)
class Message:
    """An order-book update carried at the end of each captured packet."""

    SIZE: ClassVar[int] = 40
    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<QqQQB7x")

    ts: int
    id: int
    price: int
    volume: int
    conf: int

    @classmethod
    def unpack(cls, data: bytes) -> Message:
        """Decode a message from exactly 40 bytes."""
        if len(data) != cls.SIZE:
            raise ValueError(f"message must be {cls.SIZE} bytes, got {len(data)}")
        return cls(*cls._FORMAT.unpack(data))


@dataclass(frozen=True)
class PacketBlock:
    """An Enhanced Packet Block of a pcapng file."""

    block_type: int
    block_length: int
    interface_id: int
    timestamp_upper: int
    timestamp_lower: int
    captured_packet_length: int
    original_packet_length: int
    packet_data: bytes
    options: bytes
    block_length_duplicate: int


def _read_packet_block(block: bytes) -> PacketBlock:
    if len(block) < _PACKET_DATA_OFFSET + 4:
        raise ValueError("packet block too short")
    fields = _PACKET_HEAD.unpack_from(block)
    captured = fields[5]
    data_end = _PACKET_DATA_OFFSET + captured
    options_offset = (data_end + 3) // 4 * 4
    if captured < 0 or options_offset + 4 > len(block):
        raise ValueError("packet data overruns its block")
    (duplicate,) = struct.unpack_from("<i", block, len(block) - 4)
    return PacketBlock(
        *fields,
        packet_data=bytes(block[_PACKET_DATA_OFFSET:data_end]),
        options=bytes(block[options_offset:]),
        block_length_duplicate=duplicate,
    )


def parse_blocks(buf: bytes) -> Iterator[PacketBlock]:
    """Yield the packet blocks of a pcapng capture, skipping all other blocks."""
    view = memoryview(buf)
    offset = 0
    while offset < len(view):
        if offset + _BLOCK_HEAD.size > len(view):
            raise ValueError(f"truncated block header at offset {offset}")
        block_type, block_length = _BLOCK_HEAD.unpack_from(view, offset)
        if block_length <= 0 or offset + block_length > len(view):
            raise ValueError(f"invalid block length {block_length} at offset {offset}")
        if block_type == PACKET_BLOCK_TYPE:
            yield _read_packet_block(bytes(view[offset : offset + block_length]))
        offset += block_length


def parse(buf: bytes) -> list[Message]:
    """Return the message at the end of every captured packet, in capture order."""
    messages = []
    for block in parse_blocks(buf):
        if len(block.packet_data) < Message.SIZE:
            raise ValueError("captured packet shorter than a message")
        messages.append(Message.unpack(block.packet_data[-Message.SIZE :]))
    return messages


def describe_ethernet_frame(data: bytes) -> str:
    """Describe the header of an Ethernet frame as text."""
    if len(data) < 14:
        raise ValueError("Ethernet frame is too short")
    destination = "".join(f"{byte:02x}:" for byte in data[0:6])
    source = "".join(f"{byte:02x}:" for byte in data[6:12])
    ether_type = (data[12] << 8) | data[13]
    return (
        "Ethernet Frame:\n"
        f"  Destination MAC Address: {destination}\n"
        f"  Source MAC Address: {source}\n"
        f"  EtherType: {ether_type:04x}\n"
    )


def describe_ipv4_packet(data: bytes) -> str:
    """Describe the header of an IPv4 packet as text.

    Every field after the differentiated services field up to the checksum
    is shown in hexadecimal.
    """
    if len(data) < 20:
        raise ValueError("IPv4 packet is too short")
    version, ihl = data[0] >> 4, data[0] & 0x0F
    total_length = (data[2] << 8) | data[3]
    identification = (data[4] << 8) | data[5]
    flags_fragment = (data[6] << 8) | data[7]
    checksum = (data[10] << 8) | data[11]
    source = "".join(f"{byte}." for byte in data[12:16])
    destination = "".join(f"{byte}." for byte in data[16:20])
    return (
        "IPv4 Packet:\n"
        f"  Version: {version}\n"
        f"  IHL: {ihl} words\n"
        f"  Differentiated Services Field: {data[1]:02x}\n"
        f"  Total Length: {total_length:x} bytes\n"
        f"  Identification: {identification:x}\n"
        f"  Flags: {(flags_fragment >> 13) & 0x07:x}\n"
        f"  Fragment Offset: {flags_fragment & 0x1FFF:x}\n"
        f"  Time to Live: {data[8]:x}\n"
        f"  Protocol: {data[9]:x}\n"
        f"  Header Checksum: {checksum:04x}\n"
        f"  Source IP Address: {source}\n"
        f"  Destination IP Address: {destination}\n"
    )