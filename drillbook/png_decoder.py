"""PNG decoding into :class:`~drillbook.image.Image`."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from os import PathLike
from typing import BinaryIO, ClassVar, NamedTuple, Union

from drillbook.crc import check_crc
from drillbook.image import RGB, Image
from drillbook.inflater import InflateError, inflate

PNG_SIGNATURE = bytes((137, 80, 78, 71, 13, 10, 26, 10))

Source = Union[str, bytes, "PathLike[str]", BinaryIO]


class PngError(ValueError):
    """Raised when a PNG file is malformed or unsupported."""


class PngFilter(IntEnum):
    NONE = 0
    SUB = 1
    UP = 2
    AVERAGE = 3
    PAETH = 4


class _Pass(NamedTuple):
    x_offset: int
    y_offset: int
    col_step: int
    row_step: int


_ADAM7 = (
    _Pass(0, 0, 8, 8),
    _Pass(4, 0, 8, 8),
    _Pass(0, 4, 4, 8),
    _Pass(2, 0, 4, 4),
    _Pass(0, 2, 2, 4),
    _Pass(1, 0, 2, 2),
    _Pass(0, 1, 1, 2),
)

_CHANNELS = {0: 1, 3: 1, 2: 3, 4: 2, 6: 4}


@dataclass(frozen=True)
class IhdrHeader:
    """The fields of an IHDR chunk."""

    SIZE: ClassVar[int] = 13
    _FORMAT: ClassVar[struct.Struct] = struct.Struct(">iiBBBBB")

    width: int
    height: int
    bit_depth: int
    color_type: int
    compression_method: int
    filter_method: int
    interlace_method: int

    @classmethod
    def unpack(cls, data: bytes) -> IhdrHeader:
        if len(data) != cls.SIZE:
            raise PngError("wrong IHDR chunk length")
        return cls(*cls._FORMAT.unpack(data))

    @property
    def interlaced(self) -> bool:
        return self.interlace_method != 0


@dataclass(frozen=True)
class PngChunk:
    """A chunk as stored in the file: type, payload and stored CRC."""

    chunk_type: str
    data: bytes
    crc: int

    def check_crc(self) -> bool:
        """Tell whether the stored CRC matches the type and payload."""
        return check_crc(self.chunk_type.encode("latin-1") + self.data, self.crc)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise PngError("Unexpected end of file")
    return data


def read_chunk(stream: BinaryIO) -> PngChunk:
    """Read one chunk from ``stream`` and verify its CRC."""
    (length,) = struct.unpack(">i", _read_exact(stream, 4))
    chunk_type = _read_exact(stream, 4).decode("latin-1")
    if length < 0:
        raise PngError(f"negative length in {chunk_type!r} chunk")
    if chunk_type == "IHDR" and length != IhdrHeader.SIZE:
        raise PngError("wrong IHDR chunk length")
    data = _read_exact(stream, length)
    (crc,) = struct.unpack(">I", _read_exact(stream, 4))
    chunk = PngChunk(chunk_type, data, crc)
    if not chunk.check_crc():
        raise PngError("CRC check failed")
    return chunk


def channels_per_pixel(color_type: int) -> int:
    """Number of samples per pixel for a PNG colour type."""
    try:
        return _CHANNELS[color_type]
    except KeyError:
        raise PngError("Unknown color type") from None


def pass_sizes(width: int, height: int) -> list[tuple[int, int]]:
    """Width and height in pixels of each of the seven Adam7 passes."""
    return [
        (
            (width - step.x_offset + step.col_step - 1) // step.col_step,
            (height - step.y_offset + step.row_step - 1) // step.row_step,
        )
        for step in _ADAM7
    ]


def _row_bytes(width: int, bit_depth: int, channels: int) -> int:
    return (width * bit_depth * channels + 7) // 8


def _paeth(left: int, up: int, up_left: int) -> int:
    estimate = left + up - up_left
    to_left = abs(estimate - left)
    to_up = abs(estimate - up)
    to_up_left = abs(estimate - up_left)
    if to_left <= to_up and to_left <= to_up_left:
        return left
    if to_up <= to_up_left:
        return up
    return up_left


def _unfilter(data: bytes, width: int, height: int, bit_depth: int, channels: int) -> bytearray:
    """Undo per-row filtering; returns the rows without their filter bytes."""
    stride = _row_bytes(width, bit_depth, channels)
    pixel_bytes = (bit_depth * channels + 7) // 8
    if len(data) < height * (stride + 1):
        raise PngError("image data too short")
    result = bytearray()
    previous = bytearray(stride)
    for y in range(height):
        start = y * (stride + 1)
        kind = data[start]
        row = bytearray(data[start + 1 : start + 1 + stride])
        if kind == PngFilter.SUB:
            for x in range(pixel_bytes, stride):
                row[x] = (row[x] + row[x - pixel_bytes]) & 0xFF
        elif kind == PngFilter.UP:
            for x in range(stride):
                row[x] = (row[x] + previous[x]) & 0xFF
        elif kind == PngFilter.AVERAGE:
            for x in range(stride):
                left = row[x - pixel_bytes] if x >= pixel_bytes else 0
                row[x] = (row[x] + (left + previous[x]) // 2) & 0xFF
        elif kind == PngFilter.PAETH:
            for x in range(stride):
                if x >= pixel_bytes:
                    left, up_left = row[x - pixel_bytes], previous[x - pixel_bytes]
                else:
                    left = up_left = 0
                row[x] = (row[x] + _paeth(left, previous[x], up_left)) & 0xFF
        result += row
        previous = row
    return result


def _unfilter_interlaced(
    data: bytes, width: int, height: int, bit_depth: int, channels: int
) -> bytearray:
    result = bytearray()
    position = 0
    for pass_width, pass_height in pass_sizes(width, height):
        if pass_width == 0 or pass_height == 0:
            continue
        size = pass_height * (_row_bytes(pass_width, bit_depth, channels) + 1)
        result += _unfilter(
            data[position : position + size], pass_width, pass_height, bit_depth, channels
        )
        position += size
    return result


def _sample(data: bytes, bit: int, depth: int) -> int:
    """Read ``depth`` bits starting at ``bit``, keeping the low eight bits."""
    if depth == 0:
        return 0
    offset = bit & 7
    if offset + depth <= 8:
        return (data[bit >> 3] >> (8 - offset - depth)) & ((1 << depth) - 1)
    value = 0
    for position in range(bit, bit + depth):
        value = ((value << 1) | ((data[position >> 3] >> (7 - (position & 7))) & 1)) & 0xFF
    return value


class PngDecoder:
    """Reads and unfilters the image data of a PNG file or binary stream."""

    def __init__(self, source: Source) -> None:
        self.ihdr: IhdrHeader
        self.palette: bytes | None = None
        self.uncompressed_data = b""
        if hasattr(source, "read"):
            self._decode(source)  # type: ignore[arg-type]
        else:
            with open(source, "rb") as stream:  # type: ignore[arg-type]
                self._decode(stream)

    def _decode(self, stream: BinaryIO) -> None:
        if stream.read(len(PNG_SIGNATURE)) != PNG_SIGNATURE:
            raise PngError("invalid png signature")

        idat = bytearray()
        ihdr: IhdrHeader | None = None
        while True:
            chunk = read_chunk(stream)
            if chunk.chunk_type == "IDAT":
                idat += chunk.data
            elif chunk.chunk_type == "IHDR":
                ihdr = IhdrHeader.unpack(chunk.data)
            elif chunk.chunk_type == "PLTE":
                self.palette = chunk.data
            elif chunk.chunk_type == "IEND":
                break

        if ihdr is None:
            raise PngError("missing IHDR chunk")
        if ihdr.width < 0 or ihdr.height < 0:
            raise PngError("negative image size")
        self.ihdr = ihdr

        try:
            raw = inflate(idat)
        except InflateError as exc:
            raise PngError(str(exc)) from exc

        channels = channels_per_pixel(ihdr.color_type)
        unfilter = _unfilter_interlaced if ihdr.interlaced else _unfilter
        self.uncompressed_data = bytes(
            unfilter(raw, ihdr.width, ihdr.height, ihdr.bit_depth, channels)
        )

    def _store(self, image: Image, row: int, col: int, samples: list[int]) -> None:
        color_type = self.ihdr.color_type
        if color_type == 3:
            if self.palette is None:
                raise PngError("missing PLTE chunk")
            index = samples[0] * 3
            if index + 3 > len(self.palette):
                raise PngError("palette index out of range")
            pixel = image[row, col]
            pixel.r, pixel.g, pixel.b = self.palette[index : index + 3]
        elif color_type in (2, 6):
            alpha = samples[3] if len(samples) > 3 else 255
            image[row, col] = RGB(samples[0], samples[1], samples[2], alpha)
        elif color_type in (0, 4):
            pixel = image[row, col]
            pixel.r = pixel.g = pixel.b = samples[0]
            if color_type == 4:
                pixel.a = samples[1]

    def _put_pixel(self, image: Image, row: int, col: int, bit: int, channels: int) -> int:
        depth = self.ihdr.bit_depth
        samples = []
        for _ in range(channels):
            samples.append(_sample(self.uncompressed_data, bit, depth))
            bit += depth
        self._store(image, row, col, samples)
        return bit

    def fill_interlaced(self, image: Image) -> None:
        """Write the pixels of an Adam7-interlaced image into ``image``."""
        hdr = self.ihdr
        channels = channels_per_pixel(hdr.color_type)
        row_start = 0
        for step, (pass_width, _) in zip(_ADAM7, pass_sizes(hdr.width, hdr.height)):
            stride_bits = _row_bytes(pass_width, hdr.bit_depth, channels) * 8
            for row in range(step.y_offset, hdr.height, step.row_step):
                bit = row_start
                for col in range(step.x_offset, hdr.width, step.col_step):
                    bit = self._put_pixel(image, row, col, bit, channels)
                row_start += stride_bits

    def fill_non_interlaced(self, image: Image) -> None:
        """Write the pixels of a non-interlaced image into ``image``."""
        hdr = self.ihdr
        channels = channels_per_pixel(hdr.color_type)
        stride_bits = _row_bytes(hdr.width, hdr.bit_depth, channels) * 8
        for row in range(hdr.height):
            bit = row * stride_bits
            for col in range(hdr.width):
                bit = self._put_pixel(image, row, col, bit, channels)


def read_png(source: Source) -> Image:
    """Decode a PNG file or binary stream into an :class:`Image`."""
    decoder = PngDecoder(source)
    image = Image(decoder.ihdr.height, decoder.ihdr.width)
    if decoder.ihdr.interlaced:
        decoder.fill_interlaced(image)
    else:
        decoder.fill_non_interlaced(image)
    return image