"""Loading and saving floating-point RGB(A) images."""

from __future__ import annotations

import io
import logging
import os
import struct
from pathlib import Path

import numpy as np
from PIL import Image

from .common import LOGGER_NAME, DartsError

__all__ = ["savable_formats", "to_srgb", "to_linear_rgb", "load_image", "save_image"]

_log = logging.getLogger(LOGGER_NAME)

_LDR_FORMATS = {"png": "PNG", "jpg": "JPEG", "jpeg": "JPEG", "bmp": "BMP", "tga": "TGA"}
_EXR_MAGIC = b"\x76\x2f\x31\x01"
_EXR_CHANNEL_INDEX = {"R": 0, "G": 1, "B": 2, "A": 3}
_EXR_PIXEL_TYPES = {0: np.dtype("<u4"), 1: np.dtype("<f2"), 2: np.dtype("<f4")}


def savable_formats() -> list[str]:
    """File extensions that :func:`save_image` can write."""
    return sorted([*_LDR_FORMATS, "hdr", "exr"])


def to_srgb(rgb) -> np.ndarray:
    """Convert linear values to sRGB-encoded values."""
    c = np.asarray(rgb, dtype=float)
    return np.where(c <= 0.0031308, 12.92 * c, 1.055 * np.power(np.maximum(c, 0.0031308), 1 / 2.4) - 0.055)


def to_linear_rgb(rgb) -> np.ndarray:
    """Convert sRGB-encoded values to linear values."""
    c = np.asarray(rgb, dtype=float)
    return np.where(c <= 0.04045, c / 12.92, np.power((np.maximum(c, 0.04045) + 0.055) / 1.055, 2.4))


def _extension(filename: str) -> str:
    return filename.rpartition(".")[2].lower() if "." in filename else ""


# ---------------------------------------------------------------- Radiance HDR


def _decode_hdr_scanlines(body: bytes, width: int, height: int) -> np.ndarray:
    out = np.empty((height, width, 4), dtype=np.uint8)
    pos = 0
    for row in out:
        header = body[pos:pos + 4]
        if 8 <= width < 32768 and header[:2] == b"\x02\x02" and ((header[2] << 8) | header[3]) == width:
            pos += 4
            for channel in range(4):
                x = 0
                while x < width:
                    count = body[pos]
                    pos += 1
                    if count > 128:
                        count -= 128
                        if x + count > width:
                            raise ValueError("run overflows scanline")
                        row[x:x + count, channel] = body[pos]
                        pos += 1
                    else:
                        if count == 0 or x + count > width:
                            raise ValueError("bad literal run in scanline")
                        row[x:x + count, channel] = np.frombuffer(body, np.uint8, count, pos)
                        pos += count
                    x += count
        else:
            row[:] = np.frombuffer(body, np.uint8, 4 * width, pos).reshape(width, 4)
            pos += 4 * width
    return out


def _read_hdr(data: bytes) -> np.ndarray:
    header_end = data.find(b"\n\n")
    if header_end < 0:
        raise ValueError("missing end of header")
    for line in data[:header_end].split(b"\n"):
        if line.startswith(b"FORMAT=") and line != b"FORMAT=32-bit_rle_rgbe":
            raise ValueError(f"unsupported format {line[7:].decode(errors='replace')}")
    res_end = data.index(b"\n", header_end + 2)
    fields = data[header_end + 2:res_end].split()
    if len(fields) != 4 or fields[0] != b"-Y" or fields[2] != b"+X":
        raise ValueError("unsupported image orientation")
    height, width = int(fields[1]), int(fields[3])

    rgbe = _decode_hdr_scanlines(data[res_end + 1:], width, height)
    exponent = rgbe[..., 3].astype(int)
    scale = np.where(exponent == 0, 0.0, np.ldexp(1.0, exponent - 136))
    return (rgbe[..., :3] * scale[..., None]).astype(np.float32)


def _write_hdr(path: str, image: np.ndarray) -> None:
    rgb = np.nan_to_num(image[..., :3].astype(float))
    height, width = rgb.shape[:2]
    v = rgb.max(axis=-1)
    small = v < 1e-32
    mantissa, exponent = np.frexp(np.where(small, 1.0, v))
    scale = np.where(small, 0.0, mantissa * 256.0 / np.where(small, 1.0, v))
    rgbe = np.zeros((height, width, 4), dtype=np.uint8)
    rgbe[..., :3] = np.clip(rgb * scale[..., None], 0, 255).astype(np.uint8)
    rgbe[..., 3] = np.where(small, 0, np.clip(exponent + 128, 0, 255))
    header = f"#?RADIANCE\nFORMAT=32-bit_rle_rgbe\n\n-Y {height} +X {width}\n".encode("ascii")
    Path(path).write_bytes(header + rgbe.tobytes())


# ---------------------------------------------------------------- OpenEXR


def _exr_attribute(name: str, type_name: str, value: bytes) -> bytes:
    return name.encode() + b"\0" + type_name.encode() + b"\0" + struct.pack("<i", len(value)) + value


def _write_exr(path: str, image: np.ndarray) -> None:
    height, width, channels = image.shape
    names = sorted(list("RGBA")[:channels])
    chlist = b"".join(n.encode() + b"\0" + struct.pack("<iB3xii", 1, 0, 1, 1) for n in names) + b"\0"
    window = struct.pack("<4i", 0, 0, width - 1, height - 1)
    header = b"".join(
        [
            _EXR_MAGIC,
            struct.pack("<i", 2),
            _exr_attribute("channels", "chlist", chlist),
            _exr_attribute("compression", "compression", b"\0"),
            _exr_attribute("dataWindow", "box2i", window),
            _exr_attribute("displayWindow", "box2i", window),
            _exr_attribute("lineOrder", "lineOrder", b"\0"),
            _exr_attribute("pixelAspectRatio", "float", struct.pack("<f", 1.0)),
            _exr_attribute("screenWindowCenter", "v2f", struct.pack("<2f", 0.0, 0.0)),
            _exr_attribute("screenWindowWidth", "float", struct.pack("<f", 1.0)),
            _exr_attribute("comments", "string", b"Generated with raydarts"),
            b"\0",
        ]
    )
    line_size = 2 * width * len(names)
    first = len(header) + 8 * height
    offsets = struct.pack(f"<{height}Q", *(first + y * (8 + line_size) for y in range(height)))
    blocks = b"".join(
        struct.pack("<ii", y, line_size)
        + b"".join(row[:, _EXR_CHANNEL_INDEX[n]].astype("<f2").tobytes() for n in names)
        for y, row in enumerate(image)
    )
    Path(path).write_bytes(header + offsets + blocks)


def _read_exr(data: bytes) -> np.ndarray:
    (version,) = struct.unpack_from("<i", data, 4)
    if version & 0x1200:
        raise ValueError("tiled and multi-part files are not supported")
    attributes: dict[str, bytes] = {}
    pos = 8
    while data[pos] != 0:
        name_end = data.index(b"\0", pos)
        type_end = data.index(b"\0", name_end + 1)
        (size,) = struct.unpack_from("<i", data, type_end + 1)
        start = type_end + 5
        attributes[data[pos:name_end].decode()] = data[start:start + size]
        pos = start + size
    pos += 1

    if attributes["compression"][0] != 0:
        raise ValueError("only uncompressed files are supported")

    chlist = attributes["channels"]
    channels = []
    cpos = 0
    while chlist[cpos] != 0:
        name_end = chlist.index(b"\0", cpos)
        (pixel_type,) = struct.unpack_from("<i", chlist, name_end + 1)
        channels.append((chlist[cpos:name_end].decode(), _EXR_PIXEL_TYPES[pixel_type]))
        cpos = name_end + 17

    xmin, ymin, xmax, ymax = struct.unpack("<4i", attributes["dataWindow"])
    width, height = xmax - xmin + 1, ymax - ymin + 1
    planes = {name: np.zeros((height, width), dtype=np.float32) for name, _ in channels}
    for offset in struct.unpack_from(f"<{height}Q", data, pos):
        y, _ = struct.unpack_from("<ii", data, offset)
        p = offset + 8
        for name, dtype in channels:
            planes[name][y - ymin] = np.frombuffer(data, dtype, width, p)
            p += width * dtype.itemsize

    if all(c in planes for c in "RGB"):
        return np.stack([planes["R"], planes["G"], planes["B"]], axis=-1)
    if "Y" in planes:
        return np.stack([planes["Y"]] * 3, axis=-1)
    raise ValueError("no RGB channels found")


# ---------------------------------------------------------------- public API


def load_image(filename, raw: bool = False) -> np.ndarray:
    """Load an image as a float32 array of shape (height, width, 3).

    8-bit images are converted from sRGB to linear values unless ``raw`` is true.
    """
    path = os.fspath(filename)
    try:
        data = Path(path).read_bytes()
    except OSError as error:
        raise DartsError(f'Unable to read image file "{path}": {error}.') from error

    try:
        if data.startswith((b"#?RADIANCE", b"#?RGBE")):
            return _read_hdr(data)
        if data.startswith(_EXR_MAGIC):
            return _read_exr(data)
    except (ValueError, IndexError, KeyError, struct.error) as error:
        raise DartsError(f'Unable to read image file "{path}": {error}.') from error

    try:
        with Image.open(io.BytesIO(data)) as im:
            rgb = np.asarray(im.convert("RGB"), dtype=np.float32) / 255.0
    except (OSError, ValueError) as error:
        raise DartsError(f'Unable to read image file "{path}": {error}.') from error
    return rgb if raw else to_linear_rgb(rgb).astype(np.float32)


def save_image(filename, image, gain: float = 1.0) -> None:
    """Save an (height, width, 3|4) image; the format follows the file extension.

    ``gain`` scales the colors written to 8-bit formats; non-finite colors are written as magenta.
    """
    path = os.fspath(filename)
    pixels = np.asarray(image, dtype=float)
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise ValueError(f"expected an image of shape (height, width, 3|4), got {pixels.shape}")

    extension = _extension(path)
    try:
        if extension == "hdr":
            _write_hdr(path, pixels)
            return
        if extension == "exr":
            _write_exr(path, pixels)
            return
        if extension not in _LDR_FORMATS:
            raise DartsError("Could not determine desired file type from extension.")

        rgb = pixels[..., :3] * gain
        invalid = ~np.isfinite(rgb).all(axis=-1)
        rgb = np.where(invalid[..., None], np.array([1.0, 0.0, 1.0]), rgb)
        data = np.empty(pixels.shape, dtype=np.uint8)
        data[..., :3] = (np.clip(to_srgb(rgb), 0.0, 1.0) * 255).astype(np.uint8)
        if pixels.shape[2] == 4:
            data[..., 3] = (np.clip(np.nan_to_num(pixels[..., 3]), 0.0, 1.0) * 255).astype(np.uint8)

        pil_format = _LDR_FORMATS[extension]
        if pil_format == "JPEG":
            Image.fromarray(np.ascontiguousarray(data[..., :3])).save(path, format=pil_format, quality=100)
        else:
            Image.fromarray(data).save(path, format=pil_format)
    except OSError as error:
        _log.error("Error saving image %s: %s", path, error)
        raise DartsError(f'Unable to write image file "{path}": {error}.') from error