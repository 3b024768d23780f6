"""
ECC (Elliptic Curve Cryptography) coordinate conversions

Coordinates are kept as fixed width big-endian byte strings.  The helpers in
this module convert them to and from the shapes required by the different
key encodings: DER INTEGER contents, SEC1 uncompressed points and unpadded
base64url (JWK).
"""

import base64

from .eckey_errors import CoordinateTooLongError, InvalidEncodingError

# A prefix of 0x04 means uncompressed point (DER format)
UNCOMPRESSED_KEY_PREFIX = b"\x04"

# Types accepted as raw big-endian byte values
BYTES_TYPES = (bytes, bytearray, memoryview)

def as_bytes(data):
    """Raw byte value as bytes

    :raises InvalidEncodingError: if data is not bytes, bytearray or memoryview
    """
    if not isinstance(data, BYTES_TYPES):
        raise InvalidEncodingError("Expected a byte value, got {}".format(type(data).__name__))
    return bytes(data)

def pad_to_width(data, width):
    """Left-pad data with zero bytes up to width

    :param data: big-endian value
    :type data: bytes
    :param width: target length in bytes
    :type width: int
    :return: padded value
    :raises CoordinateTooLongError: if data is longer than width
    :raises InvalidEncodingError: if data is not a byte value
    """
    data = as_bytes(data)
    if len(data) > width:
        raise CoordinateTooLongError("Coordinate is {} bytes long, maximum for this curve is {}".format(
            len(data), width))
    return b"\x00" * (width - len(data)) + data

def strip_leading_zeros(data):
    """Remove leading zero bytes, always keeping at least one byte"""
    data = bytes(data).lstrip(b"\x00")
    return data or b"\x00"

def to_der_integer(data):
    """Conversion from an unsigned big-endian value to DER INTEGER contents

    A 0x00 byte is prepended when the high bit is set so the value stays positive.

    :param data: unsigned big-endian value
    :type data: bytes
    :return: DER INTEGER contents
    """
    data = strip_leading_zeros(data)
    if data[0] & 0x80:
        data = b"\x00" + data
    return data

def from_der_integer(data, width):
    """Conversion from DER INTEGER contents to a fixed width unsigned value

    :param data: DER INTEGER contents
    :param width: target length in bytes
    :return: value padded to width
    :raises InvalidEncodingError: if the value does not fit in width bytes
    """
    data = bytes(data)
    if data[:1] == b"\x00":
        data = data[1:]
    if len(data) > width:
        raise InvalidEncodingError("Integer of {} bytes does not fit in {} bytes".format(len(data), width))
    return pad_to_width(data, width)

def split_uncompressed_point(point, width):
    """Conversion from an uncompressed point to its x and y coordinates

    :param point: 0x04 || X || Y
    :type point: bytes
    :param width: curve field width in bytes
    :return: tuple (x, y)
    :raises InvalidEncodingError: if the prefix or length is wrong
    """
    point = bytes(point)
    if point[:1] != UNCOMPRESSED_KEY_PREFIX:
        raise InvalidEncodingError("Only uncompressed points (0x04 prefix) are supported")
    if len(point) != 1 + 2 * width:
        raise InvalidEncodingError("Uncompressed point must be {} bytes long, got {}".format(
            1 + 2 * width, len(point)))
    return point[1:1 + width], point[1 + width:]

def join_uncompressed_point(x, y):
    """Conversion from x and y coordinates to an uncompressed point"""
    return UNCOMPRESSED_KEY_PREFIX + bytes(x) + bytes(y)

def b64url_encode(data):
    """Base64url encode without padding"""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")

def b64url_decode(text):
    """Base64 decode accepting both the url-safe and the standard alphabet

    Padding characters are optional.

    :param text: base64 text
    :type text: str or bytes
    :return: decoded bytes
    :raises InvalidEncodingError: if text is not valid base64
    """
    if isinstance(text, BYTES_TYPES):
        text = bytes(text).decode("ascii", errors="replace")
    elif not isinstance(text, str):
        raise InvalidEncodingError("Expected base64 text, got {}".format(type(text).__name__))
    text = text.strip().rstrip("=").replace("+", "-").replace("/", "_")
    text += "=" * (-len(text) % 4)
    try:
        return base64.b64decode(text, altchars=b"-_", validate=True)
    except ValueError as error:
        raise InvalidEncodingError("Invalid base64 data: {}".format(error)) from error
