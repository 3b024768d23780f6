"""
JSON Web Key (RFC 7517) codec for EC keys
"""
from logging import getLogger

from .curves import resolve
from .ecc_conversions import b64url_encode, b64url_decode, strip_leading_zeros, pad_to_width
from .eckey_errors import MissingFieldError
from .key_representation import KeyRepresentation

KEY_TYPE_EC = "EC"


def to_jwk(key):
    """
    Format a key as a JSON Web Key

    Coordinates are minimal length big-endian values (leading zero bytes
    stripped), base64url encoded without padding.

    :param key: key with a public point
    :type key: KeyRepresentation
    :return: dict with the fields kty, crv, x, y and, for private keys, d
    :raises MissingFieldError: if the public point of the key is not known
    """
    if not key.has_public_point:
        raise MissingFieldError("A JWK requires the public point of the key")
    jwk = {
        'kty': KEY_TYPE_EC,
        'crv': key.curve.standard_name,
        'x': b64url_encode(strip_leading_zeros(key.x)),
        'y': b64url_encode(strip_leading_zeros(key.y)),
    }
    if key.is_private:
        jwk['d'] = b64url_encode(strip_leading_zeros(key.d))
    return jwk

def from_jwk(jwk):
    """
    Parse a JSON Web Key

    The curve is taken from 'crv' or, failing that, 'curve'.  Other members
    such as 'kty', 'kid' or 'use' are ignored.

    :param jwk: parsed JWK
    :type jwk: dict
    :return: KeyRepresentation, private if 'd' is present
    :raises MissingFieldError: if the curve, 'x' or 'y' is absent
    :raises UnknownCurveError: if the curve is not supported
    :raises CoordinateTooLongError: if a coordinate is too long for the curve
    """
    logger = getLogger(__name__)

    curve_name = jwk.get('crv', jwk.get('curve'))
    if curve_name is None:
        raise MissingFieldError("JWK has no 'crv' member")
    curve = resolve(curve_name)
    width = curve.field_byte_width

    coordinates = {}
    for name in ('x', 'y', 'd'):
        value = jwk.get(name)
        if value is None:
            if name != 'd':
                raise MissingFieldError("JWK has no '{}' member".format(name))
            continue
        coordinates[name] = pad_to_width(b64url_decode(value), width)
    logger.debug("Parsed %s JWK for curve %s", "private" if 'd' in coordinates else "public", curve.vendor_name)
    return KeyRepresentation(curve, coordinates['x'], coordinates['y'], coordinates.get('d'))
