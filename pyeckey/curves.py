"""
Registry of the supported elliptic curves

Each curve is known under three names: the OpenSSL style vendor name
(e.g. prime256v1), the RFC-7518 (JWA) name (e.g. P-256) and its ASN.1 object
identifier.  The registry is built once at import time and is read-only.
"""
import os
from collections import namedtuple

from .eckey_errors import UnknownCurveError

# Environment variable overriding the JWK name used for secp256k1
SECP256K1_JWK_NAME_ENV = "PYECKEY_SECP256K1_JWK_NAME"

# Not standardized in RFC-7518, RFC-8812 uses "secp256k1" instead
DEFAULT_SECP256K1_JWK_NAME = "P-256K"

# OID of the id-ecPublicKey algorithm (RFC 5480)
ID_EC_PUBLIC_KEY = "1.2.840.10045.2.1"


class CurveDescriptor(namedtuple('CurveDescriptor', ['vendor_name', 'standard_name', 'oid', 'bit_size'])):
    """
    Immutable description of one supported curve

    :param vendor_name: OpenSSL style curve name
    :param standard_name: RFC-7518 (JWA) curve name
    :param oid: dotted object identifier of the named curve
    :param bit_size: size of the curve field in bits
    """
    __slots__ = ()

    @property
    def field_byte_width(self):
        """Fixed byte length of each coordinate on this curve"""
        return (self.bit_size + 7) // 8

    def __str__(self):
        return self.vendor_name


PRIME256V1 = CurveDescriptor("prime256v1", "P-256", "1.2.840.10045.3.1.7", 256)
SECP256K1 = CurveDescriptor("secp256k1",
                            os.getenv(SECP256K1_JWK_NAME_ENV, DEFAULT_SECP256K1_JWK_NAME),
                            "1.3.132.0.10", 256)
SECP384R1 = CurveDescriptor("secp384r1", "P-384", "1.3.132.0.34", 384)
SECP521R1 = CurveDescriptor("secp521r1", "P-521", "1.3.132.0.35", 521)

CURVES = (PRIME256V1, SECP256K1, SECP384R1, SECP521R1)

DEFAULT_CURVE = PRIME256V1

_BY_NAME = {}
for _curve in CURVES:
    _BY_NAME[_curve.vendor_name] = _curve
    _BY_NAME[_curve.standard_name] = _curve
_BY_OID = {curve.oid: curve for curve in CURVES}
del _curve


def resolve(name):
    """
    Look up a curve by vendor or JWA name

    Matching is exact and case-sensitive.  A CurveDescriptor is returned as is.

    :param name: curve name, e.g. 'secp384r1' or 'P-384'
    :type name: str
    :returns: the matching curve
    :rtype: CurveDescriptor
    :raises UnknownCurveError: if no supported curve has that name
    """
    if isinstance(name, CurveDescriptor):
        return name
    try:
        return _BY_NAME[name]
    except (KeyError, TypeError):
        raise UnknownCurveError('Invalid/unknown curve "{}"'.format(name)) from None


def resolve_by_oid(oid):
    """
    Look up a curve by its ASN.1 object identifier

    :param oid: dotted OID string or sequence of integer arcs
    :returns: the matching curve
    :rtype: CurveDescriptor
    :raises UnknownCurveError: if the OID is not one of the supported curves
    """
    if not isinstance(oid, str):
        oid = ".".join(str(arc) for arc in oid)
    try:
        return _BY_OID[oid]
    except KeyError:
        raise UnknownCurveError('Invalid/unknown curve OID "{}"'.format(oid)) from None
