"""
DER container codecs for EC keys

Three fixed shapes are supported:

SEC1 / RFC 5915 private key::

    ECPrivateKey ::= SEQUENCE {
        version        INTEGER { ecPrivkeyVer1(1) },
        privateKey     OCTET STRING,
        parameters [0] ECParameters {{ NamedCurve }} OPTIONAL,
        publicKey  [1] BIT STRING OPTIONAL
    }

PKCS8 / RFC 5208 private key::

    PrivateKeyInfo ::= SEQUENCE {
        version                   INTEGER (0),
        privateKeyAlgorithm       AlgorithmIdentifier,
        privateKey                OCTET STRING (ECPrivateKey without parameters),
        attributes           [0]  IMPLICIT Attributes OPTIONAL
    }

SPKI / RFC 5280 public key::

    SubjectPublicKeyInfo ::= SEQUENCE {
        algorithm            AlgorithmIdentifier,
        subjectPublicKey     BIT STRING (uncompressed point)
    }

with AlgorithmIdentifier being SEQUENCE { id-ecPublicKey, namedCurve OID }.
"""
from logging import getLogger

from . import der
from .curves import ID_EC_PUBLIC_KEY, resolve_by_oid
from .ecc_conversions import to_der_integer, pad_to_width
from .ecc_conversions import split_uncompressed_point
from .eckey_errors import CurveMismatchError, InvalidEncodingError, MalformedDerError, MissingFieldError
from .eckey_errors import UnsupportedFormatForKeyKindError
from .key_representation import KeyRepresentation

SEC1_VERSION = 1
PKCS8_VERSION = 0

ALGORITHM_IDENTIFIER_SHAPE = [
    der.oid_field('algorithm'),
    der.oid_field('named_curve'),
]

SEC1_SHAPE = [
    der.integer_field('version'),
    der.octet_string_field('private_key'),
    der.explicit_field('parameters', 0, optional=True),
    der.explicit_field('public_key', 1, optional=True),
]

PKCS8_SHAPE = [
    der.integer_field('version'),
    der.sequence_field('private_key_algorithm'),
    der.octet_string_field('private_key'),
    der.explicit_field('attributes', 0, optional=True),
]

SPKI_SHAPE = [
    der.sequence_field('algorithm'),
    der.bit_string_field('subject_public_key'),
]


def _encode_algorithm_identifier(curve):
    return der.sequence(der.object_identifier(ID_EC_PUBLIC_KEY),
                        der.object_identifier(curve.oid))

def _decode_algorithm_identifier(element):
    """
    Decode an AlgorithmIdentifier and resolve its named curve

    :param element: DerElement of the AlgorithmIdentifier SEQUENCE
    :return: CurveDescriptor
    """
    fields = der.decode_children(element, ALGORITHM_IDENTIFIER_SHAPE)
    algorithm = fields['algorithm'].as_oid()
    if algorithm != ID_EC_PUBLIC_KEY:
        raise MalformedDerError("Expected id-ecPublicKey algorithm, found {}".format(algorithm),
                                fields['algorithm'].offset)
    return resolve_by_oid(fields['named_curve'].as_oid())

def _decode_version(element, expected):
    # Small versions have exactly one minimal contents byte
    if element.contents != bytes([expected]):
        raise MalformedDerError("Unsupported version 0x{}, expected {}".format(element.contents.hex(), expected),
                                element.offset)

def _require_private(key, container):
    if not key.is_private:
        raise UnsupportedFormatForKeyKindError("{} requires a private key".format(container))

def _require_public_point(key, container):
    if not key.has_public_point:
        raise UnsupportedFormatForKeyKindError("{} requires the public point of the key".format(container))


def encode_sec1(key, include_parameters=True):
    """
    Encode a private key as SEC1 / RFC 5915 ECPrivateKey DER

    :param key: private key
    :type key: KeyRepresentation
    :param include_parameters: include the [0] named curve parameters
    :return: DER bytes
    :raises UnsupportedFormatForKeyKindError: if key is not private
    """
    _require_private(key, "SEC1 (RFC 5915)")
    children = [der.integer(to_der_integer(bytes([SEC1_VERSION]))),
                der.octet_string(key.d)]
    if include_parameters:
        children.append(der.explicit(0, der.object_identifier(key.curve.oid)))
    if key.has_public_point:
        children.append(der.explicit(1, der.bit_string(key.public_point)))
    return der.sequence(*children)

def decode_sec1(data, curve=None, offset=0, end=None):
    """
    Decode a SEC1 / RFC 5915 ECPrivateKey

    :param data: buffer holding the DER encoding
    :type data: bytes
    :param curve: curve named by a surrounding container, if any
    :type curve: CurveDescriptor
    :param offset: absolute offset of the ECPrivateKey inside data
    :param end: absolute end of the ECPrivateKey inside data
    :return: private KeyRepresentation, x and y are None if the public key field is absent
    :raises MalformedDerError: if the DER is invalid
    :raises CurveMismatchError: if parameters and curve name different curves
    :raises MissingFieldError: if the curve is named neither by parameters nor by curve
    """
    logger = getLogger(__name__)
    fields = der.decode(data, SEC1_SHAPE, offset, end)
    _decode_version(fields['version'], SEC1_VERSION)

    if fields['parameters'] is not None:
        named_curve = fields['parameters'].unwrap_explicit()
        if (named_curve.class_, named_curve.tag) != (der.CLASS_UNIVERSAL, der.TAG_OBJECT_IDENTIFIER):
            raise MalformedDerError("Only named curve parameters are supported", named_curve.offset)
        parameters_curve = resolve_by_oid(named_curve.as_oid())
        if curve is not None and curve != parameters_curve:
            raise CurveMismatchError("Algorithm names curve {} but private key parameters name {}".format(
                curve.vendor_name, parameters_curve.vendor_name))
        curve = parameters_curve
    if curve is None:
        raise MissingFieldError("EC private key does not name its curve")

    width = curve.field_byte_width
    d = fields['private_key'].contents
    if not d:
        raise InvalidEncodingError("Private key of curve {} is empty".format(curve.vendor_name))
    if len(d) > width:
        raise InvalidEncodingError("Private key of {} bytes is too long for curve {}".format(
            len(d), curve.vendor_name))
    d = pad_to_width(d, width)

    x = y = None
    if fields['public_key'] is not None:
        public_key = fields['public_key'].unwrap_explicit()
        if (public_key.class_, public_key.tag) != (der.CLASS_UNIVERSAL, der.TAG_BIT_STRING):
            raise MalformedDerError("Expected BIT STRING public key, found {}".format(public_key.describe()),
                                    public_key.offset)
        x, y = split_uncompressed_point(public_key.as_bit_string(), width)
    else:
        logger.debug("EC private key has no public key field")

    return KeyRepresentation(curve, x, y, d)

def encode_pkcs8(key):
    """
    Encode a private key as PKCS8 / RFC 5208 PrivateKeyInfo DER

    The inner ECPrivateKey omits the curve parameters, the curve is named by
    the AlgorithmIdentifier.

    :param key: private key
    :type key: KeyRepresentation
    :return: DER bytes
    :raises UnsupportedFormatForKeyKindError: if key is not private
    """
    _require_private(key, "PKCS8 (RFC 5208)")
    return der.sequence(der.integer(to_der_integer(bytes([PKCS8_VERSION]))),
                        _encode_algorithm_identifier(key.curve),
                        der.octet_string(encode_sec1(key, include_parameters=False)))

def decode_pkcs8(data):
    """
    Decode a PKCS8 / RFC 5208 PrivateKeyInfo holding an EC key

    :param data: DER bytes
    :type data: bytes
    :return: private KeyRepresentation
    :raises MalformedDerError: if the DER is invalid
    :raises CurveMismatchError: if the AlgorithmIdentifier and the inner parameters disagree
    """
    data = bytes(data)
    fields = der.decode(data, PKCS8_SHAPE)
    _decode_version(fields['version'], PKCS8_VERSION)
    curve = _decode_algorithm_identifier(fields['private_key_algorithm'])
    private_key = fields['private_key']
    return decode_sec1(data, curve, private_key.content_offset, private_key.end)

def encode_spki(key):
    """
    Encode the public part of a key as SubjectPublicKeyInfo DER

    :param key: key with a public point
    :type key: KeyRepresentation
    :return: DER bytes
    :raises UnsupportedFormatForKeyKindError: if the public point is not known
    """
    _require_public_point(key, "SPKI (RFC 5280)")
    return der.sequence(_encode_algorithm_identifier(key.curve),
                        der.bit_string(key.public_point))

def decode_spki(data):
    """
    Decode a SubjectPublicKeyInfo holding an EC public key

    :param data: DER bytes
    :type data: bytes
    :return: public KeyRepresentation
    :raises MalformedDerError: if the DER is invalid
    :raises InvalidEncodingError: if the point is not an uncompressed point of the curve
    """
    fields = der.decode(data, SPKI_SHAPE)
    curve = _decode_algorithm_identifier(fields['algorithm'])
    x, y = split_uncompressed_point(fields['subject_public_key'].as_bit_string(), curve.field_byte_width)
    return KeyRepresentation(curve, x, y)
