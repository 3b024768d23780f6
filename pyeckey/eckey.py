"""
ECKey: an elliptic curve key convertible between PEM, PKCS8, SEC1, SPKI and JWK
"""
import base64
import json
from logging import getLogger

from . import containers
from . import jwk
from . import pem
from .curves import resolve, DEFAULT_CURVE
from .crypto_provider import DEFAULT_PROVIDER
from .ecc_conversions import as_bytes, b64url_decode, split_uncompressed_point
from .eckey_errors import MalformedPemError, MissingFieldError, UnknownFormatError
from .eckey_errors import UnsupportedFormatForKeyKindError
from .key_representation import KeyRepresentation

FORMAT_PEM = 'pem'
FORMAT_PKCS8 = 'pkcs8'
FORMAT_SPKI = 'spki'
FORMAT_SEC1 = 'rfc5915'

# Accepted format names mapped to the canonical one
FORMAT_ALIASES = {
    'pem': FORMAT_PEM,
    'pkcs8': FORMAT_PKCS8,
    'rfc5208': FORMAT_PKCS8,
    'spki': FORMAT_SPKI,
    'rfc5280': FORMAT_SPKI,
    'rfc5915': FORMAT_SEC1,
    # Transposed spelling of rfc5915 found in older callers
    'rfc5951': FORMAT_SEC1,
}

PRIVATE_FORMATS = (FORMAT_PKCS8, FORMAT_SEC1)

_DECODERS = {
    FORMAT_PKCS8: containers.decode_pkcs8,
    FORMAT_SPKI: containers.decode_spki,
    FORMAT_SEC1: containers.decode_sec1,
}

_ENCODERS = {
    FORMAT_PKCS8: containers.encode_pkcs8,
    FORMAT_SPKI: containers.encode_spki,
    FORMAT_SEC1: containers.encode_sec1,
}


def canonical_format(key_format):
    """
    Resolve a format name or alias

    :param key_format: e.g. 'pem', 'pkcs8', 'rfc5208', 'spki', 'rfc5280' or 'rfc5915'
    :return: canonical format name
    :raises UnknownFormatError: for unknown names
    """
    try:
        return FORMAT_ALIASES[key_format.lower()]
    except (KeyError, AttributeError):
        raise UnknownFormatError("Unknown key format '{}'".format(key_format)) from None


def _option_bytes(value):
    """Text values are base64 (standard or url-safe), byte values are used as they are"""
    if isinstance(value, str):
        return b64url_decode(value)
    return as_bytes(value)


def _from_options(options):
    curve_name = options.get('curve', options.get('crv'))
    if curve_name is None:
        raise MissingFieldError("Key options need 'curve' or 'crv'")
    curve = resolve(curve_name)

    def option(*names):
        for name in names:
            if options.get(name) is not None:
                return _option_bytes(options[name])
        return None

    x = option('x')
    y = option('y')
    d = option('d', 'privateKey', 'private_key')
    public_key = option('publicKey', 'public_key')
    if public_key is not None:
        x, y = split_uncompressed_point(public_key, curve.field_byte_width)
    if x is None and y is None and d is None:
        raise MissingFieldError("Key options need the public coordinates and/or the private key")
    return KeyRepresentation(curve, x, y, d)


def _decode(key, key_format):
    """Parse any supported input into a KeyRepresentation"""
    logger = getLogger(__name__)
    if isinstance(key, KeyRepresentation):
        return key
    if isinstance(key, ECKey):
        return key.representation
    if isinstance(key, dict):
        if 'kty' in key:
            return jwk.from_jwk(key)
        return _from_options(key)

    key_format = canonical_format(key_format or FORMAT_PEM)
    if key_format == FORMAT_PEM:
        if not pem.detect(key):
            raise MalformedPemError("Key data is not PEM encoded")
        key_format, der_bytes = pem.unwrap(key)
    elif isinstance(key, str):
        try:
            der_bytes = base64.b64decode(key, validate=True)
        except ValueError as error:
            raise MalformedPemError("Key text is not base64 encoded DER: {}".format(error)) from error
    else:
        der_bytes = as_bytes(key)
    logger.debug("Decoding %d bytes of %s", len(der_bytes), key_format)
    return _DECODERS[key_format](der_bytes)


class ECKey():
    """
    An elliptic curve key on one of the curves prime256v1 (P-256),
    secp256k1, secp384r1 (P-384) or secp521r1 (P-521)

    Construct from:

    * PEM text or bytes: ``ECKey(pem_text)``, the container kind is detected
    * DER bytes (or base64 text) and a format: ``ECKey(der, 'spki')``
    * a JWK dict: ``ECKey({'kty': 'EC', 'crv': 'P-256', 'x': ..., 'y': ...})``
    * an options dict: ``{curve|crv, x, y, d}`` or ``{curve|crv, publicKey, privateKey}``,
      text values being base64 and bytes values being raw big-endian data
    * a KeyRepresentation
    """

    def __init__(self, key, key_format=None, provider=None):
        """
        :param key: key data, see class documentation
        :param key_format: format of key when it is DER (default: 'pem')
        :param provider: ExternalCryptoProvider for ECDH and ECDSA (default: CryptographyProvider)
        """
        self._key = _decode(key, key_format)
        self._provider = provider or DEFAULT_PROVIDER

    @classmethod
    def create(cls, curve=DEFAULT_CURVE.vendor_name, provider=None):
        """
        Create a new random private key

        :param curve: vendor or JWA curve name (default: prime256v1)
        :param provider: ExternalCryptoProvider used to generate the key
        :raises UnknownCurveError: if curve is not supported
        """
        provider = provider or DEFAULT_PROVIDER
        return cls(provider.generate(resolve(curve)), provider=provider)

    @property
    def representation(self):
        """The underlying KeyRepresentation"""
        return self._key

    @property
    def curve(self):
        """Curve name in OpenSSL format (e.g. prime256v1)"""
        return self._key.curve.vendor_name

    @property
    def json_curve(self):
        """Curve name in RFC-7518 format (e.g. P-256)"""
        return self._key.curve.standard_name

    @property
    def is_private(self):
        return self._key.is_private

    @property
    def x(self):
        return self._key.x

    @property
    def y(self):
        return self._key.y

    @property
    def d(self):
        return self._key.d

    @property
    def public_code_point(self):
        """The uncompressed point 0x04 || x || y (SEC1 section 2.3.3)"""
        return self._key.public_point

    def as_public(self):
        """
        Return this key if it is public, else a new ECKey without the private scalar
        """
        if not self.is_private:
            return self
        return ECKey(self._key.public(), provider=self._provider)

    def with_public_point(self):
        """
        Return this key if its public point is known, else a new ECKey whose
        public point was derived by the provider
        """
        if self._key.has_public_point:
            return self
        return ECKey(self._provider.derive_public_point(self._key), provider=self._provider)

    def to_bytes(self, key_format=FORMAT_PEM):
        """
        Encode this key

        :param key_format: 'pem' (default), 'pkcs8'/'rfc5208', 'spki'/'rfc5280' or 'rfc5915'
        :return: PEM text as ASCII bytes for 'pem', DER bytes otherwise
        :raises UnsupportedFormatForKeyKindError: if the format does not fit this key
        """
        key_format = canonical_format(key_format)
        if key_format == FORMAT_PEM:
            return self._pem().encode('ascii')
        return self._der(key_format)

    def to_string(self, key_format=FORMAT_PEM):
        """
        Encode this key as text

        :param key_format: as for to_bytes()
        :return: PEM text for 'pem' and 'rfc5915', base64 of the DER bytes otherwise
        """
        key_format = canonical_format(key_format)
        if key_format == FORMAT_PEM:
            return self._pem()
        if key_format == FORMAT_SEC1:
            return pem.wrap(FORMAT_SEC1, self._der(FORMAT_SEC1))
        return base64.b64encode(self._der(key_format)).decode('ascii')

    def to_json(self):
        """Format this key as a JSON Web Key (RFC 7517)"""
        return jwk.to_jwk(self._key)

    def _der(self, key_format):
        if key_format in PRIVATE_FORMATS and not self.is_private:
            raise UnsupportedFormatForKeyKindError("Format '{}' requires a private key".format(key_format))
        if key_format == FORMAT_SPKI and not self._key.has_public_point:
            raise UnsupportedFormatForKeyKindError("Format '{}' requires the public point".format(key_format))
        return _ENCODERS[key_format](self._key)

    def _pem(self):
        key_format = FORMAT_PKCS8 if self.is_private else FORMAT_SPKI
        return pem.wrap(key_format, self._der(key_format))

    def compute_secret(self, other):
        """Shortcut for create_ecdh().compute_secret(other)"""
        return self.create_ecdh().compute_secret(other)

    def create_ecdh(self):
        """Create an ECDH object whose compute_secret() also accepts ECKey instances"""
        return ECDH(self, self._provider)

    def create_sign(self, hash_name):
        """Create a Signer using this key and the named hash algorithm"""
        return Signer(self, hash_name, self._provider)

    def create_verify(self, hash_name):
        """Create a Verifier using this key and the named hash algorithm"""
        return Verifier(self, hash_name, self._provider)

    def __eq__(self, other):
        if not isinstance(other, ECKey):
            return NotImplemented
        return self._key == other.representation

    def __hash__(self):
        return hash(self._key)

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return "ECKey(curve={}, private={})".format(self.curve, self.is_private)


class ECDH():
    """
    Diffie-Hellman key agreement with a private ECKey
    """
    def __init__(self, key, provider):
        if not key.is_private:
            raise UnsupportedFormatForKeyKindError("ECDH requires a private key")
        self._key = key
        self._provider = provider

    def compute_secret(self, other):
        """
        Compute the shared secret with a peer public key

        :param other: ECKey, KeyRepresentation or uncompressed point bytes
        :return: shared secret bytes
        """
        if isinstance(other, ECKey):
            other = other.representation
        return self._provider.ecdh(self._key.representation, other)

    def get_public_key(self):
        """The uncompressed public point of the own key"""
        return self._key.with_public_point().public_code_point

    def get_private_key(self):
        return self._key.d


class _Digest():
    def __init__(self, key, hash_name, provider):
        self._key = key
        self._hash_name = hash_name
        self._provider = provider
        self._data = []

    def update(self, data):
        """
        Add data to be signed or verified

        :param data: bytes, or text to be UTF-8 encoded
        :return: self
        """
        if isinstance(data, str):
            data = data.encode('utf-8')
        self._data.append(bytes(data))
        return self

    def _message(self):
        return b"".join(self._data)


class Signer(_Digest):
    """
    ECDSA signature creation with a private ECKey
    """
    def sign(self):
        """
        :return: DER encoded ECDSA signature
        """
        return self._provider.sign(self._key.representation, self._hash_name, self._message())


class Verifier(_Digest):
    """
    ECDSA signature verification with an ECKey
    """
    def verify(self, signature):
        """
        :param signature: DER encoded ECDSA signature
        :return: True if the signature is valid
        """
        return self._provider.verify(self._key.representation, self._hash_name, self._message(), signature)


class ECKeyJSONEncoder(json.JSONEncoder):
    """
    JSON encoder serializing ECKey instances as JSON Web Keys

    Use as ``json.dumps(key, cls=ECKeyJSONEncoder)``
    """
    def default(self, o):  #pylint: disable=method-hidden
        if isinstance(o, ECKey):
            return o.to_json()
        return super().default(o)
