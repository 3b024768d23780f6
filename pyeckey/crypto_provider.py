"""
Crypto primitive providers

The codecs in this package never do point arithmetic.  Key generation, public
point derivation, ECDH and ECDSA are delegated to an ExternalCryptoProvider.
CryptographyProvider is the default implementation, backed by the
cryptography package.
"""
from abc import ABC, abstractmethod
from logging import getLogger

from cryptography import exceptions as crypto_exceptions
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from .curves import resolve
from .ecc_conversions import split_uncompressed_point
from .eckey_errors import UnsupportedFormatForKeyKindError
from .key_representation import KeyRepresentation

# cryptography curve classes for the supported curves, by vendor name
CRYPTOGRAPHY_CURVES = {
    'prime256v1': ec.SECP256R1,
    'secp256k1': ec.SECP256K1,
    'secp384r1': ec.SECP384R1,
    'secp521r1': ec.SECP521R1,
}

# Hash algorithms usable for ECDSA, keyed by normalized name
HASH_ALGORITHMS = {
    'SHA1': hashes.SHA1,
    'SHA224': hashes.SHA224,
    'SHA256': hashes.SHA256,
    'SHA384': hashes.SHA384,
    'SHA512': hashes.SHA512,
    'SHA3224': hashes.SHA3_224,
    'SHA3256': hashes.SHA3_256,
    'SHA3384': hashes.SHA3_384,
    'SHA3512': hashes.SHA3_512,
}


def hash_algorithm(name):
    """
    Look up a hash algorithm by name

    Matching ignores case, dashes and underscores ('sha256', 'SHA-256', 'SHA3_512')

    :param name: hash algorithm name
    :return: cryptography HashAlgorithm instance
    :raises ValueError: if the hash is not supported
    """
    normalized = name.upper().replace('-', '').replace('_', '')
    try:
        return HASH_ALGORITHMS[normalized]()
    except KeyError:
        raise ValueError("Unsupported hash algorithm '{}'".format(name)) from None


class ExternalCryptoProvider(ABC):
    """
    Interface of the crypto primitives consumed by ECKey
    """

    @abstractmethod
    def generate(self, curve):
        """
        Generate a new random key pair

        :param curve: curve to generate the key on
        :type curve: CurveDescriptor
        :return: private KeyRepresentation including the public point
        """

    @abstractmethod
    def derive_public_point(self, key):
        """
        Compute the public point of a private key

        :param key: private KeyRepresentation
        :return: KeyRepresentation with the same d and the public point set
        """

    @abstractmethod
    def ecdh(self, key, peer):
        """
        Compute an ECDH shared secret

        :param key: own private KeyRepresentation
        :param peer: peer public key, a KeyRepresentation or uncompressed point bytes
        :return: shared secret bytes
        """

    @abstractmethod
    def sign(self, key, hash_name, message):
        """
        Create an ECDSA signature

        :param key: private KeyRepresentation
        :param hash_name: hash algorithm name, e.g. 'SHA256'
        :param message: data to sign
        :type message: bytes
        :return: DER encoded signature bytes
        """

    @abstractmethod
    def verify(self, key, hash_name, message, signature):
        """
        Verify an ECDSA signature

        :param key: KeyRepresentation with a public point (or private, the point is then derived)
        :param hash_name: hash algorithm name, e.g. 'SHA256'
        :param message: signed data
        :param signature: DER encoded signature
        :return: True if the signature is valid
        :rtype: bool
        """


class CryptographyProvider(ExternalCryptoProvider):
    """
    ExternalCryptoProvider implemented with the cryptography package
    """

    @staticmethod
    def _curve(curve):
        return CRYPTOGRAPHY_CURVES[resolve(curve).vendor_name]()

    def _private_key(self, key):
        if not key.is_private:
            raise UnsupportedFormatForKeyKindError("Operation requires a private key")
        private_value = int.from_bytes(key.d, byteorder='big')
        if not key.has_public_point:
            return ec.derive_private_key(private_value, self._curve(key.curve))
        public_numbers = self._public_numbers(key)
        return ec.EllipticCurvePrivateNumbers(private_value, public_numbers).private_key()

    def _public_numbers(self, key):
        return ec.EllipticCurvePublicNumbers(int.from_bytes(key.x, byteorder='big'),
                                             int.from_bytes(key.y, byteorder='big'),
                                             self._curve(key.curve))

    def _public_key(self, key):
        if not key.has_public_point:
            return self._private_key(key).public_key()
        return self._public_numbers(key).public_key()

    @staticmethod
    def _from_private_key(curve, private_key):
        width = curve.field_byte_width
        private_value = private_key.private_numbers().private_value
        public_numbers = private_key.public_key().public_numbers()
        return KeyRepresentation(curve,
                                 public_numbers.x.to_bytes(width, byteorder='big'),
                                 public_numbers.y.to_bytes(width, byteorder='big'),
                                 private_value.to_bytes(width, byteorder='big'))

    def generate(self, curve):
        logger = getLogger(__name__)
        curve = resolve(curve)
        logger.debug("Generating new key on curve %s", curve.vendor_name)
        private_key = ec.generate_private_key(self._curve(curve))
        return self._from_private_key(curve, private_key)

    def derive_public_point(self, key):
        if key.has_public_point:
            return key
        return self._from_private_key(key.curve, self._private_key(key))

    def ecdh(self, key, peer):
        if isinstance(peer, KeyRepresentation):
            peer_public_key = self._public_key(peer)
        else:
            # Validates prefix and length before handing the point over
            split_uncompressed_point(peer, key.curve.field_byte_width)
            peer_public_key = ec.EllipticCurvePublicKey.from_encoded_point(self._curve(key.curve), bytes(peer))
        return self._private_key(key).exchange(ec.ECDH(), peer_public_key)

    def sign(self, key, hash_name, message):
        return self._private_key(key).sign(bytes(message), ec.ECDSA(hash_algorithm(hash_name)))

    def verify(self, key, hash_name, message, signature):
        try:
            self._public_key(key).verify(bytes(signature), bytes(message), ec.ECDSA(hash_algorithm(hash_name)))
        except crypto_exceptions.InvalidSignature:
            return False
        return True


DEFAULT_PROVIDER = CryptographyProvider()
