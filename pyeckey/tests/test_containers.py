"""
Unit tests for the SEC1, PKCS8 and SPKI container codecs

The expected encodings are the ones produced by the OpenSSL toolchain.
"""
import unittest

from pyeckey import containers
from pyeckey import curves
from pyeckey import der
from pyeckey.eckey_errors import CurveMismatchError, InvalidEncodingError, MalformedDerError
from pyeckey.eckey_errors import MissingFieldError, UnknownCurveError, UnsupportedFormatForKeyKindError
from pyeckey.key_representation import KeyRepresentation
from pyeckey.tests.data import fixtures


def _pkcs8(version, algorithm_oid, curve_oid, inner):
    return der.sequence(der.integer(bytes([version])),
                        der.sequence(der.object_identifier(algorithm_oid), der.object_identifier(curve_oid)),
                        der.octet_string(inner))


class TestContainersAgainstOpenssl(unittest.TestCase):
    """
    Byte exact decoding and re-encoding of OpenSSL generated keys
    """

    def test_sec1_round_trip(self):
        for name in fixtures.CURVE_NAMES:
            with self.subTest(curve=name):
                sec1_der = fixtures.pem_der(fixtures.read_text(name + '.priv-openssl.pem'))
                key = containers.decode_sec1(sec1_der)
                self.assertEqual(key.curve, curves.resolve(name))
                self.assertTrue(key.is_private)
                self.assertTrue(key.has_public_point)
                self.assertEqual(containers.encode_sec1(key), sec1_der)

    def test_pkcs8_round_trip(self):
        for name in fixtures.CURVE_NAMES:
            with self.subTest(curve=name):
                pkcs8_der = fixtures.pem_der(fixtures.read_text(name + '.priv-pkcs8.pem'))
                key = containers.decode_pkcs8(pkcs8_der)
                self.assertEqual(key.curve, curves.resolve(name))
                self.assertEqual(containers.encode_pkcs8(key), pkcs8_der)

    def test_spki_round_trip(self):
        for name in fixtures.CURVE_NAMES:
            with self.subTest(curve=name):
                spki_der = fixtures.pem_der(fixtures.read_text(name + '.pub.pem'))
                key = containers.decode_spki(spki_der)
                self.assertFalse(key.is_private)
                self.assertEqual(containers.encode_spki(key), spki_der)

    def test_all_containers_hold_the_same_key(self):
        for name in fixtures.CURVE_NAMES:
            with self.subTest(curve=name):
                keys = fixtures.curve_fixtures(name)
                sec1_key = containers.decode_sec1(fixtures.pem_der(keys['priv']))
                pkcs8_key = containers.decode_pkcs8(fixtures.pem_der(keys['pkcs8']))
                spki_key = containers.decode_spki(fixtures.pem_der(keys['pub']))
                self.assertEqual(sec1_key, pkcs8_key)
                self.assertEqual(sec1_key.public(), spki_key)

    def test_coordinates_are_padded(self):
        for name in fixtures.CURVE_NAMES:
            with self.subTest(curve=name):
                key = containers.decode_sec1(fixtures.pem_der(fixtures.read_text(name + '.priv-openssl.pem')))
                width = fixtures.FIELD_BYTE_WIDTHS[name]
                self.assertEqual(len(key.x), width)
                self.assertEqual(len(key.y), width)
                self.assertEqual(len(key.d), width)

    def test_private_key_with_leading_zero(self):
        key = containers.decode_sec1(fixtures.pem_der(fixtures.read_text('short-d.priv-openssl.pem')))
        self.assertEqual(key.d.hex(), fixtures.SHORT_D_HEX)
        self.assertEqual(key.x.hex(), fixtures.SHORT_D_X_HEX)
        self.assertEqual(key.y.hex(), fixtures.SHORT_D_Y_HEX)
        pkcs8_der = fixtures.pem_der(fixtures.read_text('short-d.priv-pkcs8.pem'))
        self.assertEqual(containers.encode_pkcs8(key), pkcs8_der)


class TestContainerErrors(unittest.TestCase):
    """
    Rejection of malformed and inconsistent containers
    """

    def setUp(self):
        self.p256_key = containers.decode_sec1(
            fixtures.pem_der(fixtures.read_text('prime256v1.priv-openssl.pem')))
        self.k1_key = containers.decode_sec1(
            fixtures.pem_der(fixtures.read_text('secp256k1.priv-openssl.pem')))

    def test_truncated_pkcs8(self):
        pkcs8_der = fixtures.pem_der(fixtures.read_text('prime256v1.priv-pkcs8.pem'))
        with self.assertRaises(MalformedDerError):
            containers.decode_pkcs8(pkcs8_der[:-1])

    def test_truncated_spki(self):
        spki_der = fixtures.pem_der(fixtures.read_text('secp384r1.pub.pem'))
        with self.assertRaises(MalformedDerError):
            containers.decode_spki(spki_der[:len(spki_der) // 2])

    def test_curve_mismatch(self):
        # secp256k1 parameters inside a prime256v1 PKCS8 container
        inner = containers.encode_sec1(self.k1_key, include_parameters=True)
        data = _pkcs8(0, curves.ID_EC_PUBLIC_KEY, curves.PRIME256V1.oid, inner)
        with self.assertRaises(CurveMismatchError):
            containers.decode_pkcs8(data)

    def test_pkcs8_with_matching_inner_parameters(self):
        inner = containers.encode_sec1(self.p256_key, include_parameters=True)
        data = _pkcs8(0, curves.ID_EC_PUBLIC_KEY, curves.PRIME256V1.oid, inner)
        self.assertEqual(containers.decode_pkcs8(data), self.p256_key)

    def test_pkcs8_wrong_version(self):
        inner = containers.encode_sec1(self.p256_key, include_parameters=False)
        data = _pkcs8(1, curves.ID_EC_PUBLIC_KEY, curves.PRIME256V1.oid, inner)
        with self.assertRaises(MalformedDerError):
            containers.decode_pkcs8(data)

    def test_pkcs8_not_an_ec_key(self):
        # Algorithm is not id-ecPublicKey
        inner = containers.encode_sec1(self.p256_key, include_parameters=False)
        data = _pkcs8(0, "1.2.840.10045.4.3.2", curves.PRIME256V1.oid, inner)
        with self.assertRaises(MalformedDerError):
            containers.decode_pkcs8(data)

    def test_pkcs8_unknown_curve(self):
        inner = containers.encode_sec1(self.p256_key, include_parameters=False)
        data = _pkcs8(0, curves.ID_EC_PUBLIC_KEY, "1.3.36.3.3.2.8.1.1.7", inner)
        with self.assertRaises(UnknownCurveError):
            containers.decode_pkcs8(data)

    def test_sec1_without_curve(self):
        data = containers.encode_sec1(self.p256_key, include_parameters=False)
        with self.assertRaises(MissingFieldError):
            containers.decode_sec1(data)
        self.assertEqual(containers.decode_sec1(data, curves.PRIME256V1), self.p256_key)

    def test_sec1_wrong_version(self):
        data = der.sequence(der.integer(b"\x02"), der.octet_string(self.p256_key.d),
                            der.explicit(0, der.object_identifier(curves.PRIME256V1.oid)))
        with self.assertRaises(MalformedDerError):
            containers.decode_sec1(data)

    def test_sec1_private_key_too_long(self):
        data = der.sequence(der.integer(b"\x01"), der.octet_string(b"\x01" * 33),
                            der.explicit(0, der.object_identifier(curves.PRIME256V1.oid)))
        with self.assertRaises(InvalidEncodingError):
            containers.decode_sec1(data)

    def test_sec1_short_private_key_is_padded(self):
        data = der.sequence(der.integer(b"\x01"), der.octet_string(b"\x01" * 31),
                            der.explicit(0, der.object_identifier(curves.PRIME256V1.oid)))
        key = containers.decode_sec1(data)
        self.assertEqual(key.d, b"\x00" + b"\x01" * 31)

    def test_sec1_without_public_key(self):
        data = der.sequence(der.integer(b"\x01"), der.octet_string(self.p256_key.d),
                            der.explicit(0, der.object_identifier(curves.PRIME256V1.oid)))
        key = containers.decode_sec1(data)
        self.assertTrue(key.is_private)
        self.assertFalse(key.has_public_point)
        self.assertIsNone(key.x)
        self.assertIsNone(key.y)
        self.assertEqual(containers.encode_sec1(key), data)
        with self.assertRaises(UnsupportedFormatForKeyKindError):
            containers.encode_spki(key)

    def test_spki_compressed_point(self):
        data = der.sequence(der.sequence(der.object_identifier(curves.ID_EC_PUBLIC_KEY),
                                         der.object_identifier(curves.PRIME256V1.oid)),
                            der.bit_string(b"\x02" + self.p256_key.x))
        with self.assertRaises(InvalidEncodingError):
            containers.decode_spki(data)

    def test_spki_point_of_other_curve_width(self):
        p384 = containers.decode_spki(fixtures.pem_der(fixtures.read_text('secp384r1.pub.pem')))
        data = der.sequence(der.sequence(der.object_identifier(curves.ID_EC_PUBLIC_KEY),
                                         der.object_identifier(curves.PRIME256V1.oid)),
                            der.bit_string(p384.public_point))
        with self.assertRaises(InvalidEncodingError):
            containers.decode_spki(data)

    def test_private_formats_need_private_key(self):
        public_key = self.p256_key.public()
        with self.assertRaises(UnsupportedFormatForKeyKindError):
            containers.encode_sec1(public_key)
        with self.assertRaises(UnsupportedFormatForKeyKindError):
            containers.encode_pkcs8(public_key)

    def test_spki_of_private_key_is_public_part(self):
        spki_der = fixtures.pem_der(fixtures.read_text('prime256v1.pub.pem'))
        self.assertEqual(containers.encode_spki(self.p256_key), spki_der)

    def test_private_key_without_point_round_trips_through_pkcs8(self):
        key = KeyRepresentation(curves.SECP521R1, d=b"\x01" * 66)
        self.assertEqual(containers.decode_pkcs8(containers.encode_pkcs8(key)), key)

    def test_sec1_empty_private_key(self):
        data = der.sequence(der.integer(b"\x01"), der.octet_string(b""),
                            der.explicit(0, der.object_identifier(curves.PRIME256V1.oid)))
        with self.assertRaises(InvalidEncodingError):
            containers.decode_sec1(data)

    def test_non_minimal_version(self):
        data = der.sequence(der.integer(b"\x00\x01"), der.octet_string(self.p256_key.d),
                            der.explicit(0, der.object_identifier(curves.PRIME256V1.oid)))
        with self.assertRaises(MalformedDerError):
            containers.decode_sec1(data)
        inner = containers.encode_sec1(self.p256_key, include_parameters=False)
        data = der.sequence(der.integer(b"\x00\x00"),
                            der.sequence(der.object_identifier(curves.ID_EC_PUBLIC_KEY),
                                         der.object_identifier(curves.PRIME256V1.oid)),
                            der.octet_string(inner))
        with self.assertRaises(MalformedDerError):
            containers.decode_pkcs8(data)
