"""
Key fixtures used by the unit tests

The PEM files in this folder were generated with the OpenSSL toolchain:

    openssl ecparam -name <curve> -genkey -noout -out <curve>.priv-openssl.pem
    openssl pkcs8 -topk8 -nocrypt -in <curve>.priv-openssl.pem -out <curve>.priv-pkcs8.pem
    openssl ec -in <curve>.priv-openssl.pem -pubout -out <curve>.pub.pem

The JSON files hold the same keys as JSON Web Keys.
"""
import os
import re
import json
import base64

DATA_FOLDER = os.path.dirname(os.path.abspath(__file__))

CURVE_NAMES = ['prime256v1', 'secp384r1', 'secp521r1', 'secp256k1']

FIELD_BYTE_WIDTHS = {
    'prime256v1': 32,
    'secp256k1': 32,
    'secp384r1': 48,
    'secp521r1': 66,
}

# Public key from RFC 7515 appendix A.3 (ES256), as used in the RFC 7517 examples
RFC_P256_PUBLIC_JWK = {
    "kty": "EC",
    "crv": "P-256",
    "x": "f83OJ3D2xF1Bg8vub9tLe1gHMzV76e8Tus9uPHvRVEU",
    "y": "x_FEzRu9m36HLN_tue659LNpXW6pCyStikYjKIWI5a0",
}
RFC_P256_D = "jpsQnnGQmL-YBIffH1136cspYG6-0iY7X1fCE9-E9LI"
RFC_P256_X_HEX = "7fcdce2770f6c45d4183cbee6fdb4b7b580733357be9ef13bacf6e3c7bd15445"
RFC_P256_Y_HEX = "c7f144cd1bbd9b7e872cdfedb9eeb9f4b3695d6ea90b24ad8a4623288588e5ad"
RFC_P256_PUBLIC_PEM = "-----BEGIN PUBLIC KEY-----\n"\
                      "MFkwEwYHKoZIzj0CAQYIKoZIzj0DAQcDQgAEf83OJ3D2xF1Bg8vub9tLe1gHMzV7\n"\
                      "6e8Tus9uPHvRVEXH8UTNG72bfocs3+257rn0s2ldbqkLJK2KRiMohYjlrQ==\n"\
                      "-----END PUBLIC KEY-----\n"

# prime256v1 key whose private scalar has a leading zero byte (short-d.*.pem)
SHORT_D_HEX = "00ea2f6e9542a007f357ea572a47ac4e828bab91c0a3fe3da00fd7451eee1efc"
SHORT_D_X_HEX = "5754e02ffdd058aa205d2cbd483db18ada50bbd06a62781c27e9634d3b27972e"
SHORT_D_Y_HEX = "33cdb98b707890e63cc335e12d118ce591544f5d96b366c268a4ecd7816c1596"
SHORT_D_JWK = {
    "kty": "EC",
    "crv": "P-256",
    "x": "V1TgL_3QWKogXSy9SD2xitpQu9BqYngcJ-ljTTsnly4",
    "y": "M825i3B4kOY8wzXhLRGM5ZFUT12Ws2bCaKTs14FsFZY",
    "d": "6i9ulUKgB_NX6lcqR6xOgourkcCj_j2gD9dFHu4e_A",
}

# Shared secret of ecdh1.pem and ecdh2.pem (openssl pkeyutl -derive)
ECDH_SECRET_HEX = "5790c88a3f4677fd76204e97e07f119935dc6a11241e5f51d45cd0ca0e04275c"

_PEM_BODY_RE = re.compile(r'-+BEGIN .* KEY-+([\s\S]+?)-+END .* KEY-+', re.MULTILINE)


def read_text(filename):
    """Read a fixture file as text"""
    with open(os.path.join(DATA_FOLDER, filename), 'r') as file:
        return file.read()

def read_json(filename):
    """Read a JSON fixture file"""
    return json.loads(read_text(filename))

def pem_body(pem_text):
    """The base64 body of PEM text, whitespace removed"""
    return re.sub(r'\s', '', _PEM_BODY_RE.search(pem_text).group(1))

def pem_der(pem_text):
    """The DER bytes inside PEM text"""
    return base64.b64decode(pem_body(pem_text))

def curve_fixtures(name):
    """
    All fixtures for one curve

    :param name: vendor curve name
    :return: dict with the PEM texts 'pkcs8', 'priv' (SEC1) and 'pub' (SPKI)
        and the JWK dicts 'priv_jwk' and 'pub_jwk'
    """
    return {
        'pkcs8': read_text(name + '.priv-pkcs8.pem'),
        'priv': read_text(name + '.priv-openssl.pem'),
        'pub': read_text(name + '.pub.pem'),
        'priv_jwk': read_json(name + '.priv.json'),
        'pub_jwk': read_json(name + '.pub.json'),
    }
