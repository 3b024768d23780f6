"""
Python EC key format conversion
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

pyeckey represents elliptic curve keys on the curves prime256v1 (P-256),
secp256k1, secp384r1 (P-384) and secp521r1 (P-521) and converts them between
PEM, PKCS8 (RFC 5208), SEC1 (RFC 5915), SPKI (RFC 5280) and JSON Web Key
(RFC 7517) encodings.

Overview
~~~~~~~~

The encode/decode layer is implemented in this package:

    * curves: registry of the supported curves (vendor name, JWA name, OID)
    * ecc_conversions: coordinate padding, DER integers and uncompressed points
    * der: minimal ASN.1 DER encoding and shape driven decoding
    * containers: SEC1, PKCS8 and SPKI codecs
    * pem: PEM armor
    * jwk: JSON Web Key codec

Key generation, ECDH and ECDSA are delegated to a crypto provider, by default
one built on the cryptography package.

Converting a key
~~~~~~~~~~~~~~~~

.. code-block:: python

    from pyeckey.eckey import ECKey

    with open("private-key.pem", "r") as keyfile:
        key = ECKey(keyfile.read())

    # PKCS8 DER, SEC1 PEM text and JWK
    pkcs8_der = key.to_bytes("pkcs8")
    sec1_pem = key.to_string("rfc5915")
    jwk = key.to_json()

    # SPKI PEM of the public key
    public_pem = key.as_public().to_string("pem")

Creating keys and using them
~~~~~~~~~~~~~~~~~~~~~~~~~~~~

.. code-block:: python

    from pyeckey.eckey import ECKey

    key = ECKey.create("P-521")
    peer = ECKey.create("P-521")
    secret = key.compute_secret(peer.as_public())

    signature = key.create_sign("SHA512").update("message").sign()
    valid = key.as_public().create_verify("SHA512").update("message").verify(signature)

Logging
~~~~~~~
This package uses the Python logging module for publishing log messages to
library users.  A basic configuration can be used (see example below), but for
best results a more thorough configuration is recommended in order to control
the verbosity of output from dependencies in the stack which also use logging.
See logging.yaml which is included in the package (although only used for CLI)

Simple logging configuration example:

.. code-block:: python

    import logging
    logging.basicConfig(format="%(levelname)s: %(message)s", level=logging.WARNING)

Dependencies
~~~~~~~~~~~~
pyeckey depends on asn1crypto for DER framing and PEM armor, and on
cryptography for the crypto primitives.
"""

__version__ = "1.0.0"

# The GIT commit ID and build date are filled in when building the package
COMMIT_ID = 'N/A'
BUILD_DATE = 'N/A'

import logging
logging.getLogger(__name__).addHandler(logging.NullHandler())
