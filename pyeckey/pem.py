"""
PEM (RFC 7468) wrapping of DER encoded keys
"""
import re
from logging import getLogger

import asn1crypto.pem

from .eckey_errors import MalformedPemError, UnknownPemKindError, UnknownFormatError

# Container format names mapped to their PEM labels
PEM_LABELS = {
    'pkcs8': "PRIVATE KEY",
    'rfc5915': "EC PRIVATE KEY",
    'spki': "PUBLIC KEY",
}
_FORMATS_BY_LABEL = {label: container for container, label in PEM_LABELS.items()}

# Non-key blocks that may precede the key
SKIPPED_LABELS = ("EC PARAMETERS",)

_BEGIN_RE = re.compile(r'^-----BEGIN ([^-]*)-----\s*$', re.MULTILINE)
_END_RE = re.compile(r'^-----END ([^-]*)-----\s*$', re.MULTILINE)
_BASE64_BODY_RE = re.compile(r'^[A-Za-z0-9+/=\s]*$')


def detect(data):
    """
    Check whether data looks like PEM text

    :param data: key data
    :type data: str or bytes
    :rtype: bool
    """
    if isinstance(data, str):
        data = data.encode('ascii', errors='replace')
    return asn1crypto.pem.detect(data)

def wrap(container, der_bytes):
    """
    Wrap DER bytes in PEM armor for the given container

    :param container: one of 'pkcs8', 'rfc5915' or 'spki'
    :param der_bytes: DER encoding of the container
    :type der_bytes: bytes
    :return: PEM text with 64 character lines and a trailing newline
    :rtype: str
    """
    try:
        label = PEM_LABELS[container]
    except KeyError:
        raise UnknownFormatError("No PEM label for format '{}'".format(container)) from None
    return asn1crypto.pem.armor(label, der_bytes).decode('ascii')

def _next_block(text, position):
    """
    Locate the next BEGIN/END block at or after position

    :return: tuple (label, begin match, end match), or None if no BEGIN marker follows
    :raises MalformedPemError: if the markers are mismatched or the body is not base64
    """
    begin = _BEGIN_RE.search(text, position)
    if begin is None:
        return None
    end = _END_RE.search(text, begin.end())
    if end is None:
        raise MalformedPemError("No PEM END marker found for '{}'".format(begin.group(1)))
    if begin.group(1) != end.group(1):
        raise MalformedPemError("PEM markers do not match: BEGIN '{}', END '{}'".format(
            begin.group(1), end.group(1)))
    if not _BASE64_BODY_RE.match(text[begin.end():end.start()]):
        raise MalformedPemError("PEM body is not valid base64")
    return begin.group(1), begin, end

def unwrap(text):
    """
    Remove PEM armor

    Blocks labelled 'EC PARAMETERS', as written in front of the key by
    ``openssl ecparam -genkey``, are skipped.

    :param text: PEM text holding one key
    :type text: str or bytes
    :return: tuple (container, der_bytes) where container is 'pkcs8', 'rfc5915' or 'spki'
    :raises MalformedPemError: if the markers are missing or mismatched, or the body is not base64
    :raises UnknownPemKindError: if the PEM label is not one of the supported key containers
    """
    logger = getLogger(__name__)
    if isinstance(text, bytes):
        try:
            text = text.decode('ascii')
        except UnicodeDecodeError as error:
            raise MalformedPemError("PEM data is not ASCII text") from error

    block = _next_block(text, 0)
    while block is not None and block[0] in SKIPPED_LABELS:
        logger.debug("Skipping PEM block '%s'", block[0])
        block = _next_block(text, block[2].end())
    if block is None:
        raise MalformedPemError("No PEM BEGIN marker found for a key")
    label, begin, end = block

    try:
        container = _FORMATS_BY_LABEL[label]
    except KeyError:
        raise UnknownPemKindError("Unsupported PEM kind '{}'".format(label)) from None

    try:
        _, _, der_bytes = asn1crypto.pem.unarmor(text[begin.start():end.end()].encode('ascii'))
    except ValueError as error:
        raise MalformedPemError("Unable to decode PEM body: {}".format(error)) from error
    logger.debug("Unwrapped %d DER bytes of '%s'", len(der_bytes), label)
    return container, der_bytes
