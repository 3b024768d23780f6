"""
Minimal ASN.1 DER encoding and decoding

Only the primitives needed by the EC key containers are supported: SEQUENCE,
INTEGER, OCTET STRING, BIT STRING, OBJECT IDENTIFIER and explicit context
tags.  Tag/length framing is done with asn1crypto.parser, object identifiers
are converted with asn1crypto.core.ObjectIdentifier.

Decoding is driven by a shape: an ordered list of Field entries describing
the children expected inside a SEQUENCE.  Offsets reported in errors are
always absolute offsets into the buffer handed to decode().
"""
from collections import namedtuple
from logging import getLogger

from asn1crypto import parser
from asn1crypto.core import ObjectIdentifier

from .eckey_errors import MalformedDerError

# Tag classes
CLASS_UNIVERSAL = 0
CLASS_CONTEXT = 2

# Encoding methods
METHOD_PRIMITIVE = 0
METHOD_CONSTRUCTED = 1

# Universal tag numbers
TAG_INTEGER = 2
TAG_BIT_STRING = 3
TAG_OCTET_STRING = 4
TAG_OBJECT_IDENTIFIER = 6
TAG_SEQUENCE = 16

_UNIVERSAL_NAMES = {
    TAG_INTEGER: "INTEGER",
    TAG_BIT_STRING: "BIT STRING",
    TAG_OCTET_STRING: "OCTET STRING",
    TAG_OBJECT_IDENTIFIER: "OBJECT IDENTIFIER",
    TAG_SEQUENCE: "SEQUENCE",
}


def _tag_name(class_, tag):
    if class_ == CLASS_UNIVERSAL:
        return _UNIVERSAL_NAMES.get(tag, "universal tag {}".format(tag))
    if class_ == CLASS_CONTEXT:
        return "[{}]".format(tag)
    return "class {} tag {}".format(class_, tag)


# Encoding

def sequence(*children):
    """
    Encode a SEQUENCE

    :param children: already encoded child elements, in order
    :return: DER bytes
    """
    return parser.emit(CLASS_UNIVERSAL, METHOD_CONSTRUCTED, TAG_SEQUENCE, b"".join(children))

def integer(contents):
    """
    Encode an INTEGER from contents already shaped as DER integer bytes

    See ecc_conversions.to_der_integer()
    """
    return parser.emit(CLASS_UNIVERSAL, METHOD_PRIMITIVE, TAG_INTEGER, bytes(contents))

def octet_string(data):
    """Encode an OCTET STRING"""
    return parser.emit(CLASS_UNIVERSAL, METHOD_PRIMITIVE, TAG_OCTET_STRING, bytes(data))

def bit_string(data):
    """Encode a byte aligned BIT STRING (zero unused bits)"""
    return parser.emit(CLASS_UNIVERSAL, METHOD_PRIMITIVE, TAG_BIT_STRING, b"\x00" + bytes(data))

def object_identifier(oid):
    """
    Encode an OBJECT IDENTIFIER

    :param oid: dotted OID string
    """
    return parser.emit(CLASS_UNIVERSAL, METHOD_PRIMITIVE, TAG_OBJECT_IDENTIFIER, ObjectIdentifier(oid).contents)

def explicit(tag, child):
    """
    Wrap an encoded element in an explicit context tag [tag]
    """
    return parser.emit(CLASS_CONTEXT, METHOD_CONSTRUCTED, tag, child)


# Decoding

class Field(namedtuple('Field', ['name', 'class_', 'method', 'tag', 'optional'])):
    """
    One expected child inside a SEQUENCE shape
    """
    __slots__ = ()

    def matches(self, element):
        """Check whether a decoded element has this field's tag"""
        return (element.class_, element.method, element.tag) == (self.class_, self.method, self.tag)

    def describe(self):
        """Human readable tag name"""
        return _tag_name(self.class_, self.tag)

def integer_field(name, optional=False):
    """Shape entry for an INTEGER"""
    return Field(name, CLASS_UNIVERSAL, METHOD_PRIMITIVE, TAG_INTEGER, optional)

def octet_string_field(name, optional=False):
    """Shape entry for an OCTET STRING"""
    return Field(name, CLASS_UNIVERSAL, METHOD_PRIMITIVE, TAG_OCTET_STRING, optional)

def bit_string_field(name, optional=False):
    """Shape entry for a BIT STRING"""
    return Field(name, CLASS_UNIVERSAL, METHOD_PRIMITIVE, TAG_BIT_STRING, optional)

def oid_field(name, optional=False):
    """Shape entry for an OBJECT IDENTIFIER"""
    return Field(name, CLASS_UNIVERSAL, METHOD_PRIMITIVE, TAG_OBJECT_IDENTIFIER, optional)

def sequence_field(name, optional=False):
    """Shape entry for a nested SEQUENCE"""
    return Field(name, CLASS_UNIVERSAL, METHOD_CONSTRUCTED, TAG_SEQUENCE, optional)

def explicit_field(name, tag, optional=False):
    """Shape entry for an explicit context tag [tag]"""
    return Field(name, CLASS_CONTEXT, METHOD_CONSTRUCTED, tag, optional)


class DerElement(namedtuple('DerElement', ['class_', 'method', 'tag', 'offset', 'header', 'contents', 'data'])):
    """
    One decoded tag-length-value element

    offset is the absolute position of the element's first header byte in
    data, the buffer the element was decoded from.
    """
    __slots__ = ()

    @property
    def content_offset(self):
        """Absolute offset of the first contents byte"""
        return self.offset + len(self.header)

    @property
    def end(self):
        """Absolute offset of the first byte after this element"""
        return self.content_offset + len(self.contents)

    @property
    def encoded(self):
        """The complete encoding of this element"""
        return self.header + self.contents

    def describe(self):
        """Human readable tag name"""
        return _tag_name(self.class_, self.tag)

    def children(self):
        """
        Decode the elements contained in a constructed element

        :return: list of DerElement
        """
        result = []
        position = self.content_offset
        while position < self.end:
            child = read_element(self.data, position, self.end)
            result.append(child)
            position = child.end
        return result

    def as_oid(self):
        """
        Decode the contents of an OBJECT IDENTIFIER

        :return: dotted OID string
        """
        try:
            return ObjectIdentifier.load(self.encoded).dotted
        except ValueError as error:
            raise MalformedDerError("Invalid OBJECT IDENTIFIER: {}".format(error), self.offset) from error

    def as_bit_string(self):
        """
        Decode the contents of a byte aligned BIT STRING

        :return: the bit string bytes without the unused bits byte
        """
        if not self.contents or self.contents[0] != 0:
            raise MalformedDerError("BIT STRING is empty or not byte aligned", self.content_offset)
        return self.contents[1:]

    def unwrap_explicit(self):
        """
        Decode the single element inside an explicit context tag

        :return: DerElement
        """
        inner = read_element(self.data, self.content_offset, self.end)
        if inner.end != self.end:
            raise MalformedDerError("Unexpected data after {} content".format(self.describe()), inner.end)
        return inner


def read_element(data, offset=0, end=None):
    """
    Decode one element starting at offset

    Both short and long form lengths are accepted, indefinite lengths are not.

    :param data: buffer to decode from
    :type data: bytes
    :param offset: absolute offset of the element
    :param end: absolute offset the element must not extend past
    :return: DerElement
    :raises MalformedDerError: on bad tags, bad lengths or truncated data
    """
    data = bytes(data)
    if end is None:
        end = len(data)
    if offset >= end:
        raise MalformedDerError("Unexpected end of data", offset)
    try:
        class_, method, tag, header, contents, trailer = parser.parse(data[offset:end])
    except ValueError as error:
        raise MalformedDerError(str(error), offset) from error
    if trailer:
        raise MalformedDerError("Indefinite length encoding is not allowed in DER", offset)
    return DerElement(class_, method, tag, offset, header, contents, data)


def decode_children(element, shape):
    """
    Match the children of a constructed element against a shape

    :param element: constructed DerElement, e.g. a SEQUENCE
    :param shape: list of Field
    :return: dict mapping field names to DerElement, or None for absent optional fields
    :raises MalformedDerError: if a required field is missing or unexpected children remain
    """
    logger = getLogger(__name__)
    children = element.children()
    result = {}
    index = 0
    for field in shape:
        if index < len(children) and field.matches(children[index]):
            result[field.name] = children[index]
            index += 1
        elif field.optional:
            result[field.name] = None
        else:
            if index < len(children):
                found = children[index]
                raise MalformedDerError("Expected {} for '{}', found {}".format(
                    field.describe(), field.name, found.describe()), found.offset)
            raise MalformedDerError("Missing {} for '{}'".format(field.describe(), field.name), element.end)
    if index < len(children):
        raise MalformedDerError("Unexpected {} in {}".format(
            children[index].describe(), element.describe()), children[index].offset)
    logger.debug("Decoded %s with fields %s", element.describe(),
                 [name for name, value in result.items() if value is not None])
    return result


def decode(data, shape, offset=0, end=None):
    """
    Decode a SEQUENCE occupying data[offset:end] exactly

    :param data: buffer to decode from
    :type data: bytes
    :param shape: list of Field describing the expected children
    :param offset: absolute offset of the SEQUENCE
    :param end: absolute end of the region holding the SEQUENCE (default: end of data)
    :return: dict mapping field names to DerElement (or None for absent optional fields)
    :raises MalformedDerError: if data does not have the expected shape
    """
    data = bytes(data)
    if end is None:
        end = len(data)
    element = read_element(data, offset, end)
    if (element.class_, element.method, element.tag) != (CLASS_UNIVERSAL, METHOD_CONSTRUCTED, TAG_SEQUENCE):
        raise MalformedDerError("Expected SEQUENCE, found {}".format(element.describe()), offset)
    if element.end != end:
        raise MalformedDerError("Unexpected data after SEQUENCE", element.end)
    return decode_children(element, shape)
