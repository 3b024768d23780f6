"""
Canonical in-memory representation of an EC key

Every codec in this package converts to and from KeyRepresentation.
"""
from .curves import CurveDescriptor
from .ecc_conversions import pad_to_width, join_uncompressed_point
from .eckey_errors import MissingFieldError


class KeyRepresentation():
    """
    Immutable EC key: a curve, an optional public point (x, y) and an optional
    private scalar d

    x, y and d are stored as big-endian bytes padded to the curve field width.
    The public point is either complete or absent; a private key decoded from
    a container without the public point has x and y set to None.
    """
    __slots__ = ('_curve', '_x', '_y', '_d')

    def __init__(self, curve, x=None, y=None, d=None):
        """
        :param curve: the key's curve
        :type curve: CurveDescriptor
        :param x: public x coordinate, at most field width bytes
        :param y: public y coordinate, at most field width bytes
        :param d: private scalar, at most field width bytes
        :raises CoordinateTooLongError: if a value exceeds the curve field width
        :raises MissingFieldError: if only one of x and y is given, or no key material at all
        """
        if not isinstance(curve, CurveDescriptor):
            raise TypeError("curve must be a CurveDescriptor, not {}".format(type(curve).__name__))
        if (x is None) != (y is None):
            raise MissingFieldError("Public coordinates x and y must be given together")
        if x is None and d is None:
            raise MissingFieldError("A key needs a public point, a private scalar or both")
        width = curve.field_byte_width
        self._curve = curve
        self._x = None if x is None else pad_to_width(x, width)
        self._y = None if y is None else pad_to_width(y, width)
        self._d = None if d is None else pad_to_width(d, width)

    @property
    def curve(self):
        """The key's CurveDescriptor"""
        return self._curve

    @property
    def x(self):
        return self._x

    @property
    def y(self):
        return self._y

    @property
    def d(self):
        return self._d

    @property
    def is_private(self):
        """True if the private scalar is present"""
        return self._d is not None

    @property
    def has_public_point(self):
        """True if x and y are present"""
        return self._x is not None

    @property
    def public_point(self):
        """The uncompressed point 0x04 || x || y, or None"""
        if not self.has_public_point:
            return None
        return join_uncompressed_point(self._x, self._y)

    def public(self):
        """
        Return the public part of this key

        :return: self if already public, else a new KeyRepresentation without d
        :raises MissingFieldError: if the public point is not known
        """
        if not self.is_private:
            return self
        if not self.has_public_point:
            raise MissingFieldError("Public point of this {} key is not known".format(self._curve))
        return KeyRepresentation(self._curve, self._x, self._y)

    def __eq__(self, other):
        if not isinstance(other, KeyRepresentation):
            return NotImplemented
        return (self._curve, self._x, self._y, self._d) == (other.curve, other.x, other.y, other.d)

    def __hash__(self):
        return hash((self._curve, self._x, self._y, self._d))

    def __repr__(self):
        # Never include the private scalar
        return "KeyRepresentation(curve={}, private={}, x={}, y={})".format(
            self._curve.vendor_name, self.is_private,
            None if self._x is None else self._x.hex(),
            None if self._y is None else self._y.hex())
