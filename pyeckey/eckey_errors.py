"""
pyeckey specific exceptions
"""

class EckeyError(Exception):
    """
    Base class for all pyeckey specific exceptions
    """

    def __init__(self, msg=None, code=0):
        super().__init__(msg)
        self.msg = msg
        self.code = code

class UnknownCurveError(EckeyError):
    """
    Signals a curve name or OID that is not one of the supported curves
    """

class CurveMismatchError(EckeyError):
    """
    Signals conflicting curve identifiers inside one decoded container
    """

class MalformedDerError(EckeyError):
    """
    Signals structurally invalid DER data

    The offset attribute holds the byte offset where decoding failed
    """

    def __init__(self, msg=None, offset=0, code=0):
        super().__init__("{} (at offset {})".format(msg, offset), code)
        self.offset = offset

class MalformedPemError(EckeyError):
    """
    Signals missing or mismatched PEM markers or an invalid base64 body
    """

class UnknownPemKindError(EckeyError):
    """
    Signals a PEM label that is not one of the supported key containers
    """

class InvalidEncodingError(EckeyError):
    """
    Signals coordinate bytes inconsistent with the curve field width
    """

class CoordinateTooLongError(EckeyError):
    """
    Signals a supplied coordinate exceeding the curve field width
    """

class MissingFieldError(EckeyError):
    """
    Signals a required input field that is absent
    """

class UnsupportedFormatForKeyKindError(EckeyError):
    """
    Signals an output format that does not fit a public or private key
    """

class UnknownFormatError(EckeyError):
    """
    Signals a format name that is not recognized
    """
