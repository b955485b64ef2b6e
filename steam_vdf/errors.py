"""Exceptions raised by the VDF reader and writer."""


class VdfError(Exception):
    """Base class for VDF errors."""


class MalformedDocument(VdfError):
    """The line stream does not form a valid document."""

    def __init__(self, message: str, line_number: int | None = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class UnsupportedValue(VdfError):
    """A property holds something other than a string or object node."""

    def __init__(self, key: str, value: object):
        super().__init__(
            f"cannot serialize {key!r}: unsupported value {type(value).__name__}"
        )
        self.key = key
        self.value = value
