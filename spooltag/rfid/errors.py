"""Exceptions raised while reading and decoding spool tags."""


class TagError(Exception):
    """A tag scan failed. The whole read is aborted."""


class MissingUidError(TagError):
    def __init__(self):
        super().__init__("Tag UID is missing")


class AuthenticationError(TagError):
    """Key A was rejected for a sector."""

    def __init__(self, sector: int):
        super().__init__(f"Authentication failed for sector {sector}")
        self.sector = sector


class TagIOError(TagError):
    """Communication with the tag failed during connect or block read."""


class DecodeError(ValueError):
    """Tag bytes could not be decoded into a filament record."""


class OutOfBoundsError(DecodeError):
    pass


class UnsupportedWidthError(DecodeError):
    pass


class InvalidDateTimeError(DecodeError):
    pass


class InsufficientDataError(DecodeError):
    pass
