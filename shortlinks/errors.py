"""Exception types raised by the short link core."""


class ShortLinksError(Exception):
    """Base class for all short link errors."""


class CollisionError(ShortLinksError):
    """A short code is already taken in the store."""

    def __init__(self, short_code: str):
        super().__init__(f"Short code '{short_code}' already exists")
        self.short_code = short_code


class ExhaustedError(ShortLinksError):
    """Every candidate short code collided.

    Not expected with a 6 character alphanumeric space; seeing it means the
    code length or alphabet is too small for the current number of links.
    """

    def __init__(self, attempts: int):
        super().__init__(
            f"Unable to allocate a unique short code after {attempts} attempts"
        )
        self.attempts = attempts


class LinkNotFoundError(ShortLinksError, LookupError):
    """No link exists for the given short code or id."""

    def __init__(self, key):
        super().__init__(f"Link not found: {key}")
        self.key = key


class StoreUnavailable(ShortLinksError):
    """The link store failed transiently or timed out."""


class InvalidLinkError(ShortLinksError, ValueError):
    """The owner id or URL given for a new link is not acceptable."""
