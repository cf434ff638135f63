"""Short code generation utilities."""

import secrets
import string


class ShortCodeGenerator:
    """Generate random candidate short codes.

    Codes are not guaranteed to be unique; the store's uniqueness
    constraint decides whether a candidate can be used.
    """

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9

    def __init__(self, length: int = 6, alphabet: str = BASE62_CHARS):
        """Initialize short code generator.

        Args:
            length: Length of every generated code
            alphabet: Characters codes are drawn from
        """
        if length < 1:
            raise ValueError("Short code length must be at least 1")
        if not alphabet:
            raise ValueError("Short code alphabet must not be empty")
        self.length = length
        self.alphabet = alphabet

    def generate(self) -> str:
        """Generate a random short code.

        Uses the OS random source, so forked workers never share state.

        Returns:
            Random short code of ``self.length`` characters
        """
        return "".join(secrets.choice(self.alphabet) for _ in range(self.length))

    def is_valid_format(self, code: str) -> bool:
        """Check if code could have been produced by this generator."""
        return bool(code) and all(c in self.alphabet for c in code)
