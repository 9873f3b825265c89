"""
Exceptions raised by the SP800-108 key derivation engine.
"""


class KeyDerivationError(Exception):
    """Raised when key derivation fails."""
    pass


class InvalidArgumentError(KeyDerivationError, ValueError):
    """Raised when a caller passes a missing or malformed input."""
    pass


class ArithmeticOverflowError(KeyDerivationError, OverflowError):
    """Raised when a buffer size or bit length cannot be represented."""
    pass


class InternalInvariantError(KeyDerivationError, RuntimeError):
    """Raised when a PRF returns a digest that disagrees with its declared size."""
    pass
