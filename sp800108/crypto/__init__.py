"""
Cryptographic primitives for SP800-108 key derivation.

This module provides:
- Counter-mode key derivation (derive_keys)
- HMAC pseudorandom functions
- Secure memory helpers
"""

from .errors import (
    ArithmeticOverflowError,
    InternalInvariantError,
    InvalidArgumentError,
    KeyDerivationError,
)
from .kdf import derive_key, derive_keys, derive_keys_with_context_header
from .prf import HmacPrf, Prf, PrfFactory, hmac_prf_factory, hmac_sha512_prf
from .utils import SecureBytes, secure_zero, segment

__all__ = [
    'derive_keys',
    'derive_keys_with_context_header',
    'derive_key',
    'Prf',
    'PrfFactory',
    'HmacPrf',
    'hmac_prf_factory',
    'hmac_sha512_prf',
    'SecureBytes',
    'secure_zero',
    'segment',
    'KeyDerivationError',
    'InvalidArgumentError',
    'ArithmeticOverflowError',
    'InternalInvariantError',
]
