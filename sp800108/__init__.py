"""
SP800-108 key derivation in Counter Mode.

Derives per-purpose subkeys from a master key-derivation key with an
HMAC-family PRF, writing the key material directly into caller buffers.

Basic usage:

    from sp800108 import derive_keys, hmac_sha512_prf, segment

    buffer = bytearray(96)
    derive_keys(master_key, b"encryption", context, hmac_sha512_prf,
                segment(buffer, 32, 64))
"""

__version__ = "0.1.0"

from .config import ConfigError, KdfConfig, get_default_config
from .crypto import (
    ArithmeticOverflowError,
    HmacPrf,
    InternalInvariantError,
    InvalidArgumentError,
    KeyDerivationError,
    Prf,
    PrfFactory,
    SecureBytes,
    derive_key,
    derive_keys,
    derive_keys_with_context_header,
    hmac_prf_factory,
    hmac_sha512_prf,
    secure_zero,
    segment,
)

__all__ = [
    # Version info
    '__version__',

    # Key derivation
    'derive_keys',
    'derive_keys_with_context_header',
    'derive_key',

    # PRF providers
    'Prf',
    'PrfFactory',
    'HmacPrf',
    'hmac_prf_factory',
    'hmac_sha512_prf',

    # Memory helpers
    'SecureBytes',
    'secure_zero',
    'segment',

    # Configuration
    'KdfConfig',
    'get_default_config',

    # Errors
    'KeyDerivationError',
    'InvalidArgumentError',
    'ArithmeticOverflowError',
    'InternalInvariantError',
    'ConfigError',
]
