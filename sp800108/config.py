"""
Configuration management for SP800-108 key derivation.

Selects the hash behind the default HMAC PRF used by the convenience
helpers. Callers that pass an explicit PRF factory bypass this module.
"""

import logging
import os
from typing import Optional

from cryptography.hazmat.primitives import hashes

from .crypto.prf import PrfFactory, hmac_prf_factory


logger = logging.getLogger(__name__)

PRF_ALGORITHM_ENV = "SP800108_PRF_ALGORITHM"
DEFAULT_PRF_ALGORITHM = "SHA512"

_HASH_ALGORITHMS = {
    "SHA256": hashes.SHA256,
    "SHA384": hashes.SHA384,
    "SHA512": hashes.SHA512,
}


class ConfigError(Exception):
    """Raised when configuration operations fail."""
    pass


def _normalize_algorithm_name(name: str) -> str:
    if not isinstance(name, str):
        raise ConfigError(f"PRF algorithm name must be a string, got {type(name).__name__}")
    normalized = name.strip().upper().replace("-", "").replace("_", "")
    if normalized not in _HASH_ALGORITHMS:
        supported = ", ".join(sorted(_HASH_ALGORITHMS))
        raise ConfigError(f"Unsupported PRF algorithm '{name}'. Supported: {supported}")
    return normalized


class KdfConfig:
    """
    Configuration for the default PRF.

    The algorithm is taken from the constructor argument, then from the
    SP800108_PRF_ALGORITHM environment variable, then defaults to SHA512.
    """

    def __init__(self, prf_algorithm: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            prf_algorithm: Hash name (SHA256, SHA384 or SHA512)

        Raises:
            ConfigError: If the algorithm is not supported
        """
        if prf_algorithm is None:
            prf_algorithm = os.environ.get(PRF_ALGORITHM_ENV, DEFAULT_PRF_ALGORITHM)
        self.prf_algorithm = _normalize_algorithm_name(prf_algorithm)
        logger.debug(f"Using HMAC-{self.prf_algorithm} as the default PRF")

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        """Get a hash algorithm instance for the configured name."""
        return _HASH_ALGORITHMS[self.prf_algorithm]()

    def prf_factory(self) -> PrfFactory:
        """Get an HMAC PRF factory for the configured hash."""
        return hmac_prf_factory(self.hash_algorithm())


def get_default_config() -> KdfConfig:
    """Build a configuration from the environment."""
    return KdfConfig()
