"""
Pseudorandom functions for SP800-108 key derivation.

A PRF factory maps key bytes to a keyed ``Prf`` instance. The derivation
engine creates exactly one instance per call and closes it when the call
ends. The default provider is HMAC from the ``cryptography`` package.
"""

from abc import ABC, abstractmethod
from typing import Callable

from cryptography.hazmat.primitives import hashes, hmac


class Prf(ABC):
    """Keyed pseudorandom function with a fixed digest size."""

    @property
    @abstractmethod
    def digest_size(self) -> int:
        """Size in bytes of every value returned by ``compute``."""

    @abstractmethod
    def compute(self, data) -> bytearray:
        """Return the PRF output for ``data``."""

    def close(self) -> None:
        """Release any keyed state held by this instance."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


PrfFactory = Callable[[bytes], Prf]


class HmacPrf(Prf):
    """
    HMAC keyed with a key-derivation key.

    The key schedule is computed once at construction; each ``compute`` works
    on a copy of the keyed context, so one instance serves every iteration of
    a derivation.
    """

    def __init__(self, key, algorithm: hashes.HashAlgorithm):
        """
        Initialize HMAC with a key.

        Args:
            key: Secret key bytes
            algorithm: Hash algorithm instance, e.g. hashes.SHA512()
        """
        self._algorithm = algorithm
        self._keyed = hmac.HMAC(key, algorithm)

    @property
    def algorithm(self) -> hashes.HashAlgorithm:
        return self._algorithm

    @property
    def digest_size(self) -> int:
        return self._algorithm.digest_size

    def compute(self, data) -> bytearray:
        """
        Compute HMAC over data.

        Args:
            data: Message bytes

        Returns:
            Digest as a bytearray the caller may erase

        Raises:
            ValueError: If the instance has been closed
        """
        if self._keyed is None:
            raise ValueError("PRF instance has been closed")
        ctx = self._keyed.copy()
        ctx.update(data)
        return bytearray(ctx.finalize())

    def close(self) -> None:
        # Dropping the last reference frees the OpenSSL context, which
        # cleanses the key schedule.
        self._keyed = None

    @property
    def closed(self) -> bool:
        return self._keyed is None


def hmac_prf_factory(algorithm: hashes.HashAlgorithm) -> PrfFactory:
    """
    Create a PRF factory producing HMAC instances over ``algorithm``.

    Args:
        algorithm: Hash algorithm instance

    Returns:
        Callable mapping key bytes to an HmacPrf
    """
    def factory(key) -> HmacPrf:
        return HmacPrf(key, algorithm)

    return factory


def hmac_sha512_prf(key) -> HmacPrf:
    """Default PRF factory: HMAC-SHA-512."""
    return HmacPrf(key, hashes.SHA512())
