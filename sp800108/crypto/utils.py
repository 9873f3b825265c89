"""
Secure memory utilities for key derivation.

This module provides in-place erasure of sensitive buffers, a self-clearing
container for key material, and bounds-checked views into caller buffers.
"""

import ctypes
from typing import Union

from .errors import InvalidArgumentError


def secure_zero(data: Union[bytes, bytearray, memoryview]) -> None:
    """
    Securely zero out sensitive data in memory.

    Contiguous buffers are overwritten through ``ctypes.memset`` on their own
    storage, so the write always reaches memory. Strided one-dimensional
    views are cleared element by element. Immutable ``bytes`` and read-only
    views cannot be overwritten and are left unchanged.

    Args:
        data: Bytes, bytearray, or memoryview to zero out

    Raises:
        TypeError: If data is not a bytes-like object, or is a
            non-contiguous view with more than one dimension
    """
    if isinstance(data, bytes) or (isinstance(data, memoryview) and data.readonly):
        # Immutable bytes cannot be overwritten in place. This is a
        # limitation of Python's memory model; sensitive data belongs in a
        # bytearray.
        return
    if isinstance(data, memoryview):
        if not data.c_contiguous:
            if data.ndim != 1:
                raise TypeError("Non-contiguous memoryview must be one-dimensional")
            for i in range(len(data)):
                data[i] = 0
            return
        length = data.nbytes
    elif isinstance(data, bytearray):
        length = len(data)
    else:
        raise TypeError("Data must be bytes, bytearray, or memoryview")

    if length == 0:
        return
    region = (ctypes.c_char * length).from_buffer(data)
    ctypes.memset(ctypes.addressof(region), 0, length)
    del region


def int_to_bytes(value: int, length: int) -> bytes:
    """
    Convert integer to bytes (big-endian).

    Args:
        value: Integer to convert
        length: Number of bytes in output

    Returns:
        Bytes representation
    """
    return value.to_bytes(length, byteorder='big')


def writable_view(buffer) -> memoryview:
    """
    Get a flat, writable byte view of ``buffer``.

    Raises:
        InvalidArgumentError: If the buffer is read-only or not contiguous
    """
    try:
        view = memoryview(buffer)
    except TypeError:
        raise InvalidArgumentError(
            f"Output must be a writable buffer, got {type(buffer).__name__}"
        )
    if view.readonly:
        raise InvalidArgumentError("Output buffer must be writable")
    try:
        return view.cast('B')
    except TypeError:
        raise InvalidArgumentError("Output buffer must be contiguous")


def segment(buffer, offset: int, count: int) -> memoryview:
    """
    Get a writable view of ``count`` bytes of ``buffer`` starting at ``offset``.

    Writes through the returned view land in ``buffer`` itself.

    Args:
        buffer: Writable, contiguous buffer (e.g. bytearray)
        offset: Index of the first byte of the view
        count: Number of bytes in the view

    Returns:
        memoryview over buffer[offset:offset + count]

    Raises:
        InvalidArgumentError: If the buffer is not writable or the bounds
            fall outside it
    """
    view = writable_view(buffer)
    if offset < 0 or count < 0:
        raise InvalidArgumentError("Offset and count must be non-negative")
    if offset + count > len(view):
        raise InvalidArgumentError(
            f"Segment [{offset}, {offset + count}) exceeds buffer of {len(view)} bytes"
        )
    return view[offset:offset + count]


class SecureBytes:
    """
    A wrapper for sensitive byte data that attempts secure cleanup.

    The data lives in a private bytearray which is zeroed on ``clear()``,
    on context manager exit, and when the object is destroyed.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview]):
        """
        Initialize with sensitive byte data.

        Args:
            data: Sensitive bytes to protect
        """
        self._data = bytearray(data)

    @classmethod
    def allocate(cls, length: int) -> 'SecureBytes':
        """Create a zero-filled container of ``length`` bytes."""
        return cls(bytes(length))

    @property
    def buffer(self) -> bytearray:
        """The protected bytearray itself, for in-place writes."""
        return self._data

    @property
    def data(self) -> bytes:
        """Get a copy of the protected data as bytes."""
        return bytes(self._data)

    def clear(self) -> None:
        """Securely clear the protected data."""
        secure_zero(self._data)

    def is_cleared(self) -> bool:
        """Check if every byte of the protected data is zero."""
        return not any(self._data)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.clear()

    def __del__(self):
        if hasattr(self, '_data'):
            self.clear()

    def __len__(self) -> int:
        return len(self._data)
