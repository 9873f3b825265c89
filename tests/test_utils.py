"""
Secure Memory Utility Tests.
"""

import pytest

from sp800108.crypto.errors import InvalidArgumentError
from sp800108.crypto.utils import (
    SecureBytes,
    int_to_bytes,
    secure_zero,
    segment,
    writable_view,
)


class TestSecureZero:
    """Test in-place erasure."""

    def test_bytearray(self):
        data = bytearray(b"secret key material")
        secure_zero(data)
        assert data == bytearray(len(b"secret key material"))

    def test_memoryview_slice(self):
        """Test that only the viewed region of the buffer is cleared."""
        data = bytearray(b"\xff" * 8)
        secure_zero(memoryview(data)[2:6])
        assert data == bytearray(b"\xff\xff\x00\x00\x00\x00\xff\xff")

    def test_strided_memoryview(self):
        """Test that a non-contiguous view clears only its own elements."""
        data = bytearray(b"\xff" * 8)
        secure_zero(memoryview(data)[::2])
        assert data == bytearray(b"\x00\xff" * 4)

    def test_read_only_view_is_noop(self):
        data = bytearray(b"\xff" * 4)
        secure_zero(memoryview(data).toreadonly())
        assert data == bytearray(b"\xff" * 4)

    def test_empty(self):
        data = bytearray()
        secure_zero(data)
        assert data == bytearray()

    def test_immutable_is_noop(self):
        data = b"immutable"
        secure_zero(data)
        secure_zero(memoryview(data))
        assert data == b"immutable"

    @pytest.mark.parametrize("data", ["text", [1, 2, 3], 42])
    def test_rejects_non_buffers(self, data):
        with pytest.raises(TypeError):
            secure_zero(data)


class TestSegment:
    """Test bounds-checked buffer views."""

    def test_writes_reach_buffer(self):
        buffer = bytearray(10)
        view = segment(buffer, 3, 4)
        view[:] = b"abcd"
        assert buffer == bytearray(b"\x00\x00\x00abcd\x00\x00\x00")

    def test_full_and_empty(self):
        buffer = bytearray(10)
        assert len(segment(buffer, 0, 10)) == 10
        assert len(segment(buffer, 10, 0)) == 0

    @pytest.mark.parametrize("offset,count", [(-1, 2), (0, -1), (8, 3), (11, 0)])
    def test_out_of_bounds(self, offset, count):
        with pytest.raises(InvalidArgumentError):
            segment(bytearray(10), offset, count)

    def test_read_only_buffer(self):
        with pytest.raises(InvalidArgumentError):
            segment(b"read only", 0, 4)

    def test_non_buffer(self):
        with pytest.raises(InvalidArgumentError):
            segment("text", 0, 1)

    def test_writable_view_flattens(self):
        view = writable_view(memoryview(bytearray(8)).cast('B', (2, 4)))
        assert view.ndim == 1
        assert len(view) == 8


class TestSecureBytes:
    """Test the self-clearing key container."""

    def test_clear(self):
        secret = SecureBytes(b"\x01\x02\x03")
        assert secret.data == b"\x01\x02\x03"
        assert not secret.is_cleared()

        secret.clear()

        assert secret.is_cleared()
        assert secret.data == b"\x00\x00\x00"

    def test_context_manager(self):
        with SecureBytes(b"key") as secret:
            buffer = secret.buffer
            assert len(secret) == 3
        assert buffer == bytearray(3)

    def test_allocate(self):
        secret = SecureBytes.allocate(16)
        assert len(secret) == 16
        secret.buffer[:4] = b"abcd"
        assert secret.data[:4] == b"abcd"

    def test_data_is_a_copy(self):
        secret = SecureBytes(b"key")
        copy = secret.data
        secret.clear()
        assert copy == b"key"


def test_int_to_bytes():
    assert int_to_bytes(1, 4) == b"\x00\x00\x00\x01"
    assert int_to_bytes(512, 4) == b"\x00\x00\x02\x00"
    assert int_to_bytes(0xFFFFFFFF, 4) == b"\xff\xff\xff\xff"
