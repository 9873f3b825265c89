"""
NIST SP800-108 key derivation in Counter Mode.

Derives an arbitrary amount of key material from a key-derivation key (KDK)
bound to a label and a context. Block i of the output is

    PRF(KDK, [i]_2 || Label || 0x00 || Context || [L]_2)

where i starts at 1, L is the total output length in bits, and both integers
are encoded as 4-byte big-endian values (SP800-108, Sec. 5.1). Blocks are
concatenated in counter order and truncated to the requested length.

Because L is part of every PRF input, derivations of different lengths are
unrelated: a shorter output is not a prefix of a longer one.
"""

import logging
import struct
from typing import Optional

from .errors import (
    ArithmeticOverflowError,
    InternalInvariantError,
    InvalidArgumentError,
)
from .prf import PrfFactory
from .utils import SecureBytes, int_to_bytes, secure_zero, writable_view


logger = logging.getLogger(__name__)

# Fixed-input layout
COUNTER_LENGTH = 4  # [i]_2
SEPARATOR_LENGTH = 1  # 0x00
LENGTH_FIELD_LENGTH = 4  # [L]_2

# Representable limits
MAX_OUTPUT_BITS = 0xFFFFFFFF
MAX_FIXED_INPUT_LENGTH = 0x7FFFFFFF


def _readable_view(data, name: str) -> memoryview:
    """Flat byte view of an input; None stands for the empty sequence."""
    if data is None:
        return memoryview(b"")
    try:
        view = memoryview(data)
    except TypeError:
        raise InvalidArgumentError(f"{name} must be bytes-like, got {type(data).__name__}")
    try:
        return view.cast('B')
    except TypeError:
        raise InvalidArgumentError(f"{name} must be a contiguous buffer")


def fixed_input_length(label_length: int, context_length: int) -> int:
    """
    Size of the PRF input for the given label and context sizes.

    Raises:
        ArithmeticOverflowError: If the size exceeds MAX_FIXED_INPUT_LENGTH
    """
    length = COUNTER_LENGTH + label_length + SEPARATOR_LENGTH + context_length + LENGTH_FIELD_LENGTH
    if length > MAX_FIXED_INPUT_LENGTH:
        raise ArithmeticOverflowError(
            f"PRF input of {length} bytes exceeds the maximum of {MAX_FIXED_INPUT_LENGTH}"
        )
    return length


def output_length_in_bits(count: int) -> int:
    """
    The [L]_2 value for an output of ``count`` bytes.

    Raises:
        ArithmeticOverflowError: If count * 8 does not fit in 32 bits
    """
    bits = count * 8
    if bits > MAX_OUTPUT_BITS:
        raise ArithmeticOverflowError(
            f"Output of {count} bytes ({bits} bits) exceeds the 32-bit length field"
        )
    return bits


def derive_keys(kdk, label, context, prf_factory: PrfFactory, output) -> None:
    """
    Fill ``output`` with SP800-108 counter-mode key material.

    Args:
        kdk: Key-derivation key (non-empty bytes-like)
        label: Purpose label (bytes-like, may be empty or None)
        context: Derivation context (bytes-like, may be empty or None)
        prf_factory: Callable mapping the KDK to a Prf instance
        output: Writable buffer receiving len(output) derived bytes in place

    Raises:
        InvalidArgumentError: If an argument is missing or malformed
        ArithmeticOverflowError: If the inputs are too large to encode
        InternalInvariantError: If the PRF declares a non-positive digest size
            or returns a digest of the wrong size

    On failure the contents of ``output`` are undefined.
    """
    if kdk is None:
        raise InvalidArgumentError("Key derivation key is required")
    if len(_readable_view(kdk, "kdk")) == 0:
        raise InvalidArgumentError("Key derivation key must not be empty")
    label_view = _readable_view(label, "label")
    context_view = _readable_view(context, "context")
    if not callable(prf_factory):
        raise InvalidArgumentError("prf_factory must be callable")
    out = writable_view(output)

    output_count = len(out)
    prf_input_length = fixed_input_length(len(label_view), len(context_view))
    output_bits = output_length_in_bits(output_count)

    logger.debug(
        f"Deriving {output_count} bytes "
        f"(label {len(label_view)} bytes, context {len(context_view)} bytes)"
    )

    blocks = 0
    with prf_factory(kdk) as prf:
        prf_input = bytearray(prf_input_length)
        try:
            # Label, separator, context and [L]_2 are stable over all iterations
            label_end = COUNTER_LENGTH + len(label_view)
            context_start = label_end + SEPARATOR_LENGTH
            prf_input[COUNTER_LENGTH:label_end] = label_view
            prf_input[context_start:context_start + len(context_view)] = context_view
            prf_input[-LENGTH_FIELD_LENGTH:] = int_to_bytes(output_bits, LENGTH_FIELD_LENGTH)

            digest_size = prf.digest_size
            if isinstance(digest_size, bool) or not isinstance(digest_size, int) or digest_size <= 0:
                logger.error(f"PRF declared an invalid digest size {digest_size!r}")
                raise InternalInvariantError(
                    f"PRF digest size must be a positive integer, got {digest_size!r}"
                )
            output_offset = 0
            counter = 1
            while output_count > 0:
                struct.pack_into('!I', prf_input, 0, counter)

                digest = prf.compute(prf_input)
                try:
                    if len(digest) != digest_size:
                        logger.error(
                            f"PRF returned {len(digest)} bytes, declared digest size is {digest_size}"
                        )
                        raise InternalInvariantError(
                            f"PRF digest length {len(digest)} != declared size {digest_size}"
                        )
                    num_bytes = min(digest_size, output_count)
                    out[output_offset:output_offset + num_bytes] = memoryview(digest)[:num_bytes]
                finally:
                    # Contains key material
                    secure_zero(digest)

                output_offset += num_bytes
                output_count -= num_bytes
                counter += 1
                blocks += 1
        finally:
            secure_zero(prf_input)

    logger.debug(f"Derived {len(out)} bytes in {blocks} PRF blocks")


def derive_keys_with_context_header(kdk, label, context_header, context,
                                    prf_factory: PrfFactory, output) -> None:
    """
    Derive keys with ``context_header || context`` as the SP800-108 context.

    The context header identifies the algorithm configuration a subkey is
    derived for, so keys for different configurations never collide even
    when callers reuse a context. The concatenation lives in a scratch buffer
    that is zeroed before returning.

    Raises:
        Same as derive_keys
    """
    header_view = _readable_view(context_header, "context_header")
    context_view = _readable_view(context, "context")
    combined_length = len(header_view) + len(context_view)
    if combined_length > MAX_FIXED_INPUT_LENGTH:
        raise ArithmeticOverflowError(
            f"Context of {combined_length} bytes exceeds the maximum of {MAX_FIXED_INPUT_LENGTH}"
        )

    with SecureBytes.allocate(combined_length) as combined:
        buffer = combined.buffer
        buffer[:len(header_view)] = header_view
        buffer[len(header_view):] = context_view
        derive_keys(kdk, label, buffer, prf_factory, output)


def derive_key(kdk, label, context, length: int,
               prf_factory: Optional[PrfFactory] = None) -> bytearray:
    """
    Derive ``length`` bytes of key material into a new buffer.

    Args:
        kdk: Key-derivation key
        label: Purpose label
        context: Derivation context
        length: Number of bytes to derive
        prf_factory: PRF factory; defaults to the configured HMAC PRF

    Returns:
        bytearray owned by the caller, who should secure_zero it after use
    """
    if isinstance(length, bool) or not isinstance(length, int) or length < 0:
        raise InvalidArgumentError(f"Length must be a non-negative integer, got {length!r}")
    output_length_in_bits(length)

    if prf_factory is None:
        from ..config import get_default_config
        prf_factory = get_default_config().prf_factory()

    output = bytearray(length)
    try:
        derive_keys(kdk, label, context, prf_factory, output)
    except Exception:
        secure_zero(output)
        raise
    return output
