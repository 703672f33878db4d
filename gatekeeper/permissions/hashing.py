"""
Group Identity Hashing

SuperFastHash (Paul Hsieh) over the UTF-8 bytes of a normalized group name.
The result is a stable 32-bit identity: no per-process seeding, identical on
every machine, so it can be used to compare names across reloads.
"""

MASK32 = 0xFFFFFFFF


def super_fast_hash(data: bytes) -> int:
    """
    Hash a byte string with SuperFastHash.

    Args:
        data: Bytes to hash

    Returns:
        Unsigned 32-bit hash (0 for empty input)
    """
    length = len(data)
    if length == 0:
        return 0

    h = length
    remainder = length & 3
    index = 0

    for _ in range(length >> 2):
        h = (h + (data[index] | (data[index + 1] << 8))) & MASK32
        tmp = (((data[index + 2] | (data[index + 3] << 8)) << 11) ^ h) & MASK32
        h = ((h << 16) & MASK32) ^ tmp
        h = (h + (h >> 11)) & MASK32
        index += 4

    if remainder == 3:
        h = (h + (data[index] | (data[index + 1] << 8))) & MASK32
        h ^= (h << 16) & MASK32
        h ^= (data[index + 2] << 18) & MASK32
        h = (h + (h >> 11)) & MASK32
    elif remainder == 2:
        h = (h + (data[index] | (data[index + 1] << 8))) & MASK32
        h ^= (h << 11) & MASK32
        h = (h + (h >> 17)) & MASK32
    elif remainder == 1:
        h = (h + data[index]) & MASK32
        h ^= (h << 10) & MASK32
        h = (h + (h >> 1)) & MASK32

    # Force "avalanching" of final 127 bits
    h ^= (h << 3) & MASK32
    h = (h + (h >> 5)) & MASK32
    h ^= (h << 4) & MASK32
    h = (h + (h >> 17)) & MASK32
    h ^= (h << 25) & MASK32
    h = (h + (h >> 6)) & MASK32

    return h


def get_unique_id(value: str) -> int:
    """
    Get the unique identifier of a group name.

    The name is trimmed and lower-cased first, so "VIP ", "vip" and " Vip"
    share one identity.
    """
    return super_fast_hash(value.strip().lower().encode("utf-8"))
