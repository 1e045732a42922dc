"""Bit manipulation on 32-bit register values."""

_UINT32 = 0xFFFFFFFF


def is_bit_set(reg: int, bit: int) -> bool:
    """Return whether ``bit`` is set in the 32-bit value ``reg``."""
    return bool(((reg & _UINT32) >> bit) & 1)


def extract_bit_range(reg: int, msb: int, lsb: int) -> int:
    """Return bits ``msb`` down to ``lsb`` (inclusive) of the 32-bit value ``reg``."""
    if msb < lsb:
        raise ValueError("msb must not be lower than lsb")
    mask = (1 << (msb - lsb + 1)) - 1
    return ((reg & _UINT32) >> lsb) & mask