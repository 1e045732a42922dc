"""CPU feature detection from cpuinfo text, hardware capabilities and OS feature flags."""

__version__ = "0.1.0"

__all__ = [
    "aarch64",
    "arm",
    "bit_utils",
    "hwcaps",
    "loongarch",
    "mips",
    "ppc",
    "procfs",
    "string_view",
]