"""CPU feature detection for AArch64 on Darwin and Windows."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum

from cpufeat.hwcaps import UNKNOWN_FEATURE


class Aarch64Feature(IntEnum):
    """AArch64 features, in introspection order."""

    FP = 0
    ASIMD = 1
    EVTSTRM = 2
    AES = 3
    PMULL = 4
    SHA1 = 5
    SHA2 = 6
    CRC32 = 7
    ATOMICS = 8
    FPHP = 9
    ASIMDHP = 10
    CPUID = 11
    ASIMDRDM = 12
    JSCVT = 13
    FCMA = 14
    LRCPC = 15
    DCPOP = 16
    SHA3 = 17
    SM3 = 18
    SM4 = 19
    ASIMDDP = 20
    SHA512 = 21
    SVE = 22
    ASIMDFHM = 23
    DIT = 24
    USCAT = 25
    ILRCPC = 26
    FLAGM = 27
    SSBS = 28
    SB = 29
    PACA = 30
    PACG = 31
    DCPODP = 32
    SVE2 = 33
    SVEAES = 34
    SVEPMULL = 35
    SVEBITPERM = 36
    SVESHA3 = 37
    SVESM4 = 38
    FLAGM2 = 39
    FRINT = 40
    SVEI8MM = 41
    SVEF32MM = 42
    SVEF64MM = 43
    SVEBF16 = 44
    I8MM = 45
    BF16 = 46
    DGH = 47
    RNG = 48
    BTI = 49
    MTE = 50
    ECV = 51
    AFP = 52
    RPRES = 53


class WindowsProcessorFeature(IntEnum):
    """Processor feature identifiers understood by IsProcessorFeaturePresent."""

    ARM_VFP_32_REGISTERS_AVAILABLE = 18
    ARM_NEON_INSTRUCTIONS_AVAILABLE = 19
    ARM_V8_CRYPTO_INSTRUCTIONS_AVAILABLE = 30
    ARM_V8_CRC32_INSTRUCTIONS_AVAILABLE = 31
    ARM_V81_ATOMIC_INSTRUCTIONS_AVAILABLE = 34
    SSSE3_INSTRUCTIONS_AVAILABLE = 36
    SSE4_1_INSTRUCTIONS_AVAILABLE = 37
    SSE4_2_INSTRUCTIONS_AVAILABLE = 38
    ARM_V82_DP_INSTRUCTIONS_AVAILABLE = 43
    ARM_V83_JSCVT_INSTRUCTIONS_AVAILABLE = 44
    ARM_V83_LRCPC_INSTRUCTIONS_AVAILABLE = 45


@dataclass(frozen=True)
class Aarch64Info:
    """Identification and feature set of an AArch64 processor."""

    implementer: int = 0
    variant: int = 0
    part: int = 0
    revision: int = 0
    features: frozenset[Aarch64Feature] = frozenset()


_F = Aarch64Feature

_SYSCTL_FEATURES: tuple[tuple[Aarch64Feature, str], ...] = (
    (_F.FP, "hw.optional.floatingpoint"),
    (_F.ASIMD, "hw.optional.AdvSIMD"),
    (_F.AES, "hw.optional.arm.FEAT_AES"),
    (_F.PMULL, "hw.optional.arm.FEAT_PMULL"),
    (_F.SHA1, "hw.optional.arm.FEAT_SHA1"),
    (_F.SHA2, "hw.optional.arm.FEAT_SHA256"),
    (_F.CRC32, "hw.optional.armv8_crc32"),
    (_F.ATOMICS, "hw.optional.arm.FEAT_LSE"),
    (_F.FPHP, "hw.optional.arm.FEAT_FP16"),
    (_F.ASIMDHP, "hw.optional.arm.AdvSIMD_HPFPCvt"),
    (_F.ASIMDRDM, "hw.optional.arm.FEAT_RDM"),
    (_F.JSCVT, "hw.optional.arm.FEAT_JSCVT"),
    (_F.FCMA, "hw.optional.arm.FEAT_FCMA"),
    (_F.LRCPC, "hw.optional.arm.FEAT_LRCPC"),
    (_F.DCPOP, "hw.optional.arm.FEAT_DPB"),
    (_F.SHA3, "hw.optional.arm.FEAT_SHA3"),
    (_F.ASIMDDP, "hw.optional.arm.FEAT_DotProd"),
    (_F.SHA512, "hw.optional.arm.FEAT_SHA512"),
    (_F.ASIMDFHM, "hw.optional.arm.FEAT_FHM"),
    (_F.DIT, "hw.optional.arm.FEAT_DIT"),
    (_F.USCAT, "hw.optional.arm.FEAT_LSE2"),
    (_F.FLAGM, "hw.optional.arm.FEAT_FlagM"),
    (_F.SSBS, "hw.optional.arm.FEAT_SSBS"),
    (_F.SB, "hw.optional.arm.FEAT_SB"),
    (_F.FLAGM2, "hw.optional.arm.FEAT_FlagM2"),
    (_F.FRINT, "hw.optional.arm.FEAT_FRINTTS"),
    (_F.I8MM, "hw.optional.arm.FEAT_I8MM"),
    (_F.BF16, "hw.optional.arm.FEAT_BF16"),
    (_F.BTI, "hw.optional.arm.FEAT_BTI"),
)

_PF = WindowsProcessorFeature

_WINDOWS_FEATURES: tuple[tuple[Aarch64Feature, WindowsProcessorFeature], ...] = (
    (_F.FP, _PF.ARM_VFP_32_REGISTERS_AVAILABLE),
    (_F.ASIMD, _PF.ARM_NEON_INSTRUCTIONS_AVAILABLE),
    (_F.CRC32, _PF.ARM_V8_CRC32_INSTRUCTIONS_AVAILABLE),
    (_F.ASIMDDP, _PF.ARM_V82_DP_INSTRUCTIONS_AVAILABLE),
    (_F.JSCVT, _PF.ARM_V83_JSCVT_INSTRUCTIONS_AVAILABLE),
    (_F.LRCPC, _PF.ARM_V83_LRCPC_INSTRUCTIONS_AVAILABLE),
    (_F.ATOMICS, _PF.ARM_V81_ATOMIC_INSTRUCTIONS_AVAILABLE),
)

_CRYPTO_FEATURES = frozenset((_F.AES, _F.SHA1, _F.SHA2, _F.PMULL))


def aarch64_info_from_sysctl(lookup: Callable[[str], int]) -> Aarch64Info:
    """Build an ``Aarch64Info`` from Darwin sysctl values.

    ``lookup`` maps a sysctl name to its integer value, 0 when unavailable.
    """
    features = frozenset(feature for feature, name in _SYSCTL_FEATURES if lookup(name))
    return Aarch64Info(
        implementer=lookup("hw.cputype"),
        variant=lookup("hw.cpusubtype"),
        part=lookup("hw.cpufamily"),
        revision=lookup("hw.cpusubfamily"),
        features=features,
    )


def aarch64_info_from_windows(
    is_feature_present: Callable[[WindowsProcessorFeature], bool],
    processor_revision: int,
) -> Aarch64Info:
    """Build an ``Aarch64Info`` from Windows processor feature queries."""
    features = {
        feature for feature, pf in _WINDOWS_FEATURES if is_feature_present(pf)
    }
    if is_feature_present(_PF.ARM_V8_CRYPTO_INSTRUCTIONS_AVAILABLE):
        features |= _CRYPTO_FEATURES
    return Aarch64Info(revision=processor_revision, features=frozenset(features))


def get_aarch64_feature_name(feature: int) -> str:
    """Return the name of ``feature``, or ``unknown_feature`` if out of range."""
    try:
        return Aarch64Feature(int(feature)).name.lower()
    except ValueError:
        return UNKNOWN_FEATURE