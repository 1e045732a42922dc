"""Hardware capability bits from the auxiliary vector and feature tables."""

from __future__ import annotations

import struct
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from cpufeat.string_view import has_word

UNKNOWN_FEATURE = "unknown_feature"
DEFAULT_AUXV_PATH = "/proc/self/auxv"

AT_NULL = 0
AT_PLATFORM = 15
AT_HWCAP = 16
AT_BASE_PLATFORM = 24
AT_HWCAP2 = 26

# aarch64, AT_HWCAP
AARCH64_HWCAP_FP = 1 << 0
AARCH64_HWCAP_ASIMD = 1 << 1
AARCH64_HWCAP_EVTSTRM = 1 << 2
AARCH64_HWCAP_AES = 1 << 3
AARCH64_HWCAP_PMULL = 1 << 4
AARCH64_HWCAP_SHA1 = 1 << 5
AARCH64_HWCAP_SHA2 = 1 << 6
AARCH64_HWCAP_CRC32 = 1 << 7
AARCH64_HWCAP_ATOMICS = 1 << 8
AARCH64_HWCAP_FPHP = 1 << 9
AARCH64_HWCAP_ASIMDHP = 1 << 10
AARCH64_HWCAP_CPUID = 1 << 11
AARCH64_HWCAP_ASIMDRDM = 1 << 12
AARCH64_HWCAP_JSCVT = 1 << 13
AARCH64_HWCAP_FCMA = 1 << 14
AARCH64_HWCAP_LRCPC = 1 << 15
AARCH64_HWCAP_DCPOP = 1 << 16
AARCH64_HWCAP_SHA3 = 1 << 17
AARCH64_HWCAP_SM3 = 1 << 18
AARCH64_HWCAP_SM4 = 1 << 19
AARCH64_HWCAP_ASIMDDP = 1 << 20
AARCH64_HWCAP_SHA512 = 1 << 21
AARCH64_HWCAP_SVE = 1 << 22
AARCH64_HWCAP_ASIMDFHM = 1 << 23
AARCH64_HWCAP_DIT = 1 << 24
AARCH64_HWCAP_USCAT = 1 << 25
AARCH64_HWCAP_ILRCPC = 1 << 26
AARCH64_HWCAP_FLAGM = 1 << 27
AARCH64_HWCAP_SSBS = 1 << 28
AARCH64_HWCAP_SB = 1 << 29
AARCH64_HWCAP_PACA = 1 << 30
AARCH64_HWCAP_PACG = 1 << 31

# aarch64, AT_HWCAP2
AARCH64_HWCAP2_DCPODP = 1 << 0
AARCH64_HWCAP2_SVE2 = 1 << 1
AARCH64_HWCAP2_SVEAES = 1 << 2
AARCH64_HWCAP2_SVEPMULL = 1 << 3
AARCH64_HWCAP2_SVEBITPERM = 1 << 4
AARCH64_HWCAP2_SVESHA3 = 1 << 5
AARCH64_HWCAP2_SVESM4 = 1 << 6
AARCH64_HWCAP2_FLAGM2 = 1 << 7
AARCH64_HWCAP2_FRINT = 1 << 8
AARCH64_HWCAP2_SVEI8MM = 1 << 9
AARCH64_HWCAP2_SVEF32MM = 1 << 10
AARCH64_HWCAP2_SVEF64MM = 1 << 11
AARCH64_HWCAP2_SVEBF16 = 1 << 12
AARCH64_HWCAP2_I8MM = 1 << 13
AARCH64_HWCAP2_BF16 = 1 << 14
AARCH64_HWCAP2_DGH = 1 << 15
AARCH64_HWCAP2_RNG = 1 << 16
AARCH64_HWCAP2_BTI = 1 << 17
AARCH64_HWCAP2_MTE = 1 << 18
AARCH64_HWCAP2_ECV = 1 << 19
AARCH64_HWCAP2_AFP = 1 << 20
AARCH64_HWCAP2_RPRES = 1 << 21
AARCH64_HWCAP2_MTE3 = 1 << 22
AARCH64_HWCAP2_SME = 1 << 23
AARCH64_HWCAP2_SME_I16I64 = 1 << 24
AARCH64_HWCAP2_SME_F64F64 = 1 << 25
AARCH64_HWCAP2_SME_I8I32 = 1 << 26
AARCH64_HWCAP2_SME_F16F32 = 1 << 27
AARCH64_HWCAP2_SME_B16F32 = 1 << 28
AARCH64_HWCAP2_SME_F32F32 = 1 << 29
AARCH64_HWCAP2_SME_FA64 = 1 << 30
AARCH64_HWCAP2_WFXT = 1 << 31
AARCH64_HWCAP2_EBF16 = 1 << 32
AARCH64_HWCAP2_SVE_EBF16 = 1 << 33
AARCH64_HWCAP2_CSSC = 1 << 34
AARCH64_HWCAP2_RPRFM = 1 << 35
AARCH64_HWCAP2_SVE2P1 = 1 << 36
AARCH64_HWCAP2_SME2 = 1 << 37
AARCH64_HWCAP2_SME2P1 = 1 << 38
AARCH64_HWCAP2_SME_I16I32 = 1 << 39
AARCH64_HWCAP2_SME_BI32I32 = 1 << 40
AARCH64_HWCAP2_SME_B16B16 = 1 << 41
AARCH64_HWCAP2_SME_F16F16 = 1 << 42
AARCH64_HWCAP2_MOPS = 1 << 43
AARCH64_HWCAP2_HBC = 1 << 44
AARCH64_HWCAP2_SVE_B16B16 = 1 << 45
AARCH64_HWCAP2_LRCPC3 = 1 << 46
AARCH64_HWCAP2_LSE128 = 1 << 47
AARCH64_HWCAP2_FPMR = 1 << 48
AARCH64_HWCAP2_LUT = 1 << 49
AARCH64_HWCAP2_FAMINMAX = 1 << 50
AARCH64_HWCAP2_F8CVT = 1 << 51
AARCH64_HWCAP2_F8FMA = 1 << 52
AARCH64_HWCAP2_F8DP4 = 1 << 53
AARCH64_HWCAP2_F8DP2 = 1 << 54
AARCH64_HWCAP2_F8E4M3 = 1 << 55
AARCH64_HWCAP2_F8E5M2 = 1 << 56
AARCH64_HWCAP2_SME_LUTV2 = 1 << 57
AARCH64_HWCAP2_SME_F8F16 = 1 << 58
AARCH64_HWCAP2_SME_F8F32 = 1 << 59
AARCH64_HWCAP2_SME_SF8FMA = 1 << 60
AARCH64_HWCAP2_SME_SF8DP4 = 1 << 61
AARCH64_HWCAP2_SME_SF8DP2 = 1 << 62

# arm
ARM_HWCAP_SWP = 1 << 0
ARM_HWCAP_HALF = 1 << 1
ARM_HWCAP_THUMB = 1 << 2
ARM_HWCAP_26BIT = 1 << 3
ARM_HWCAP_FAST_MULT = 1 << 4
ARM_HWCAP_FPA = 1 << 5
ARM_HWCAP_VFP = 1 << 6
ARM_HWCAP_EDSP = 1 << 7
ARM_HWCAP_JAVA = 1 << 8
ARM_HWCAP_IWMMXT = 1 << 9
ARM_HWCAP_CRUNCH = 1 << 10
ARM_HWCAP_THUMBEE = 1 << 11
ARM_HWCAP_NEON = 1 << 12
ARM_HWCAP_VFPV3 = 1 << 13
ARM_HWCAP_VFPV3D16 = 1 << 14
ARM_HWCAP_TLS = 1 << 15
ARM_HWCAP_VFPV4 = 1 << 16
ARM_HWCAP_IDIVA = 1 << 17
ARM_HWCAP_IDIVT = 1 << 18
ARM_HWCAP_VFPD32 = 1 << 19
ARM_HWCAP_LPAE = 1 << 20
ARM_HWCAP_EVTSTRM = 1 << 21
ARM_HWCAP2_AES = 1 << 0
ARM_HWCAP2_PMULL = 1 << 1
ARM_HWCAP2_SHA1 = 1 << 2
ARM_HWCAP2_SHA2 = 1 << 3
ARM_HWCAP2_CRC32 = 1 << 4

# mips
MIPS_HWCAP_R6 = 1 << 0
MIPS_HWCAP_MSA = 1 << 1
MIPS_HWCAP_CRC32 = 1 << 2
MIPS_HWCAP_MIPS16 = 1 << 3
MIPS_HWCAP_MDMX = 1 << 4
MIPS_HWCAP_MIPS3D = 1 << 5
MIPS_HWCAP_SMARTMIPS = 1 << 6
MIPS_HWCAP_DSP = 1 << 7
MIPS_HWCAP_DSP2 = 1 << 8
MIPS_HWCAP_DSP3 = 1 << 9

# powerpc, AT_HWCAP
PPC_FEATURE_32 = 0x80000000
PPC_FEATURE_64 = 0x40000000
PPC_FEATURE_601_INSTR = 0x20000000
PPC_FEATURE_HAS_ALTIVEC = 0x10000000
PPC_FEATURE_HAS_FPU = 0x08000000
PPC_FEATURE_HAS_MMU = 0x04000000
PPC_FEATURE_HAS_4xxMAC = 0x02000000
PPC_FEATURE_UNIFIED_CACHE = 0x01000000
PPC_FEATURE_HAS_SPE = 0x00800000
PPC_FEATURE_HAS_EFP_SINGLE = 0x00400000
PPC_FEATURE_HAS_EFP_DOUBLE = 0x00200000
PPC_FEATURE_NO_TB = 0x00100000
PPC_FEATURE_POWER4 = 0x00080000
PPC_FEATURE_POWER5 = 0x00040000
PPC_FEATURE_POWER5_PLUS = 0x00020000
PPC_FEATURE_CELL = 0x00010000
PPC_FEATURE_BOOKE = 0x00008000
PPC_FEATURE_SMT = 0x00004000
PPC_FEATURE_ICACHE_SNOOP = 0x00002000
PPC_FEATURE_ARCH_2_05 = 0x00001000
PPC_FEATURE_PA6T = 0x00000800
PPC_FEATURE_HAS_DFP = 0x00000400
PPC_FEATURE_POWER6_EXT = 0x00000200
PPC_FEATURE_ARCH_2_06 = 0x00000100
PPC_FEATURE_HAS_VSX = 0x00000080
PPC_FEATURE_PSERIES_PERFMON_COMPAT = 0x00000040
PPC_FEATURE_TRUE_LE = 0x00000002
PPC_FEATURE_PPC_LE = 0x00000001

# powerpc, AT_HWCAP2
PPC_FEATURE2_ARCH_2_07 = 0x80000000
PPC_FEATURE2_HTM = 0x40000000
PPC_FEATURE2_DSCR = 0x20000000
PPC_FEATURE2_EBB = 0x10000000
PPC_FEATURE2_ISEL = 0x08000000
PPC_FEATURE2_TAR = 0x04000000
PPC_FEATURE2_VEC_CRYPTO = 0x02000000
PPC_FEATURE2_HTM_NOSC = 0x01000000
PPC_FEATURE2_ARCH_3_00 = 0x00800000
PPC_FEATURE2_HAS_IEEE128 = 0x00400000
PPC_FEATURE2_DARN = 0x00200000
PPC_FEATURE2_SCV = 0x00100000
PPC_FEATURE2_HTM_NO_SUSPEND = 0x00080000

# s390
HWCAP_S390_ESAN3 = 1
HWCAP_S390_ZARCH = 2
HWCAP_S390_STFLE = 4
HWCAP_S390_MSA = 8
HWCAP_S390_LDISP = 16
HWCAP_S390_EIMM = 32
HWCAP_S390_DFP = 64
HWCAP_S390_HPAGE = 128
HWCAP_S390_ETF3EH = 256
HWCAP_S390_HIGH_GPRS = 512
HWCAP_S390_TE = 1024
HWCAP_S390_VX = 2048
HWCAP_S390_VXRS = HWCAP_S390_VX
HWCAP_S390_VXD = 4096
HWCAP_S390_VXRS_BCD = HWCAP_S390_VXD
HWCAP_S390_VXE = 8192
HWCAP_S390_VXRS_EXT = HWCAP_S390_VXE
HWCAP_S390_GS = 16384
HWCAP_S390_VXRS_EXT2 = 32768
HWCAP_S390_VXRS_PDE = 65536
HWCAP_S390_SORT = 131072
HWCAP_S390_DFLT = 262144
HWCAP_S390_VXRS_PDE2 = 524288
HWCAP_S390_NNPA = 1048576
HWCAP_S390_PCI_MIO = 2097152
HWCAP_S390_SIE = 4194304

# riscv
RISCV_HWCAP_32 = 0x32
RISCV_HWCAP_64 = 0x64
RISCV_HWCAP_128 = 0x128
RISCV_HWCAP_M = 1 << (ord("M") - ord("A"))
RISCV_HWCAP_A = 1 << (ord("A") - ord("A"))
RISCV_HWCAP_F = 1 << (ord("F") - ord("A"))
RISCV_HWCAP_D = 1 << (ord("D") - ord("A"))
RISCV_HWCAP_Q = 1 << (ord("Q") - ord("A"))
RISCV_HWCAP_C = 1 << (ord("C") - ord("A"))
RISCV_HWCAP_V = 1 << (ord("V") - ord("A"))

# loongarch
HWCAP_LOONGARCH_CPUCFG = 1 << 0
HWCAP_LOONGARCH_LAM = 1 << 1
HWCAP_LOONGARCH_UAL = 1 << 2
HWCAP_LOONGARCH_FPU = 1 << 3
HWCAP_LOONGARCH_LSX = 1 << 4
HWCAP_LOONGARCH_LASX = 1 << 5
HWCAP_LOONGARCH_CRC32 = 1 << 6
HWCAP_LOONGARCH_COMPLEX = 1 << 7
HWCAP_LOONGARCH_CRYPTO = 1 << 8
HWCAP_LOONGARCH_LVZ = 1 << 9
HWCAP_LOONGARCH_LBT_X86 = 1 << 10
HWCAP_LOONGARCH_LBT_ARM = 1 << 11
HWCAP_LOONGARCH_LBT_MIPS = 1 << 12
HWCAP_LOONGARCH_PTW = 1 << 13


@dataclass(frozen=True)
class HardwareCapabilities:
    """The AT_HWCAP and AT_HWCAP2 words, or a mask over them."""

    hwcaps: int = 0
    hwcaps2: int = 0

    def matches(self, mask: HardwareCapabilities) -> bool:
        """Return whether any bit of ``mask`` is set in these capabilities."""
        return is_hwcaps_set(mask, self)


def is_hwcaps_set(mask: HardwareCapabilities, hwcaps: HardwareCapabilities) -> bool:
    """Return whether ``mask`` shares a bit with ``hwcaps`` in either word."""
    return bool((mask.hwcaps & hwcaps.hwcaps) or (mask.hwcaps2 & hwcaps.hwcaps2))


def _parse_auxv(data: bytes) -> dict[int, int]:
    record = struct.Struct("@NN")
    usable = len(data) - len(data) % record.size
    entries: dict[int, int] = {}
    for key, value in record.iter_unpack(data[:usable]):
        if key == AT_NULL:
            break
        entries[key] = value
    return entries


def read_auxv(path: str | Path = DEFAULT_AUXV_PATH) -> dict[int, int]:
    """Read an auxiliary vector file into ``{type: value}``; empty if unreadable."""
    try:
        data = Path(path).read_bytes()
    except OSError:
        return {}
    return _parse_auxv(data)


def get_hardware_capabilities(path: str | Path = DEFAULT_AUXV_PATH) -> HardwareCapabilities:
    """Return AT_HWCAP and AT_HWCAP2 from the auxiliary vector, zero if absent."""
    auxv = read_auxv(path)
    return HardwareCapabilities(auxv.get(AT_HWCAP, 0), auxv.get(AT_HWCAP2, 0))


@dataclass(frozen=True)
class FeatureSpec:
    """One feature: its name, its /proc/cpuinfo flag and its hwcaps mask."""

    name: str
    cpuinfo_flag: str = ""
    hwcaps: HardwareCapabilities = HardwareCapabilities()


def features_from_hwcaps(
    specs: Iterable[FeatureSpec], hwcaps: HardwareCapabilities
) -> frozenset[str]:
    """Return the names of the features whose mask is set in ``hwcaps``."""
    return frozenset(spec.name for spec in specs if is_hwcaps_set(spec.hwcaps, hwcaps))


def features_from_flags(specs: Iterable[FeatureSpec], value: str) -> dict[str, bool]:
    """Map each feature name to whether its flag appears in a cpuinfo flag list."""
    return {spec.name: has_word(value, spec.cpuinfo_flag, " ") for spec in specs}


def feature_name(specs: Sequence[FeatureSpec], index: int) -> str:
    """Return the name of feature ``index``, or ``unknown_feature`` if out of range."""
    if 0 <= index < len(specs):
        return specs[index].name
    return UNKNOWN_FEATURE