"""CPU feature detection for PowerPC on Linux."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from cpufeat import hwcaps as caps
from cpufeat.hwcaps import (
    AT_BASE_PLATFORM,
    AT_PLATFORM,
    FeatureSpec,
    HardwareCapabilities,
    feature_name,
    features_from_hwcaps,
    get_hardware_capabilities,
    read_auxv,
)
from cpufeat.procfs import iter_attributes, read_text_file
from cpufeat.string_view import copy_string, has_word

CPUINFO_PATH = "/proc/cpuinfo"
PROCESS_MEMORY_PATH = "/proc/self/mem"
STRING_SIZE = 64


class PPCFeature(IntEnum):
    """PowerPC features, in introspection order."""

    PPC32 = 0
    PPC64 = 1
    PPC601 = 2
    ALTIVEC = 3
    FPU = 4
    MMU = 5
    MAC_4XX = 6
    UNIFIEDCACHE = 7
    SPE = 8
    EFPSINGLE = 9
    EFPDOUBLE = 10
    NO_TB = 11
    POWER4 = 12
    POWER5 = 13
    POWER5PLUS = 14
    CELL = 15
    BOOKE = 16
    SMT = 17
    ICACHESNOOP = 18
    ARCH205 = 19
    PA6T = 20
    DFP = 21
    POWER6EXT = 22
    ARCH206 = 23
    VSX = 24
    PSERIES_PERFMON_COMPAT = 25
    TRUELE = 26
    PPCLE = 27
    ARCH207 = 28
    HTM = 29
    DSCR = 30
    EBB = 31
    ISEL = 32
    TAR = 33
    VCRYPTO = 34
    HTM_NOSC = 35
    ARCH300 = 36
    IEEE128 = 37
    DARN = 38
    SCV = 39
    HTM_NO_SUSPEND = 40


def _spec(name: str, flag: str, hwcap: int = 0, hwcap2: int = 0) -> FeatureSpec:
    return FeatureSpec(name, flag, HardwareCapabilities(hwcap, hwcap2))


_SPECS: tuple[FeatureSpec, ...] = (
    _spec("ppc32", "ppc32", caps.PPC_FEATURE_32),
    _spec("ppc64", "ppc64", caps.PPC_FEATURE_64),
    _spec("ppc601", "ppc601", caps.PPC_FEATURE_601_INSTR),
    _spec("altivec", "altivec", caps.PPC_FEATURE_HAS_ALTIVEC),
    _spec("fpu", "fpu", caps.PPC_FEATURE_HAS_FPU),
    _spec("mmu", "mmu", caps.PPC_FEATURE_HAS_MMU),
    _spec("mac_4xx", "4xxmac", caps.PPC_FEATURE_HAS_4xxMAC),
    _spec("unifiedcache", "ucache", caps.PPC_FEATURE_UNIFIED_CACHE),
    _spec("spe", "spe", caps.PPC_FEATURE_HAS_SPE),
    _spec("efpsingle", "efpsingle", caps.PPC_FEATURE_HAS_EFP_SINGLE),
    _spec("efpdouble", "efpdouble", caps.PPC_FEATURE_HAS_EFP_DOUBLE),
    _spec("no_tb", "notb", caps.PPC_FEATURE_NO_TB),
    _spec("power4", "power4", caps.PPC_FEATURE_POWER4),
    _spec("power5", "power5", caps.PPC_FEATURE_POWER5),
    _spec("power5plus", "power5+", caps.PPC_FEATURE_POWER5_PLUS),
    _spec("cell", "cellbe", caps.PPC_FEATURE_CELL),
    _spec("booke", "booke", caps.PPC_FEATURE_BOOKE),
    _spec("smt", "smt", caps.PPC_FEATURE_SMT),
    _spec("icachesnoop", "ic_snoop", caps.PPC_FEATURE_ICACHE_SNOOP),
    _spec("arch205", "arch_2_05", caps.PPC_FEATURE_ARCH_2_05),
    _spec("pa6t", "pa6t", caps.PPC_FEATURE_PA6T),
    _spec("dfp", "dfp", caps.PPC_FEATURE_HAS_DFP),
    _spec("power6ext", "power6x", caps.PPC_FEATURE_POWER6_EXT),
    _spec("arch206", "arch_2_06", caps.PPC_FEATURE_ARCH_2_06),
    _spec("vsx", "vsx", caps.PPC_FEATURE_HAS_VSX),
    _spec("pseries_perfmon_compat", "archpmu", caps.PPC_FEATURE_PSERIES_PERFMON_COMPAT),
    _spec("truele", "true_le", caps.PPC_FEATURE_TRUE_LE),
    _spec("ppcle", "ppcle", caps.PPC_FEATURE_PPC_LE),
    _spec("arch207", "arch_2_07", 0, caps.PPC_FEATURE2_ARCH_2_07),
    _spec("htm", "htm", 0, caps.PPC_FEATURE2_HTM),
    _spec("dscr", "dscr", 0, caps.PPC_FEATURE2_DSCR),
    _spec("ebb", "ebb", 0, caps.PPC_FEATURE2_EBB),
    _spec("isel", "isel", 0, caps.PPC_FEATURE2_ISEL),
    _spec("tar", "tar", 0, caps.PPC_FEATURE2_TAR),
    _spec("vcrypto", "vcrypto", 0, caps.PPC_FEATURE2_VEC_CRYPTO),
    _spec("htm_nosc", "htm-nosc", 0, caps.PPC_FEATURE2_HTM_NOSC),
    _spec("arch300", "arch_3_00", 0, caps.PPC_FEATURE2_ARCH_3_00),
    _spec("ieee128", "ieee128", 0, caps.PPC_FEATURE2_HAS_IEEE128),
    _spec("darn", "darn", 0, caps.PPC_FEATURE2_DARN),
    _spec("scv", "scv", 0, caps.PPC_FEATURE2_SCV),
    _spec("htm_no_suspend", "htm-no-suspend", 0, caps.PPC_FEATURE2_HTM_NO_SUSPEND),
)

_BY_NAME = {spec.name: PPCFeature(index) for index, spec in enumerate(_SPECS)}


@dataclass(frozen=True)
class PPCInfo:
    """Feature set of a PowerPC processor."""

    features: frozenset[PPCFeature] = frozenset()


@dataclass(frozen=True)
class PPCPlatformStrings:
    """Platform description from /proc/cpuinfo and the auxiliary vector."""

    platform: str = ""
    model: str = ""
    machine: str = ""
    cpu: str = ""
    type_platform: str = ""
    type_base_platform: str = ""


def get_ppc_info(hwcaps: HardwareCapabilities | None = None) -> PPCInfo:
    """Return the features set in ``hwcaps``, by default the running system's.

    PowerPC kernels do not list feature flags in /proc/cpuinfo, so only the
    auxiliary vector is consulted.
    """
    if hwcaps is None:
        hwcaps = get_hardware_capabilities()
    return PPCInfo(frozenset(_BY_NAME[name] for name in features_from_hwcaps(_SPECS, hwcaps)))


def _parse_fields(text: str) -> dict[str, str]:
    fields: dict[str, str] = {}
    for key, value in iter_attributes(text):
        if has_word(key, "platform", " "):
            fields["platform"] = copy_string(value, STRING_SIZE)
        elif key in ("model", "machine", "cpu"):
            fields[key] = copy_string(value, STRING_SIZE)
    return fields


def parse_ppc_cpuinfo(text: str) -> PPCPlatformStrings:
    """Read the platform, model, machine and cpu lines of /proc/cpuinfo content."""
    return PPCPlatformStrings(**_parse_fields(text))


def _auxv_string(at_type: int) -> str | None:
    address = read_auxv().get(at_type)
    if not address:
        return None
    chunks: list[bytes] = []
    try:
        with open(PROCESS_MEMORY_PATH, "rb", buffering=0) as memory:
            memory.seek(address)
            while True:
                chunk = memory.read(16)
                if not chunk:
                    break
                head, nul, _ = chunk.partition(b"\0")
                chunks.append(head)
                if nul:
                    break
    except (OSError, OverflowError, ValueError):
        if not chunks:
            return None
    return b"".join(chunks).decode("ascii", errors="replace")


def get_ppc_platform_strings(
    cpuinfo: str | None = None,
    platform: str | None = None,
    base_platform: str | None = None,
) -> PPCPlatformStrings:
    """Collect platform strings from /proc/cpuinfo, AT_PLATFORM and AT_BASE_PLATFORM.

    Each argument left as None is read from the running system.
    """
    if cpuinfo is None:
        cpuinfo = read_text_file(CPUINFO_PATH) or ""
    if platform is None:
        platform = _auxv_string(AT_PLATFORM)
    if base_platform is None:
        base_platform = _auxv_string(AT_BASE_PLATFORM)
    fields = _parse_fields(cpuinfo)
    if platform is not None:
        fields["type_platform"] = copy_string(platform, STRING_SIZE)
    if base_platform is not None:
        fields["type_base_platform"] = copy_string(base_platform, STRING_SIZE)
    return PPCPlatformStrings(**fields)


def get_ppc_feature_name(feature: int) -> str:
    """Return the name of ``feature``, or ``unknown_feature`` if out of range."""
    return feature_name(_SPECS, int(feature))