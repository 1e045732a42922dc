"""CPU feature detection for LoongArch on Linux."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from cpufeat import hwcaps as caps
from cpufeat.hwcaps import (
    FeatureSpec,
    HardwareCapabilities,
    feature_name,
    features_from_flags,
)
from cpufeat.procfs import iter_attributes, read_text_file

CPUINFO_PATH = "/proc/cpuinfo"


class LoongArchFeature(IntEnum):
    """LoongArch features, in introspection order."""

    CPUCFG = 0
    LAM = 1
    UAL = 2
    FPU = 3
    LSX = 4
    LASX = 5
    CRC32 = 6
    COMPLEX = 7
    CRYPTO = 8
    LVZ = 9
    LBT_X86 = 10
    LBT_ARM = 11
    LBT_MIPS = 12
    PTW = 13


def _spec(name: str, flag: str, hwcap: int) -> FeatureSpec:
    return FeatureSpec(name, flag, HardwareCapabilities(hwcap))


_SPECS: tuple[FeatureSpec, ...] = (
    _spec("CPUCFG", "cfg", caps.HWCAP_LOONGARCH_CPUCFG),
    _spec("LAM", "lam", caps.HWCAP_LOONGARCH_LAM),
    _spec("UAL", "ual", caps.HWCAP_LOONGARCH_UAL),
    _spec("FPU", "fpu", caps.HWCAP_LOONGARCH_FPU),
    _spec("LSX", "lsx", caps.HWCAP_LOONGARCH_LSX),
    _spec("LASX", "lasx", caps.HWCAP_LOONGARCH_LASX),
    _spec("CRC32", "crc32", caps.HWCAP_LOONGARCH_CRC32),
    _spec("COMPLEX", "complex", caps.HWCAP_LOONGARCH_COMPLEX),
    _spec("CRYPTO", "crypto", caps.HWCAP_LOONGARCH_CRYPTO),
    _spec("LVZ", "lvz", caps.HWCAP_LOONGARCH_LVZ),
    _spec("LBT_X86", "lbt_x86", caps.HWCAP_LOONGARCH_LBT_X86),
    _spec("LBT_ARM", "lbt_arm", caps.HWCAP_LOONGARCH_LBT_ARM),
    _spec("LBT_MIPS", "lbt_mips", caps.HWCAP_LOONGARCH_LBT_MIPS),
    _spec("PTW", "ptw", caps.HWCAP_LOONGARCH_PTW),
)

_BY_NAME = {spec.name: LoongArchFeature(index) for index, spec in enumerate(_SPECS)}


@dataclass(frozen=True)
class LoongArchInfo:
    """Feature set of a LoongArch processor."""

    features: frozenset[LoongArchFeature] = frozenset()


def parse_loongarch_cpuinfo(text: str) -> LoongArchInfo:
    """Read the ``Features`` line of /proc/cpuinfo content."""
    features: frozenset[LoongArchFeature] = frozenset()
    for key, value in iter_attributes(text):
        if key == "Features":
            flags = features_from_flags(_SPECS, value)
            features = frozenset(_BY_NAME[name] for name, on in flags.items() if on)
    return LoongArchInfo(features)


def get_loongarch_info(cpuinfo: str | None = None) -> LoongArchInfo:
    """Return the features listed in ``cpuinfo``, by default /proc/cpuinfo."""
    if cpuinfo is None:
        cpuinfo = read_text_file(CPUINFO_PATH) or ""
    return parse_loongarch_cpuinfo(cpuinfo)


def get_loongarch_feature_name(feature: int) -> str:
    """Return the name of ``feature``, or ``unknown_feature`` if out of range."""
    return feature_name(_SPECS, int(feature))