"""CPU feature detection for MIPS on Linux and Android."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from cpufeat import hwcaps as caps
from cpufeat.hwcaps import (
    FeatureSpec,
    HardwareCapabilities,
    feature_name,
    features_from_flags,
    features_from_hwcaps,
    get_hardware_capabilities,
)
from cpufeat.procfs import iter_attributes, read_text_file

CPUINFO_PATH = "/proc/cpuinfo"


class MipsFeature(IntEnum):
    """MIPS features, in introspection order."""

    MSA = 0
    EVA = 1
    R6 = 2
    MIPS16 = 3
    MDMX = 4
    MIPS3D = 5
    SMART = 6
    DSP = 7


_SPECS: tuple[FeatureSpec, ...] = (
    FeatureSpec("msa", "msa", HardwareCapabilities(caps.MIPS_HWCAP_MSA)),
    FeatureSpec("eva", "eva", HardwareCapabilities()),
    FeatureSpec("r6", "r6", HardwareCapabilities(caps.MIPS_HWCAP_R6)),
    FeatureSpec("mips16", "mips16", HardwareCapabilities(caps.MIPS_HWCAP_MIPS16)),
    FeatureSpec("mdmx", "mdmx", HardwareCapabilities(caps.MIPS_HWCAP_MDMX)),
    FeatureSpec("mips3d", "mips3d", HardwareCapabilities(caps.MIPS_HWCAP_MIPS3D)),
    FeatureSpec("smart", "smartmips", HardwareCapabilities(caps.MIPS_HWCAP_SMARTMIPS)),
    FeatureSpec("dsp", "dsp", HardwareCapabilities(caps.MIPS_HWCAP_DSP)),
)

_BY_NAME = {spec.name: MipsFeature(index) for index, spec in enumerate(_SPECS)}


@dataclass(frozen=True)
class MipsInfo:
    """Feature set of a MIPS processor."""

    features: frozenset[MipsFeature] = frozenset()


def parse_mips_cpuinfo(text: str) -> MipsInfo:
    """Read the ``ASEs implemented`` line of /proc/cpuinfo content."""
    features: frozenset[MipsFeature] = frozenset()
    for key, value in iter_attributes(text):
        if key == "ASEs implemented":
            flags = features_from_flags(_SPECS, value)
            features = frozenset(_BY_NAME[name] for name, on in flags.items() if on)
    return MipsInfo(features)


def get_mips_info(
    cpuinfo: str | None = None, hwcaps: HardwareCapabilities | None = None
) -> MipsInfo:
    """Combine /proc/cpuinfo and the auxiliary vector into a ``MipsInfo``.

    ``cpuinfo`` and ``hwcaps`` default to the running system's.
    """
    if cpuinfo is None:
        cpuinfo = read_text_file(CPUINFO_PATH) or ""
    if hwcaps is None:
        hwcaps = get_hardware_capabilities()
    info = parse_mips_cpuinfo(cpuinfo)
    from_hwcaps = {_BY_NAME[name] for name in features_from_hwcaps(_SPECS, hwcaps)}
    return MipsInfo(info.features | from_hwcaps)


def get_mips_feature_name(feature: int) -> str:
    """Return the name of ``feature``, or ``unknown_feature`` if out of range."""
    return feature_name(_SPECS, int(feature))