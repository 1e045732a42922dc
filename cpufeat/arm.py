"""CPU feature detection for 32-bit ARM on Linux and Android."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from itertools import takewhile

from cpufeat import hwcaps as caps
from cpufeat.bit_utils import extract_bit_range
from cpufeat.hwcaps import (
    FeatureSpec,
    HardwareCapabilities,
    feature_name,
    features_from_flags,
    features_from_hwcaps,
    get_hardware_capabilities,
)
from cpufeat.procfs import iter_attributes, read_text_file
from cpufeat.string_view import index_of, parse_positive_number

CPUINFO_PATH = "/proc/cpuinfo"

_ASCII_DIGITS = frozenset("0123456789")


class ArmFeature(IntEnum):
    """ARM features, in introspection order."""

    SWP = 0
    HALF = 1
    THUMB = 2
    BIT26 = 3
    FASTMULT = 4
    FPA = 5
    VFP = 6
    EDSP = 7
    JAVA = 8
    IWMMXT = 9
    CRUNCH = 10
    THUMBEE = 11
    NEON = 12
    VFPV3 = 13
    VFPV3D16 = 14
    TLS = 15
    VFPV4 = 16
    IDIVA = 17
    IDIVT = 18
    VFPD32 = 19
    LPAE = 20
    EVTSTRM = 21
    AES = 22
    PMULL = 23
    SHA1 = 24
    SHA2 = 25
    CRC32 = 26


def _spec(name: str, flag: str, hwcap: int = 0, hwcap2: int = 0) -> FeatureSpec:
    return FeatureSpec(name, flag, HardwareCapabilities(hwcap, hwcap2))


_SPECS: tuple[FeatureSpec, ...] = (
    _spec("swp", "swp", caps.ARM_HWCAP_SWP),
    _spec("half", "half", caps.ARM_HWCAP_HALF),
    _spec("thumb", "thumb", caps.ARM_HWCAP_THUMB),
    _spec("_26bit", "26bit", caps.ARM_HWCAP_26BIT),
    _spec("fastmult", "fastmult", caps.ARM_HWCAP_FAST_MULT),
    _spec("fpa", "fpa", caps.ARM_HWCAP_FPA),
    _spec("vfp", "vfp", caps.ARM_HWCAP_VFP),
    _spec("edsp", "edsp", caps.ARM_HWCAP_EDSP),
    _spec("java", "java", caps.ARM_HWCAP_JAVA),
    _spec("iwmmxt", "iwmmxt", caps.ARM_HWCAP_IWMMXT),
    _spec("crunch", "crunch", caps.ARM_HWCAP_CRUNCH),
    _spec("thumbee", "thumbee", caps.ARM_HWCAP_THUMBEE),
    _spec("neon", "neon", caps.ARM_HWCAP_NEON),
    _spec("vfpv3", "vfpv3", caps.ARM_HWCAP_VFPV3),
    _spec("vfpv3d16", "vfpv3d16", caps.ARM_HWCAP_VFPV3D16),
    _spec("tls", "tls", caps.ARM_HWCAP_TLS),
    _spec("vfpv4", "vfpv4", caps.ARM_HWCAP_VFPV4),
    _spec("idiva", "idiva", caps.ARM_HWCAP_IDIVA),
    _spec("idivt", "idivt", caps.ARM_HWCAP_IDIVT),
    _spec("vfpd32", "vfpd32", caps.ARM_HWCAP_VFPD32),
    _spec("lpae", "lpae", caps.ARM_HWCAP_LPAE),
    _spec("evtstrm", "evtstrm", caps.ARM_HWCAP_EVTSTRM),
    _spec("aes", "aes", 0, caps.ARM_HWCAP2_AES),
    _spec("pmull", "pmull", 0, caps.ARM_HWCAP2_PMULL),
    _spec("sha1", "sha1", 0, caps.ARM_HWCAP2_SHA1),
    _spec("sha2", "sha2", 0, caps.ARM_HWCAP2_SHA2),
    _spec("crc32", "crc32", 0, caps.ARM_HWCAP2_CRC32),
)

_BY_NAME = {spec.name: ArmFeature(index) for index, spec in enumerate(_SPECS)}


@dataclass(frozen=True)
class ArmInfo:
    """Identification and feature set of an ARM processor."""

    implementer: int = 0
    architecture: int = 0
    variant: int = 0
    part: int = 0
    revision: int = 0
    features: frozenset[ArmFeature] = frozenset()


@dataclass(frozen=True)
class _ProcCpuInfoData:
    processor_reports_armv6: bool = False
    hardware_reports_goldfish: bool = False


def get_arm_cpu_id(info: ArmInfo) -> int:
    """Pack implementer, variant, part and revision into a MIDR-like id."""
    return (
        (extract_bit_range(info.implementer, 7, 0) << 24)
        | (extract_bit_range(info.variant, 3, 0) << 20)
        | (extract_bit_range(info.part, 11, 0) << 4)
        | extract_bit_range(info.revision, 3, 0)
    )


def _parse(text: str) -> tuple[ArmInfo, _ProcCpuInfoData]:
    info = ArmInfo()
    proc = _ProcCpuInfoData()
    for key, value in iter_attributes(text):
        if key == "Features":
            flags = features_from_flags(_SPECS, value)
            present = frozenset(_BY_NAME[name] for name, on in flags.items() if on)
            info = replace(info, features=present)
        elif key == "CPU implementer":
            info = replace(info, implementer=parse_positive_number(value))
        elif key == "CPU variant":
            info = replace(info, variant=parse_positive_number(value))
        elif key == "CPU part":
            info = replace(info, part=parse_positive_number(value))
        elif key == "CPU revision":
            info = replace(info, revision=parse_positive_number(value))
        elif key == "CPU architecture":
            # A number possibly followed by letters, e.g. "6TEJ" or "7".
            digits = "".join(takewhile(_ASCII_DIGITS.__contains__, value))
            info = replace(info, architecture=parse_positive_number(digits))
        elif key in ("Processor", "model name"):
            proc = replace(proc, processor_reports_armv6=index_of(value, "(v6l)") >= 0)
        elif key == "Hardware":
            proc = replace(proc, hardware_reports_goldfish=value == "Goldfish")
    return info, proc


def parse_arm_cpuinfo(text: str) -> ArmInfo:
    """Parse the content of /proc/cpuinfo as reported by the kernel."""
    info, _ = _parse(text)
    return info


def _fix_errors(info: ArmInfo, proc: _ProcCpuInfoData) -> ArmInfo:
    architecture = info.architecture
    # Some Samsung kernels report an invalid architecture.
    if proc.processor_reports_armv6 and architecture >= 7:
        architecture = 6
    info = replace(info, architecture=architecture)
    features = set(info.features)

    cpu_id = get_arm_cpu_id(info)
    if cpu_id == 0x4100C080:
        # The Android 4.2 emulator kernel fails to report ARM IDIV support.
        if architecture >= 7 and proc.hardware_reports_goldfish:
            features.add(ArmFeature.IDIVA)
    elif cpu_id == 0x511004D0:
        features.discard(ArmFeature.NEON)

    # Some Qualcomm Krait kernels forget to report IDIV support.
    if info.implementer == 0x51 and architecture == 7 and info.part in (0x4D, 0x6F):
        features.update((ArmFeature.IDIVA, ArmFeature.IDIVT))

    if ArmFeature.VFPV4 in features or ArmFeature.NEON in features:
        features.add(ArmFeature.VFPV3)
    if ArmFeature.VFPV3 in features:
        features.add(ArmFeature.VFP)
    return replace(info, features=frozenset(features))


def get_arm_info(
    cpuinfo: str | None = None, hwcaps: HardwareCapabilities | None = None
) -> ArmInfo:
    """Combine /proc/cpuinfo and the auxiliary vector into an ``ArmInfo``.

    ``cpuinfo`` and ``hwcaps`` default to the running system's.
    """
    if cpuinfo is None:
        cpuinfo = read_text_file(CPUINFO_PATH) or ""
    if hwcaps is None:
        hwcaps = get_hardware_capabilities()
    info, proc = _parse(cpuinfo)
    from_hwcaps = {_BY_NAME[name] for name in features_from_hwcaps(_SPECS, hwcaps)}
    info = replace(info, features=info.features | from_hwcaps)
    return _fix_errors(info, proc)


def get_arm_feature_name(feature: int) -> str:
    """Return the name of ``feature``, or ``unknown_feature`` if out of range."""
    return feature_name(_SPECS, int(feature))