import pytest

from cpufeat.aarch64 import (
    Aarch64Feature,
    Aarch64Info,
    WindowsProcessorFeature,
    aarch64_info_from_sysctl,
    aarch64_info_from_windows,
    get_aarch64_feature_name,
)


def _lookup(values):
    return lambda name: values.get(name, 0)


def test_feature_enum_names():
    assert get_aarch64_feature_name(len(Aarch64Feature)) == "unknown_feature"
    assert get_aarch64_feature_name(-1) == "unknown_feature"
    names = [get_aarch64_feature_name(f) for f in Aarch64Feature]
    assert all(names)
    assert "unknown_feature" not in names
    assert len(set(names)) == len(names)


def test_known_feature_names():
    assert get_aarch64_feature_name(Aarch64Feature.FP) == "fp"
    assert get_aarch64_feature_name(Aarch64Feature.RPRES) == "rpres"


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        (
            30,
            {
                Aarch64Feature.AES,
                Aarch64Feature.SHA1,
                Aarch64Feature.SHA2,
                Aarch64Feature.PMULL,
            },
        ),
        (19, {Aarch64Feature.ASIMD}),
        (45, {Aarch64Feature.LRCPC}),
    ],
)
def test_windows_feature_codes(code, expected):
    info = aarch64_info_from_windows(lambda feature: int(feature) == code, 0)
    assert info.features == expected


def test_sysctl_empty():
    assert aarch64_info_from_sysctl(_lookup({})) == Aarch64Info()


def test_sysctl_identification_and_features():
    values = {
        "hw.cputype": 16777228,
        "hw.cpusubtype": 2,
        "hw.cpufamily": 458787763,
        "hw.cpusubfamily": 2,
        "hw.optional.floatingpoint": 1,
        "hw.optional.AdvSIMD": 1,
        "hw.optional.arm.FEAT_AES": 1,
        "hw.optional.arm.FEAT_SHA256": 1,
        "hw.optional.armv8_crc32": 1,
        "hw.optional.arm.FEAT_BTI": 0,
    }
    info = aarch64_info_from_sysctl(_lookup(values))
    assert info.implementer == 16777228
    assert info.variant == 2
    assert info.part == 458787763
    assert info.revision == 2
    assert info.features == {
        Aarch64Feature.FP,
        Aarch64Feature.ASIMD,
        Aarch64Feature.AES,
        Aarch64Feature.SHA2,
        Aarch64Feature.CRC32,
    }


def test_sysctl_all_features_reported():
    info = aarch64_info_from_sysctl(lambda name: 1 if name.startswith("hw.optional") else 0)
    assert Aarch64Feature.BTI in info.features
    assert Aarch64Feature.USCAT in info.features
    assert Aarch64Feature.SVE not in info.features
    assert Aarch64Feature.EVTSTRM not in info.features


def test_windows_nothing_present():
    info = aarch64_info_from_windows(lambda feature: False, 0)
    assert info.features == frozenset()
    assert info.revision == 0


def test_windows_crypto_sets_four_features():
    present = {
        WindowsProcessorFeature.ARM_NEON_INSTRUCTIONS_AVAILABLE,
        WindowsProcessorFeature.ARM_V8_CRYPTO_INSTRUCTIONS_AVAILABLE,
    }
    info = aarch64_info_from_windows(lambda feature: feature in present, 1234)
    assert info.revision == 1234
    assert info.features == {
        Aarch64Feature.ASIMD,
        Aarch64Feature.AES,
        Aarch64Feature.SHA1,
        Aarch64Feature.SHA2,
        Aarch64Feature.PMULL,
    }


@pytest.mark.parametrize(
    ("pf", "feature"),
    [
        (WindowsProcessorFeature.ARM_VFP_32_REGISTERS_AVAILABLE, Aarch64Feature.FP),
        (WindowsProcessorFeature.ARM_V8_CRC32_INSTRUCTIONS_AVAILABLE, Aarch64Feature.CRC32),
        (WindowsProcessorFeature.ARM_V82_DP_INSTRUCTIONS_AVAILABLE, Aarch64Feature.ASIMDDP),
        (WindowsProcessorFeature.ARM_V83_JSCVT_INSTRUCTIONS_AVAILABLE, Aarch64Feature.JSCVT),
        (WindowsProcessorFeature.ARM_V83_LRCPC_INSTRUCTIONS_AVAILABLE, Aarch64Feature.LRCPC),
        (WindowsProcessorFeature.ARM_V81_ATOMIC_INSTRUCTIONS_AVAILABLE, Aarch64Feature.ATOMICS),
    ],
)
def test_windows_single_feature(pf, feature):
    info = aarch64_info_from_windows(lambda queried: queried == pf, 0)
    assert info.features == {feature}
    assert info.implementer == 0