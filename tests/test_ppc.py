import pytest

from cpufeat import hwcaps as caps
from cpufeat.hwcaps import HardwareCapabilities
from cpufeat.ppc import (
    PPCFeature,
    PPCPlatformStrings,
    get_ppc_feature_name,
    get_ppc_info,
    get_ppc_platform_strings,
    parse_ppc_cpuinfo,
)

POWER8_CPUINFO = """processor\t: 0
cpu\t\t: POWER8E (raw), altivec supported
clock\t\t: 3425.000000MHz
revision\t: 2.1 (pvr 004b 0201)

timebase\t: 512000000
platform\t: pSeries
model\t\t: IBM,8406-71Y
machine\t\t: CHRP IBM,8406-71Y
"""


def test_feature_enum_names():
    assert get_ppc_feature_name(len(PPCFeature)) == "unknown_feature"
    names = [get_ppc_feature_name(f) for f in PPCFeature]
    assert all(names)
    assert "unknown_feature" not in names
    assert len(set(names)) == len(names)


def test_feature_names_follow_member_names():
    for feature in PPCFeature:
        assert get_ppc_feature_name(feature) == feature.name.lower()


def test_known_feature_names():
    assert get_ppc_feature_name(PPCFeature.PPC32) == "ppc32"
    assert get_ppc_feature_name(PPCFeature.HTM_NO_SUSPEND) == "htm_no_suspend"


def test_info_from_hwcaps():
    hw = HardwareCapabilities(
        caps.PPC_FEATURE_64 | caps.PPC_FEATURE_HAS_ALTIVEC, caps.PPC_FEATURE2_HTM
    )
    info = get_ppc_info(hw)
    assert info.features == {PPCFeature.PPC64, PPCFeature.ALTIVEC, PPCFeature.HTM}


def test_info_from_hwcaps2_only():
    hw = HardwareCapabilities(0, caps.PPC_FEATURE2_ARCH_3_00 | caps.PPC_FEATURE2_DARN)
    assert get_ppc_info(hw).features == {PPCFeature.ARCH300, PPCFeature.DARN}


def test_info_empty_hwcaps():
    assert get_ppc_info(HardwareCapabilities()).features == frozenset()


def test_parse_cpuinfo():
    strings = parse_ppc_cpuinfo(POWER8_CPUINFO)
    assert strings.platform == "pSeries"
    assert strings.model == "IBM,8406-71Y"
    assert strings.machine == "CHRP IBM,8406-71Y"
    assert strings.cpu == "POWER8E (raw), altivec supported"
    assert strings.type_platform == ""
    assert strings.type_base_platform == ""


def test_parse_empty_cpuinfo():
    assert parse_ppc_cpuinfo("") == PPCPlatformStrings()


def test_platform_key_matched_as_word():
    strings = parse_ppc_cpuinfo("hardware platform : PowerNV\n")
    assert strings.platform == "PowerNV"


def test_long_value_truncated():
    strings = parse_ppc_cpuinfo("model : " + "x" * 100 + "\n")
    assert len(strings.model) == 63
    assert set(strings.model) == {"x"}


def test_platform_strings_with_auxv_values():
    strings = get_ppc_platform_strings(POWER8_CPUINFO, "power8", "power8")
    assert strings.type_platform == "power8"
    assert strings.type_base_platform == "power8"
    assert strings.platform == "pSeries"
    assert strings.cpu == "POWER8E (raw), altivec supported"


def test_platform_strings_keep_cpuinfo_fields():
    strings = get_ppc_platform_strings(POWER8_CPUINFO, "", "")
    assert strings == parse_ppc_cpuinfo(POWER8_CPUINFO)


@pytest.mark.parametrize("feature", list(PPCFeature))
def test_each_feature_round_trips_through_its_mask(feature):
    from cpufeat.ppc import _SPECS

    info = get_ppc_info(_SPECS[feature].hwcaps)
    assert info.features == {feature}