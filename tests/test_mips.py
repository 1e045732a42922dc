from cpufeat.hwcaps import MIPS_HWCAP_MSA, MIPS_HWCAP_R6, HardwareCapabilities
from cpufeat.mips import (
    MipsFeature,
    get_mips_feature_name,
    get_mips_info,
    parse_mips_cpuinfo,
)

NO_HWCAPS = HardwareCapabilities()


def test_mips_features_enum():
    last_name = get_mips_feature_name(len(MipsFeature))
    assert last_name == "unknown_feature"
    for feature in MipsFeature:
        name = get_mips_feature_name(feature)
        assert name != ""
        assert name != last_name


def test_from_hardware_cap_both():
    info = get_mips_info("", HardwareCapabilities(MIPS_HWCAP_MSA | MIPS_HWCAP_R6, 0))
    assert MipsFeature.MSA in info.features
    assert MipsFeature.EVA not in info.features
    assert MipsFeature.R6 in info.features


def test_from_hardware_cap_only_one():
    info = get_mips_info("", HardwareCapabilities(MIPS_HWCAP_MSA, 0))
    assert MipsFeature.MSA in info.features
    assert MipsFeature.EVA not in info.features


CI40 = """system type : IMG Pistachio SoC (B0)
machine : IMG Marduk – Ci40 with cc2520
processor : 0
cpu model : MIPS interAptiv (multi) V2.0 FPU V0.0
BogoMIPS : 363.72
wait instruction : yes
microsecond timers : yes
tlb_entries : 64
extra interrupt vector : yes
hardware watchpoint : yes, count: 4, address/irw mask: [0x0ffc, 0x0ffc, 0x0ffb, 0x0ffb]
isa : mips1 mips2 mips32r1 mips32r2
ASEs implemented : mips16 dsp mt eva
shadow register sets : 1
kscratch registers : 0
package : 0
core : 0
VCED exceptions : not available
VCEI exceptions : not available
VPE : 0
"""


def test_ci40():
    features = get_mips_info(CI40, NO_HWCAPS).features
    assert MipsFeature.MSA not in features
    assert MipsFeature.EVA in features
    assert MipsFeature.R6 not in features
    assert MipsFeature.MIPS16 in features
    assert MipsFeature.MDMX not in features
    assert MipsFeature.MIPS3D not in features
    assert MipsFeature.SMART not in features
    assert MipsFeature.DSP in features


AR7161 = """system type             : Atheros AR7161 rev 2
machine                 : NETGEAR WNDR3700/WNDR3800/WNDRMAC
processor               : 0
cpu model               : MIPS 24Kc V7.4
BogoMIPS                : 452.19
wait instruction        : yes
microsecond timers      : yes
tlb_entries             : 16
extra interrupt vector  : yes
hardware watchpoint     : yes, count: 4, address/irw mask: [0x0000, 0x0f98, 0x0f78, 0x0df8]
ASEs implemented        : mips16
shadow register sets    : 1
kscratch registers      : 0
core                    : 0
VCED exceptions         : not available
VCEI exceptions         : not available
"""


def test_ar7161():
    features = get_mips_info(AR7161, NO_HWCAPS).features
    assert MipsFeature.MSA not in features
    assert MipsFeature.EVA not in features
    assert MipsFeature.MIPS16 in features


GOLDFISH = """system type\t\t: MIPS-Goldfish
Hardware\t\t: goldfish
Revision\t\t: 1
processor\t\t: 0
cpu model\t\t: MIPS 24Kc V0.0  FPU V0.0
BogoMIPS\t\t: 1042.02
wait instruction\t: yes
microsecond timers\t: yes
tlb_entries\t\t: 16
extra interrupt vector\t: yes
hardware watchpoint\t: yes, count: 1, address/irw mask: [0x0ff8]
ASEs implemented\t:
shadow register sets\t: 1
core\t\t\t: 0
VCED exceptions\t\t: not available
VCEI exceptions\t\t: not available
"""


def test_goldfish():
    features = get_mips_info(GOLDFISH, NO_HWCAPS).features
    assert MipsFeature.MSA not in features
    assert MipsFeature.EVA not in features
    assert features == frozenset()


BCM1250 = """system type\t\t: SiByte BCM91250A (SWARM)
processor\t\t: 0
cpu model               : SiByte SB1 V0.2  FPU V0.2
BogoMIPS                : 532.48
wait instruction        : no
microsecond timers      : yes
tlb_entries             : 64
extra interrupt vector  : yes
hardware watchpoint     : yes, count: 1, address/irw mask: [0x0ff8]
isa                     : mips1 mips2 mips3 mips4 mips5 mips32r1 mips32r2 mips64r1 mips64r2
ASEs implemented        : mdmx mips3d
shadow register sets    : 1
kscratch registers      : 0
package                 : 0
core                    : 0
VCED exceptions         : not available
VCEI exceptions         : not available
"""


def test_bcm1250():
    features = get_mips_info(BCM1250, NO_HWCAPS).features
    assert MipsFeature.MSA not in features
    assert MipsFeature.EVA not in features
    assert MipsFeature.MIPS16 not in features
    assert MipsFeature.MDMX in features
    assert MipsFeature.MIPS3D in features
    assert MipsFeature.SMART not in features
    assert MipsFeature.DSP not in features


def test_smartmips_flag_maps_to_smart():
    info = parse_mips_cpuinfo("ASEs implemented : smartmips\n")
    assert info.features == {MipsFeature.SMART}
    assert get_mips_feature_name(MipsFeature.SMART) == "smart"


def test_parse_ignores_hwcaps():
    assert parse_mips_cpuinfo(CI40).features == get_mips_info(CI40, NO_HWCAPS).features