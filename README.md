# cpufeat

Find out which instruction-set features a processor offers. `cpufeat` decodes
the sources an operating system exposes into plain Python objects. These are
the text of `/proc/cpuinfo`, the `AT_HWCAP`/`AT_HWCAP2` entries of the
auxiliary vector, Darwin `sysctl` values and Windows processor-feature flags.

Supported architectures:

- ARM (32-bit) on Linux and Android: `cpufeat.arm`
- AArch64 from Darwin sysctl values or Windows processor flags: `cpufeat.aarch64`
- MIPS on Linux and Android: `cpufeat.mips`
- LoongArch on Linux: `cpufeat.loongarch`
- POWER / PowerPC on Linux: `cpufeat.ppc`

## Installation

```
pip install cpufeat
```

The package has no runtime dependencies.

## Usage

The parsing functions work on text you pass in. They run on any host, and they
also work on saved `/proc/cpuinfo` dumps. Each result is a frozen dataclass
whose `features` member is a `frozenset` of the architecture's feature enum.

```python
from cpufeat.hwcaps import HardwareCapabilities
from cpufeat.mips import MipsFeature, get_mips_info

cpuinfo = """\
cpu model               : MIPS 24Kc V7.4
ASEs implemented        : mips16 dsp eva
"""
info = get_mips_info(cpuinfo, HardwareCapabilities())
assert MipsFeature.EVA in info.features
```

Any argument left as `None`, or left out, is read from the running system.
`/proc/cpuinfo` is read for cpuinfo text and `/proc/self/auxv` for hardware
capabilities. A file that cannot be read counts as empty.

```python
from cpufeat.hwcaps import get_hardware_capabilities
from cpufeat.arm import get_arm_info, get_arm_cpu_id

hwcaps = get_hardware_capabilities()   # AT_HWCAP / AT_HWCAP2 from /proc/self/auxv
info = get_arm_info(None, hwcaps)      # reads /proc/cpuinfo
print(hex(get_arm_cpu_id(info)), info.architecture, sorted(info.features))
```

`get_arm_info` merges the cpuinfo flags with the hwcaps bits. It then corrects
for known kernel reporting errors:

- A processor that reports `(v6l)` gets architecture 6.
- IDIV is added for the Android emulator and for Qualcomm Krait parts.
- NEON is cleared on one broken part.
- NEON or VFPv4 imply VFPv3, and VFPv3 implies VFP.

PowerPC takes its features from the hwcaps alone. It also reports platform
strings:

```python
from cpufeat.ppc import get_ppc_info, get_ppc_platform_strings

features = get_ppc_info(hwcaps).features
strings = get_ppc_platform_strings(None, "power9", "power9")
print(strings.platform, strings.model, strings.machine, strings.cpu,
      strings.type_platform, strings.type_base_platform)
```

Each string is cut to 63 characters. When `platform` or `base_platform` is
`None`, the string is read through the `AT_PLATFORM` / `AT_BASE_PLATFORM`
address in `/proc/self/mem`, if it can be read.

For AArch64, you pass the lookups in as callables. Any source of sysctl or
Windows feature values can then be used:

```python
from cpufeat.aarch64 import (
    WindowsProcessorFeature,
    aarch64_info_from_sysctl,
    aarch64_info_from_windows,
)

values = {"hw.optional.floatingpoint": 1, "hw.optional.AdvSIMD": 1}
mac = aarch64_info_from_sysctl(lambda name: values.get(name, 0))

present = {WindowsProcessorFeature.ARM_V8_CRYPTO_INSTRUCTIONS_AVAILABLE}
win = aarch64_info_from_windows(present.__contains__, processor_revision=0)
```

Each architecture module has a `get_<arch>_feature_name(feature)` function. It
returns the short name of a feature, such as `"neon"`, `"msa"` or `"LSX"`. For
an index outside the table it returns `"unknown_feature"`.

## Lower-level helpers

- `cpufeat.string_view`: cpuinfo line parsing. `get_attribute_key_value`,
  `has_word`, `parse_positive_number` (decimal or `0x` hex, `-1` on error),
  `trim_whitespace`, `copy_string` and friends.
- `cpufeat.procfs`: `read_text_file(path)` returns `None` when the file cannot
  be read. `iter_attributes(text)` yields `(key, value)` pairs.
- `cpufeat.bit_utils`: `is_bit_set` and `extract_bit_range` on 32-bit values.
- `cpufeat.hwcaps`: the hwcap bit constants for each architecture.
  `HardwareCapabilities` and `is_hwcaps_set`. `read_auxv` and
  `get_hardware_capabilities` read the auxiliary vector. `FeatureSpec` and the
  table helpers `features_from_hwcaps`, `features_from_flags` and
  `feature_name`.

## What it does not do

- There is no command-line tool. The package is a library only.
- It does not detect x86, RISC-V or s390x features. For those it provides only
  the hwcap bit constants in `cpufeat.hwcaps`.
- It does not call `sysctlbyname` or the Windows API itself. The AArch64
  functions only decode values that the caller supplies.
- It does not read cache or topology information.