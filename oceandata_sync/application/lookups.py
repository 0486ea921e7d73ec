"""
Static abbreviation tables used in Oceandata file names.

Oceandata file names encode the platform, the compositing time period and
the geophysical parameter as short codes. The local mirror uses the same
directory names as the provider's browse interface, so each code is resolved
through one of the tables below. For example, in
``V2016044.L3m_DAY_NPP_PAR_par_9km.nc`` the platform ``V`` is ``VIIRS``,
the period ``DAY`` is ``Daily`` and the parameter ``NPP_PAR_par`` is ``par``.

The tables are built once at import and are read-only.
"""

import dataclasses
import re
from types import MappingProxyType
from typing import List, Optional, Pattern

from .exceptions import MappingError

PLATFORMS = MappingProxyType({
    "Q": "Aquarius",
    "C": "CZCS",
    "H": "HICO",
    "M": "MERIS",
    "A": "MODISA",
    "T": "MODIST",
    "O": "OCTS",
    "S": "SeaWiFS",
    "V": "VIIRS",
})

TIME_PERIODS = MappingProxyType({
    "WC": "8D_Climatology",
    "8D": "8Day",
    "YR": "Annual",
    "CU": "Cumulative",
    "DAY": "Daily",
    "MO": "Monthly",
    "MC": "Monthly_Climatology",
    "R32": "Rolling_32_Day",
    "SNSP": "Seasonal",
    "SNSU": "Seasonal",
    "SNAU": "Seasonal",
    "SNWI": "Seasonal",
    "SCSP": "Seasonal_Climatology",
    "SCSU": "Seasonal_Climatology",
    "SCAU": "Seasonal_Climatology",
    "SCWI": "Seasonal_Climatology",
})

# Mapped files for these periods get an extra year directory.
YEARLY_TIME_PERIODS = frozenset({"8D", "DAY", "R32"})


@dataclasses.dataclass(frozen=True)
class ParameterRule:
    """Maps parameter tokens matching ``pattern`` to a directory name."""

    platforms: str
    directory: str
    pattern: Pattern

    def applies_to(self, platform: str) -> bool:
        return platform in self.platforms

    def matches(self, token: str) -> bool:
        return self.pattern.fullmatch(token) is not None


def _rules(*rows) -> tuple:
    return tuple(
        ParameterRule(platforms, directory, re.compile(pattern))
        for platforms, directory, pattern in rows
    )


# Order matters: the first matching rule wins.
# VIIRS directories with no files on the server (CHLOCI, GSM, QAA, ZLEE)
# are not listed.
PARAMETER_RULES = _rules(
    ("SATCO", "Kd", r"KD490_Kd_490"),
    ("SATCO", "NSST", r"NSST"),
    ("SATCO", "Rrs", r"RRS_Rrs_\d+"),
    ("SATCO", "SST", r"SST"),
    ("SATCO", "SST", r"SST_sst"),
    ("SATCO", "SST4", r"SST4"),
    ("SATCO", "a", r"IOP_a_.*"),
    ("SATCO", "adg", r"IOP_adg_.*"),
    ("SATCO", "angstrom", r"RRS_angstrom"),
    ("SATCO", "aot", r"RRS_aot_\d+"),
    ("SATCO", "aph", r"IOP_aph_.*"),
    ("SATCO", "bb", r"IOP_bb_.*"),
    ("SATCO", "bbp", r"IOP_bbp_.*"),
    ("SATCO", "cdom", r"CDOM_cdom_index"),
    ("SATCO", "chl", r"CHL_chl_ocx"),
    ("SATCO", "chlor", r"CHL_chlor_a"),
    ("SATCO", "ipar", r"FLH_ipar"),
    ("SATCO", "nflh", r"FLH_nflh"),
    ("SATCO", "par", r"PAR_par"),
    ("SATCO", "pic", r"PIC_pic"),
    ("SATCO", "poc", r"POC_poc"),
    ("S", "NDVI", r"LAND_NDVI"),
    ("V", "KD490", r"S?NPP_KD490_Kd_490"),
    ("V", "chl", r"S?NPP_CHL_chl_ocx"),
    ("V", "chlor", r"S?NPP_CHL_chlor_a"),
    ("V", "IOP", r"S?NPP_IOP_.*"),
    ("V", "par", r"S?NPP_PAR_par"),
    ("V", "pic", r"S?NPP_PIC_pic"),
    ("V", "poc", r"S?NPP_POC_poc"),
    ("V", "RRS", r"S?NPP_RRS_.*"),
)


def platform_name(code: str, strict: bool = False) -> str:
    """Returns the platform directory name for a one-letter code."""
    name = PLATFORMS.get(code, "")
    if strict and not name:
        raise MappingError(f"oceandata platform {code!r} not recognized")
    return name


def time_period_name(code: str, strict: bool = False) -> str:
    """Returns the time period directory name for a period code."""
    name = TIME_PERIODS.get(code, "")
    if strict and not name:
        raise MappingError(f"oceandata time period {code!r} not recognized")
    return name


def parameter_rules(platform: Optional[str] = None) -> List[ParameterRule]:
    """Lists the parameter rules, optionally only those for one platform."""
    if platform is None:
        return list(PARAMETER_RULES)
    _check_platform_code(platform)
    return [rule for rule in PARAMETER_RULES if rule.applies_to(platform)]


def parameter_directory(
    platform: str, token: str, strict: bool = False
) -> str:
    """
    Resolves a file name parameter token to its directory name.

    Args:
        platform: One-letter platform code, e.g. "A".
        token: Parameter component of the file name, e.g. "CHL_chlor_a".
        strict: Raise instead of returning "" when nothing matches.

    Raises:
        ValueError: If ``platform`` is not a single character.
        MappingError: If ``strict`` and no rule matches.
    """
    for rule in parameter_rules(platform):
        if rule.matches(token):
            return rule.directory
    if strict:
        raise MappingError(
            f"oceandata parameter {token!r} not recognized "
            f"for platform {platform}"
        )
    return ""


def _check_platform_code(platform):
    if not isinstance(platform, str) or len(platform) != 1:
        raise ValueError("platform must be specified as a one-letter string")
