"""
Parser for Oceandata remote file locators.

A locator is either a bare file name or any URL ending in one, e.g.
``https://oceandata.sci.gsfc.nasa.gov/cgi/getfile/A2002359.L3m_DAY_CHL_chlor_a_9km.bz2``.
Three naming grammars are recognised, one per processing level:

    mapped   A2002359.L3m_DAY_CHL_chlor_a_9km.bz2
    binned   A20090322009059.L3b_MO_KD490.main.bz2
    level-2  A2017002003000.L2_LAC_OC.nc
"""

import re
from typing import Optional

from .domain import ParsedFilename, ProcessingType
from .exceptions import MappingError
from .lookups import PLATFORMS

_PLATFORM = "[" + "".join(PLATFORMS) + "]"
_PREFIX = rf"(?:^|/)({_PLATFORM})(\d+)\."

_MARKERS = (
    (".L3m_", ProcessingType.MAPPED),
    (".L3b_", ProcessingType.BINNED),
    (".L2", ProcessingType.LEVEL2),
)

_GRAMMARS = {
    ProcessingType.MAPPED: re.compile(
        _PREFIX + r"(L3m)_([A-Z0-9]+)_(.*?)_(9|4)(km)?\.(bz2|nc)"
    ),
    ProcessingType.BINNED: re.compile(
        _PREFIX + r"(L3b)_([A-Z0-9]+)_(.*?)\.(bz2|nc)"
    ),
    ProcessingType.LEVEL2: re.compile(
        _PREFIX + r"(L2)_([A-Z0-9]+)_(.*?)\.(bz2|nc)"
    ),
}


def classify_locator(locator: str) -> Optional[ProcessingType]:
    """Returns the processing level a locator's markers indicate, if any."""
    for marker, processing_type in _MARKERS:
        if marker in locator:
            return processing_type
    return None


def parse_locator(locator: str) -> ParsedFilename:
    """
    Decomposes a remote locator into its naming fields.

    Raises:
        MappingError: If the locator carries no processing level marker,
            or does not follow the grammar its marker announces.
    """
    processing_type = classify_locator(locator)
    if processing_type is None:
        raise MappingError(f"unclassified locator: {locator}")

    match = _GRAMMARS[processing_type].search(locator)
    if match is None:
        raise MappingError(f"missing type field: {locator}")

    if processing_type is ProcessingType.MAPPED:
        platform, date, _, period, token, spatial, unit, ext = match.groups()
    else:
        platform, date, _, period, token, ext = match.groups()
        spatial = unit = None

    return ParsedFilename(
        locator=locator,
        platform_code=platform,
        acquisition_date=date,
        processing_type=processing_type,
        period_or_coverage_code=period,
        parameter_token=token,
        extension=ext,
        spatial_code=spatial,
        spatial_unit=unit,
    )
