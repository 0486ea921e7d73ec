"""
Maps Oceandata file locators onto the local mirror layout.

The local tree mirrors the provider's browse interface:

    <host>/<platform>/Mapped/<time_period>/<res>km/<parameter>[/<year>]/<file>
    <host>/<platform>/L3BIN/<year>/<day_of_year>/<file>
    <host>/<platform>/L2/<year>/<day_of_year>/<file>

The year level of mapped files exists only for 8-day, daily and rolling
32-day composites.
"""

import logging
import os

from .domain import ParsedFilename, ProcessingType
from .lookups import (
    YEARLY_TIME_PERIODS,
    parameter_directory,
    platform_name,
    time_period_name,
)
from .naming import parse_locator

logger = logging.getLogger(__name__)

OCEANDATA_HOST = "oceandata.sci.gsfc.nasa.gov"


def _mapped_parts(parsed: ParsedFilename):
    parameter = parameter_directory(
        parsed.platform_code, parsed.parameter_token, strict=True
    )
    parts = [
        platform_name(parsed.platform_code, strict=True),
        "Mapped",
        time_period_name(parsed.period_or_coverage_code, strict=True),
        f"{parsed.spatial_code}km",
        parameter,
    ]
    if parsed.period_or_coverage_code in YEARLY_TIME_PERIODS:
        parts.append(parsed.year)
    return parts


def _daily_parts(parsed: ParsedFilename, level_dir: str):
    return [
        platform_name(parsed.platform_code, strict=True),
        level_dir,
        parsed.year,
        parsed.day_of_year,
    ]


def map_parsed(
    parsed: ParsedFilename,
    path_only: bool = False,
    sep: str = os.sep,
    host: str = OCEANDATA_HOST,
) -> str:
    """
    Builds the relative local path for an already parsed locator.

    Args:
        parsed: The decoded locator fields.
        path_only: Return the directory only, with a trailing separator.
        sep: Path separator to join with.
        host: Top-level directory, normally the provider host name.

    Raises:
        MappingError: If any code in the locator is not recognized.
    """
    if parsed.processing_type is ProcessingType.MAPPED:
        parts = _mapped_parts(parsed)
    elif parsed.processing_type is ProcessingType.BINNED:
        parts = _daily_parts(parsed, "L3BIN")
    else:
        parts = _daily_parts(parsed, "L2")

    out = sep.join([host] + parts)
    if path_only:
        return out + sep
    return out + sep + parsed.basename


def map_locator(
    locator: str,
    path_only: bool = False,
    sep: str = os.sep,
    host: str = OCEANDATA_HOST,
) -> str:
    """Parses a remote locator and returns its relative local path."""
    return map_parsed(
        parse_locator(locator), path_only=path_only, sep=sep, host=host
    )


def search_directory(
    search_pattern: str, sep: str = os.sep, host: str = OCEANDATA_HOST
) -> str:
    """
    Returns the highest-level directory files of a search pattern land in.

    Lookups are lenient here: a pattern that starts with a wildcard simply
    has no platform level.
    """
    parts = [host]
    platform = platform_name(search_pattern[:1])
    if platform:
        parts.append(platform)
    else:
        logger.debug(f"No platform code at the start of {search_pattern!r}")
    if "L3m" in search_pattern:
        parts.append("Mapped")
    elif "L3" in search_pattern:
        parts.append("L3BIN")
    return sep.join(parts)
