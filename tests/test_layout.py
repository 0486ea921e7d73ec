import os

import pytest

from oceandata_sync.application.domain import ProcessingType
from oceandata_sync.application.exceptions import MappingError
from oceandata_sync.application.layout import (
    map_locator,
    map_parsed,
    search_directory,
)
from oceandata_sync.application.naming import classify_locator, parse_locator

GETFILE = "https://oceandata.sci.gsfc.nasa.gov/cgi/getfile/"
HOST = "oceandata.sci.gsfc.nasa.gov"

LOCATOR_PATHS = [
    (
        GETFILE + "A2002359.L3m_DAY_CHL_chlor_a_9km.bz2",
        "MODISA/Mapped/Daily/9km/chlor/2002/A2002359.L3m_DAY_CHL_chlor_a_9km.bz2",
    ),
    (
        "https://oceancolor.gsfc.nasa.gov/cgi/l3/V2016044.L3m_DAY_NPP_PAR_par_9km.nc",
        "VIIRS/Mapped/Daily/9km/par/2016/V2016044.L3m_DAY_NPP_PAR_par_9km.nc",
    ),
    (
        GETFILE + "S20021822002212.L3m_MO_CHL_chlor_a_9km.nc",
        "SeaWiFS/Mapped/Monthly/9km/chlor/S20021822002212.L3m_MO_CHL_chlor_a_9km.nc",
    ),
    (
        GETFILE + "A20021852002192.L3m_8D_RRS_Rrs_443_4km.nc",
        "MODISA/Mapped/8Day/4km/Rrs/2002/A20021852002192.L3m_8D_RRS_Rrs_443_4km.nc",
    ),
    (
        GETFILE + "T20030012003365.L3m_YR_SST_sst_4km.nc",
        "MODIST/Mapped/Annual/4km/SST/T20030012003365.L3m_YR_SST_sst_4km.nc",
    ),
    (
        GETFILE + "A20090322009059.L3b_MO_KD490.main.bz2",
        "MODISA/L3BIN/2009/032/A20090322009059.L3b_MO_KD490.main.bz2",
    ),
    (
        "A2015016.L3b_DAY_RRS.nc",
        "MODISA/L3BIN/2015/016/A2015016.L3b_DAY_RRS.nc",
    ),
    (
        GETFILE + "A2017002003000.L2_LAC_OC.nc",
        "MODISA/L2/2017/002/A2017002003000.L2_LAC_OC.nc",
    ),
]


@pytest.mark.parametrize("locator, expected", LOCATOR_PATHS)
def test_locator_maps_to_canonical_path(locator, expected):
    assert map_locator(locator, sep="/") == f"{HOST}/{expected}"


def test_path_only_ends_with_separator():
    locator = GETFILE + "A2002359.L3m_DAY_CHL_chlor_a_9km.bz2"
    assert map_locator(locator, path_only=True, sep="/") == (
        f"{HOST}/MODISA/Mapped/Daily/9km/chlor/2002/"
    )
    binned = GETFILE + "A20090322009059.L3b_MO_KD490.main.bz2"
    assert map_locator(binned, path_only=True, sep="/") == (
        f"{HOST}/MODISA/L3BIN/2009/032/"
    )


def test_default_separator_is_the_platform_one():
    locator = "A2017002003000.L2_LAC_OC.nc"
    assert map_locator(locator) == os.sep.join(
        [HOST, "MODISA", "L2", "2017", "002", locator]
    )


def test_host_can_be_changed():
    path = map_locator("A2015016.L3b_DAY_RRS.nc", sep="/", host="mirror")
    assert path == "mirror/MODISA/L3BIN/2015/016/A2015016.L3b_DAY_RRS.nc"


def test_parse_mapped_locator():
    parsed = parse_locator(GETFILE + "A2002359.L3m_DAY_CHL_chlor_a_9km.bz2")

    assert parsed.processing_type is ProcessingType.MAPPED
    assert parsed.platform_code == "A"
    assert parsed.acquisition_date == "2002359"
    assert parsed.period_or_coverage_code == "DAY"
    assert parsed.parameter_token == "CHL_chlor_a"
    assert parsed.spatial_code == "9"
    assert parsed.spatial_unit == "km"
    assert parsed.extension == "bz2"
    assert parsed.year == "2002"
    assert parsed.day_of_year == "359"
    assert parsed.basename == "A2002359.L3m_DAY_CHL_chlor_a_9km.bz2"


def test_parse_level2_locator():
    parsed = parse_locator("A2017002003000.L2_LAC_OC.nc")

    assert parsed.processing_type is ProcessingType.LEVEL2
    assert parsed.period_or_coverage_code == "LAC"
    assert parsed.parameter_token == "OC"
    assert parsed.spatial_code is None
    assert map_parsed(parsed, sep="/").startswith(f"{HOST}/MODISA/L2/")


@pytest.mark.parametrize("locator, expected", [
    ("A2002359.L3m_DAY_CHL_chlor_a_9km.nc", ProcessingType.MAPPED),
    ("A2015016.L3b_DAY_RRS.nc", ProcessingType.BINNED),
    ("A2017002003000.L2_LAC_OC.nc", ProcessingType.LEVEL2),
    ("A2002359.L4_DAY_CHL.nc", None),
])
def test_classify_locator(locator, expected):
    assert classify_locator(locator) is expected


def test_unclassified_locator():
    with pytest.raises(MappingError, match="unclassified locator"):
        map_locator(GETFILE + "README.txt")


@pytest.mark.parametrize("locator", [
    "A2002359.L3m_DAY.nc",
    "A2002359.L3b_DAY_RRS.hdf",
    "X2017002003000.L2_LAC_OC.nc",
])
def test_malformed_locator(locator):
    with pytest.raises(MappingError, match="missing type field"):
        parse_locator(locator)


@pytest.mark.parametrize("locator, message", [
    ("A2002359.L3m_DAY_FOO_bar_9km.nc", "parameter 'FOO_bar'"),
    ("A2002359.L3m_WK_CHL_chlor_a_9km.nc", "time period 'WK'"),
    ("M2002359.L3m_DAY_CHL_chlor_a_9km.nc", "not recognized for platform M"),
])
def test_unresolved_mapped_codes_are_fatal_for_the_file(locator, message):
    with pytest.raises(MappingError, match=message):
        map_locator(locator)


@pytest.mark.parametrize("pattern, expected", [
    ("S*L3m_MO_CHL_chlor_a_9km.nc", f"{HOST}/SeaWiFS/Mapped"),
    ("A2014*L3b_DAY_CHL*", f"{HOST}/MODISA/L3BIN"),
    ("A2017*L2_LAC_OC.nc", f"{HOST}/MODISA"),
    ("*L3m_DAY_CHL_chlor_a_9km.nc", f"{HOST}/Mapped"),
    ("*", HOST),
])
def test_search_directory(pattern, expected):
    assert search_directory(pattern, sep="/") == expected
