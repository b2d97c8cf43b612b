# tests/core/test_core_region.py
"""
awslogin/core/region.py tests
"""

from awslogin.core.region import ALL_REGIONS, COMMON_REGIONS, OUTPUT_FORMATS, format_region, ordered_regions


class TestFormatRegion:
    def test_known(self):
        assert format_region("ap-northeast-2") == "ap-northeast-2 (Asia Pacific (Seoul))"

    def test_unknown_is_bare(self):
        assert format_region("xx-test-9") == "xx-test-9"

    def test_unset(self):
        assert format_region(None) == "-"
        assert format_region("") == "-"


class TestOrderedRegions:
    def test_common_first(self):
        regions = ordered_regions()
        assert regions[: len(COMMON_REGIONS)] == COMMON_REGIONS

    def test_no_duplicates(self):
        regions = ordered_regions()
        assert len(regions) == len(set(regions))
        assert set(regions) == set(ALL_REGIONS)

    def test_common_regions_are_known(self):
        assert set(COMMON_REGIONS) <= set(ALL_REGIONS)


def test_output_formats():
    """Formats accepted by the AWS CLI 'output' setting"""
    assert set(OUTPUT_FORMATS) == {"json", "yaml", "text", "table"}
