# awslogin/core/region.py
"""
Region and output-format data used by the configuration wizard.
"""

REGION_NAMES = {
    "us-east-1": "US East (N. Virginia)",
    "us-east-2": "US East (Ohio)",
    "us-west-1": "US West (N. California)",
    "us-west-2": "US West (Oregon)",
    "ca-central-1": "Canada (Central)",
    "sa-east-1": "South America (São Paulo)",
    "eu-west-1": "Europe (Ireland)",
    "eu-west-2": "Europe (London)",
    "eu-west-3": "Europe (Paris)",
    "eu-central-1": "Europe (Frankfurt)",
    "eu-north-1": "Europe (Stockholm)",
    "eu-south-1": "Europe (Milan)",
    "me-south-1": "Middle East (Bahrain)",
    "ap-south-1": "Asia Pacific (Mumbai)",
    "ap-south-2": "Asia Pacific (Hyderabad)",
    "ap-northeast-1": "Asia Pacific (Tokyo)",
    "ap-northeast-2": "Asia Pacific (Seoul)",
    "ap-northeast-3": "Asia Pacific (Osaka)",
    "ap-east-1": "Asia Pacific (Hong Kong)",
    "ap-southeast-1": "Asia Pacific (Singapore)",
    "ap-southeast-2": "Asia Pacific (Sydney)",
    "ap-southeast-3": "Asia Pacific (Jakarta)",
    "ap-southeast-4": "Asia Pacific (Melbourne)",
    "af-south-1": "Africa (Cape Town)",
}

ALL_REGIONS = list(REGION_NAMES)

# Listed first in the wizard
COMMON_REGIONS = ["us-east-1", "us-west-2", "eu-west-1", "ap-northeast-2", "ap-northeast-1"]

OUTPUT_FORMATS = {
    "json": "structured JSON (AWS CLI default)",
    "yaml": "human-readable YAML",
    "text": "plain text",
    "table": "column-aligned table",
}


def format_region(region: str | None) -> str:
    """'us-east-1 (US East (N. Virginia))', the bare id when unknown, '-' when unset."""
    if not region:
        return "-"
    region = region.strip()
    name = REGION_NAMES.get(region)
    return f"{region} ({name})" if name else region


def ordered_regions() -> list[str]:
    """Common regions first, then the rest in table order."""
    return COMMON_REGIONS + [r for r in ALL_REGIONS if r not in COMMON_REGIONS]
