"""Centralized brand configuration for user-facing copy."""

BRAND_NAME = "PCBValues"
BRAND_DOMAIN = "pcbvalues.github.io"
BRAND_APP_DESCRIPTION = "Personality quiz scoring, matching and result gallery"
SCORES_EXPORT_FILENAME = "scores.json"


def brand_result_url(query: str) -> str:
    return f"https://{BRAND_DOMAIN}/results.html?{query}"
