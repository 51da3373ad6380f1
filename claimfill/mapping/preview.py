"""
Mapping preview for reviewers.

Groups a resolved placeholder map into the sections shown on the template
preview screen and renders the document text with the populated values
substituted, so reviewers can spot blanks before downloading the document.
"""

import re
from typing import Any, Dict, Mapping

PREVIEW_SECTIONS = ("personal", "address", "company", "dates", "other")
PREVIEW_TEXT_LIMIT = 2000

_PERSONAL_PATTERN = re.compile(r"name|\bage\b|\brelation")


def categorize_mapping_key(key: str) -> str:
    lower_key = key.lower()
    if _PERSONAL_PATTERN.search(lower_key):
        return "personal"
    if "address" in lower_key:
        return "address"
    if "company" in lower_key or "folio" in lower_key or "share" in lower_key:
        return "company"
    if "date" in lower_key:
        return "dates"
    return "other"


def populate_text(text: str, values: Mapping[str, str]) -> str:
    """Literal [key] -> value substitution; empty values leave the placeholder in place."""
    for key, value in values.items():
        if value:
            text = text.replace(f"[{key}]", value)
    return text


def generate_mapping_preview(
    values: Mapping[str, str],
    template_name: str = "",
    text_content: str = "",
) -> Dict[str, Any]:
    """
    Builds the preview payload for one template.

    Args:
        values: Resolved placeholder -> value map
        template_name: Template file name, echoed back
        text_content: Plain text of the template, used for the populated preview

    Returns:
        Dictionary with counts, sectioned mappings and the populated text preview.
    """
    categorized: Dict[str, Dict[str, str]] = {section: {} for section in PREVIEW_SECTIONS}
    for key, value in values.items():
        categorized[categorize_mapping_key(key)][key] = value

    populated = [key for key, value in values.items() if value and value.strip()]
    return {
        "template": template_name,
        "total_mappings": len(values),
        "populated_fields": len(populated),
        "empty_fields": len(values) - len(populated),
        "mappings": dict(values),
        "categorized_mappings": categorized,
        "original_content": text_content[:PREVIEW_TEXT_LIMIT],
        "populated_content": populate_text(text_content, values)[:PREVIEW_TEXT_LIMIT],
    }
