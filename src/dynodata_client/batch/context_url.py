"""
Context URL helpers
"""

from typing import Optional


def parse_entity_set_from_context_url(context_url: Optional[str]) -> Optional[str]:
    """
    Extract the entity set name from an OData context URL.

    "https://org/api/data/v9.2/$metadata#accounts(accountid)" -> "accounts"
    "https://org/api/data/v9.2/$metadata#accounts" -> "accounts"

    Returns None for empty input or a URL without a '#' fragment.
    """
    if not context_url:
        return None

    marker = context_url.find("#")
    if marker == -1:
        return None

    paren = context_url.find("(", marker)
    if paren == -1:
        return context_url[marker + 1:]
    return context_url[marker + 1:paren]
