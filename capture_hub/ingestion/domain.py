"""
Domain Identifier Module
========================

Derives the document key for a capture from its origin URL, and decides
whether a capture came from a site that gets site-specific enrichment.
"""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

UNKNOWN_DOMAIN = "unknown"

# Site whose list captures carry embedded game-card markup
OLEMISS_DOMAIN = "olemisssports.com"


def extract_domain_identifier(url: str | None) -> str:
    """
    Extract the last two DNS labels of a URL's host.

    Args:
        url: Source URL (e.g. "https://www.olemisssports.com/calendar")

    Returns:
        Identifier such as "olemisssports.com", the whole host when it has
        a single label, or "unknown" for a missing or unparseable URL.
    """
    if not url or url == UNKNOWN_DOMAIN:
        return UNKNOWN_DOMAIN

    try:
        hostname = urlsplit(url.strip()).hostname
    except ValueError:
        hostname = None

    if not hostname:
        logger.warning(f"Invalid URL: {url}")
        return UNKNOWN_DOMAIN

    parts = hostname.split(".")
    if len(parts) >= 2:
        return ".".join(parts[-2:])
    return hostname


def is_recognized_site(domain_id: str, origin_url: str | None, site: str = OLEMISS_DOMAIN) -> bool:
    """Exact identifier match, or substring match on the raw origin URL."""
    if domain_id == site:
        return True
    return bool(origin_url) and site in origin_url
