"""Narrative Backfill.

Gives every resource of a Bundle a minimal generated narrative (``text``) when
it has none, before the Bundle is validated. Works on the raw JSON dict, ahead
of the conversion to the immutable document tree.
"""

import html
import logging
from typing import Any

logger = logging.getLogger(__name__)

XHTML_NAMESPACE = "http://www.w3.org/1999/xhtml"

# Resource types that are not DomainResources and carry no narrative
NON_DOMAIN_RESOURCES = frozenset({"Bundle", "Parameters", "Binary"})


def ensure_minimal_narrative(resource: Any) -> bool:
    """Add a generated narrative to a resource that lacks one.

    A narrative is missing when ``text`` or ``text.div`` is absent, or the div
    is blank. The generated div names the resource type and, if present, its id.

    Parameters:
        resource: Resource as a JSON dict (modified in place)

    Returns:
        bool: True if a narrative was added
    """
    if not isinstance(resource, dict):
        return False
    resource_type = resource.get("resourceType")
    if not isinstance(resource_type, str) or resource_type in NON_DOMAIN_RESOURCES:
        return False

    text = resource.get("text")
    div = text.get("div") if isinstance(text, dict) else None
    if isinstance(div, str) and div.strip():
        return False

    resource_id = resource.get("id")
    label = resource_type if not resource_id else f"{resource_type} {resource_id}"
    resource["text"] = {
        "status": "generated",
        "div": f'<div xmlns="{XHTML_NAMESPACE}"><p>{html.escape(str(label))}</p></div>',
    }
    return True


def backfill_bundle_narratives(bundle: Any) -> int:
    """Ensure every entry resource of a Bundle has a narrative.

    Parameters:
        bundle: Bundle as a JSON dict (modified in place). Anything else is
            left untouched.

    Returns:
        int: Number of resources that received a generated narrative
    """
    if not isinstance(bundle, dict):
        return 0
    entries = bundle.get("entry")
    if not isinstance(entries, list):
        return 0

    count = 0
    for entry in entries:
        if isinstance(entry, dict) and ensure_minimal_narrative(entry.get("resource")):
            count += 1
    if count:
        logger.debug(f"Generated narrative for {count} resource(s)")
    return count
