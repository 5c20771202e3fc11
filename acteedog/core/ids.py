"""
Identifier helpers shared by all connectors.

Context and activity ids are colon-joined paths rooted at the connector
namespace, e.g. ``github:pull_request:acme/repo:42``.
"""


def make_id(namespace: str, resource_type: str, *keys: str) -> str:
    """
    Build a hierarchical identifier.

    Args:
        namespace: Connector namespace (e.g. "github")
        resource_type: Resource type (e.g. "repository")
        *keys: Resource keys, in order. Empty keys are skipped.

    Returns:
        The colon-joined identifier
    """
    parts = [namespace, resource_type]
    parts.extend(str(key) for key in keys if key != "" and key is not None)
    return ":".join(parts)


def make_activity_id(namespace: str, vendor_event_id: str) -> str:
    """Build an activity id from the connector namespace and the vendor's event id."""
    return f"{namespace}:{vendor_event_id}"
