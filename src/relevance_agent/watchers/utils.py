from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple

from healthcheck_relevance import Kind

ObjectKey = Tuple[Kind, Optional[str], str]


def watched_kind(manifest: Mapping[str, Any]) -> Optional[Kind]:
    try:
        return Kind(manifest.get("kind"))
    except ValueError:
        return None


def object_key(kind: Kind, snapshot: Any) -> ObjectKey:
    identity = snapshot.identity
    return kind, identity.namespace, identity.name


def manifest_key(kind: Kind, manifest: Mapping[str, Any]) -> Optional[ObjectKey]:
    """Best-effort key of a manifest that could not be turned into a snapshot."""

    metadata = manifest.get("metadata")
    if not isinstance(metadata, Mapping) or not metadata.get("name"):
        return None
    namespace = metadata.get("namespace") if kind.namespaced else None
    return kind, str(namespace) if namespace else None, str(metadata["name"])
