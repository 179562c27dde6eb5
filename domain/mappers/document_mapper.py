"""
Document mappers.
Handles transformation between stored MongoDB documents and JSON-ready dicts.
"""

from typing import Any, Iterable, List, Optional
from bson import ObjectId


def to_json(value: Any) -> Any:
    """Recursively convert ObjectId values to strings so FastAPI can encode them."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def document_out(doc: Optional[dict]) -> Optional[dict]:
    if doc is None:
        return None
    return to_json(doc)


def documents_out(docs: Iterable[dict]) -> List[dict]:
    return [to_json(d) for d in docs]
