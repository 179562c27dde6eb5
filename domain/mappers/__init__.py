"""
Domain mappers - convert between stored documents and API representations.
"""

from domain.mappers.document_mapper import to_json, document_out, documents_out
from domain.mappers.user_mapper import UserMapper

__all__ = ["to_json", "document_out", "documents_out", "UserMapper"]
