"""
Domain layer - Business rules, enums, schemas, and mappers.
"""

from domain import enums, rules, schemas, mappers

__all__ = ["enums", "rules", "schemas", "mappers"]
