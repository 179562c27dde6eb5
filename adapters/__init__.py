"""
Adapters package - External service connections.
MongoDB store handle, payment processor and identity provider clients.
"""

from adapters import mongo_adapter, payment_adapter, identity_adapter

__all__ = [
    "mongo_adapter",
    "payment_adapter",
    "identity_adapter",
]
