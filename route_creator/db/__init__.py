"""Database module."""
from route_creator.db.dynamodb import DynamoDBClient, DynamoDBTransientStore
from route_creator.db.transient import MemoryStore, TransientStore, get_transient_store

__all__ = [
    "DynamoDBClient",
    "DynamoDBTransientStore",
    "MemoryStore",
    "TransientStore",
    "get_transient_store",
]
