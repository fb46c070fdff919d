"""Store gateway layer for document storage."""

from .dynamodb import DynamoDBStore
from .memory import InMemoryStore
from .protocol import ScanPage, StoreGateway, scan_all

__all__ = [
    "DynamoDBStore",
    "InMemoryStore",
    "ScanPage",
    "StoreGateway",
    "scan_all",
]
