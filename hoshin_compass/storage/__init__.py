from hoshin_compass.storage.repository import HoshinRepository, RepositoryError, sort_most_recent_first
from hoshin_compass.storage.memory import InMemoryHoshinRepository
from hoshin_compass.storage.json_store import JsonDirectoryHoshinRepository

__all__ = [
    "HoshinRepository",
    "RepositoryError",
    "sort_most_recent_first",
    "InMemoryHoshinRepository",
    "JsonDirectoryHoshinRepository",
]
