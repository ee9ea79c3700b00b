"""
Platform clients: the resource management API and the stage file store.
"""

from .base import ResourceClient
from .snowpark_client import SnowparkResourceClient
from .stage import StageStore

__all__ = [
    "ResourceClient",
    "SnowparkResourceClient",
    "StageStore",
]
