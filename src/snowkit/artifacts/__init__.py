"""
Artifact sync: fetch remote files and publish them into a stage.
"""

from .http import HttpFetcher
from .pipeline import ArtifactSyncPipeline

__all__ = [
    "ArtifactSyncPipeline",
    "HttpFetcher",
]
