"""
Artifact references: one fetch-and-publish unit of the sync pipeline.
"""

from __future__ import annotations

import hashlib
import posixpath
from typing import Optional

from pydantic import Field, field_validator

from .base import BaseSnowkitModel


class ArtifactRef(BaseSnowkitModel):
    """
    A remote file to publish into a stage.

    Attributes:
        source_url: HTTP(S) URL the bytes are fetched from
        destination_path: Stage path including file name (@DB.SCHEMA.STAGE/file.ipynb)
        content_hash: Optional sha256 hex digest, with or without a 'sha256:' prefix
    """

    source_url: str = Field(..., pattern=r"^https?://")
    destination_path: str = Field(..., pattern=r"^@[^/]+/.+")
    content_hash: Optional[str] = None

    @field_validator("content_hash")
    @classmethod
    def normalize_hash(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        digest = v.lower().removeprefix("sha256:")
        if len(digest) != 64 or any(c not in "0123456789abcdef" for c in digest):
            raise ValueError(f"content_hash must be a sha256 hex digest, got '{v}'")
        return digest

    @property
    def file_name(self) -> str:
        return posixpath.basename(self.destination_path)

    @property
    def stage_location(self) -> str:
        """Stage (and optional prefix) the file is published under."""
        return posixpath.dirname(self.destination_path)

    def matches_content(self, data: bytes) -> bool:
        """True when no hash is pinned or the bytes match it."""
        if self.content_hash is None:
            return True
        return hashlib.sha256(data).hexdigest() == self.content_hash
