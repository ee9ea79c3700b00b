"""
Stage file store used as the artifact destination.

Publishes bytes with Snowpark's file.put_stream (no compression, overwrite)
and lists stage contents for post-publish verification.
"""

import io
import logging
import posixpath
from typing import List

from snowflake.snowpark import Session
from snowflake.snowpark.exceptions import SnowparkSQLException

from .snowpark_client import translate_error

logger = logging.getLogger(__name__)


class StageStore:
    """
    write/list primitives over a Snowflake stage.

    Usage:
        store = StageStore(session)
        store.write("@MONAI_DB.UTILS.NOTEBOOK_STG/01_ingest_data.ipynb", data)
        store.list("@MONAI_DB.UTILS.NOTEBOOK_STG")  # ['01_ingest_data.ipynb']
    """

    def __init__(self, session: Session):
        self.session = session

    def write(self, path: str, data: bytes, overwrite: bool = True) -> None:
        """Upload bytes to a stage path that includes the target file name."""
        logger.debug(f"Uploading {len(data)} bytes to {path}")
        try:
            self.session.file.put_stream(
                io.BytesIO(data),
                path,
                auto_compress=False,
                overwrite=overwrite,
            )
        except SnowparkSQLException as e:
            raise translate_error(e, path) from e

    def list(self, scope: str) -> List[str]:
        """File names stored under a stage location, relative to that location."""
        try:
            rows = self.session.sql(f"LIST {scope}").collect()
        except SnowparkSQLException as e:
            raise translate_error(e, scope) from e
        # LIST returns names prefixed with the lower-cased stage name
        return [posixpath.basename(row.as_dict()["name"]) for row in rows]

    # Usable directly as the publish callable of ArtifactSyncPipeline.run
    def __call__(self, path: str, data: bytes) -> None:
        self.write(path, data, overwrite=True)
