"""
Artifact Store

Fetches the serialized model and its metadata by key. The model cache only
relies on the two fetch operations, so any blob store can stand in for the
local directory implementation.
"""

from pathlib import Path
from typing import Optional, Union

from rentestimate.config import get_config
from rentestimate.exceptions import ArtifactNotFoundError, TransientArtifactError
from rentestimate.logging_config import get_logger

logger = get_logger(__name__)


class ArtifactStore:
    """Read-only key/blob store for model artifacts.

    Implementations raise ArtifactNotFoundError for an absent key and
    TransientArtifactError for storage or network failures.
    """

    def fetch_model(self, key: str) -> bytes:
        raise NotImplementedError

    def fetch_metadata(self, key: str) -> bytes:
        raise NotImplementedError


class LocalArtifactStore(ArtifactStore):
    """Artifact store backed by a directory; keys are relative paths."""

    def __init__(self, base_dir: Optional[Union[str, Path]] = None):
        if base_dir is None:
            base_dir = get_config().artifacts.base_dir
        self.base_dir = Path(base_dir).resolve()

    def _path_for(self, key: str) -> Path:
        path = (self.base_dir / key).resolve()
        # Keys must stay inside the artifact directory
        if path != self.base_dir and self.base_dir not in path.parents:
            raise ArtifactNotFoundError(key)
        return path

    def _read(self, key: str) -> bytes:
        path = self._path_for(key)
        try:
            data = path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise ArtifactNotFoundError(key) from e
        except OSError as e:
            raise TransientArtifactError(f"Failed to read artifact {key}: {e}", key=key) from e
        logger.debug("Read artifact %s (%d bytes)", key, len(data))
        return data

    def fetch_model(self, key: str) -> bytes:
        return self._read(key)

    def fetch_metadata(self, key: str) -> bytes:
        return self._read(key)
