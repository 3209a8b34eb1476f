# =============================================================================
# Artifact Store
# =============================================================================
# Where artifacts live and how their freshness is read. Rename is the only
# way a file artifact is committed; markers are committed by touching them.
# =============================================================================

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

from libs.models import Artifact

__all__ = ["ArtifactStore", "FileArtifactStore", "MemoryArtifactStore"]

logger = logging.getLogger(__name__)

_STAGING_PREFIX = ".tmp."


def staging_sibling(final: Path) -> Path:
    """
    Staging location for a file artifact.

    A hidden sibling in the same directory, so committing is a same-filesystem
    rename, and the original suffix is kept (osmium picks its output format
    from the file name).
    """
    return final.with_name(f"{_STAGING_PREFIX}{final.name}")


class ArtifactStore(ABC):
    """
    Interface over "read freshness / commit artifact".

    Timestamps are opaque, comparable floats; None means the artifact does
    not exist.
    """

    @abstractmethod
    def resolve(self, artifact: Artifact) -> Path:
        """Final location of an artifact."""
        pass

    @abstractmethod
    def timestamp(self, artifact: Artifact) -> Optional[float]:
        """Freshness timestamp, or None if the artifact does not exist."""
        pass

    def exists(self, artifact: Artifact) -> bool:
        return self.timestamp(artifact) is not None

    @abstractmethod
    def staging_path(self, artifact: Artifact) -> Path:
        """
        Prepare and return a location a producer writes to before commit.

        Any leftover staging file from an earlier interrupted run is removed.
        """
        pass

    @abstractmethod
    def commit(self, staging: Path, artifact: Artifact) -> None:
        """Publish a staged file under the artifact's final location."""
        pass

    @abstractmethod
    def discard(self, staging: Path) -> None:
        """Remove a staged file. Missing files are ignored."""
        pass

    @abstractmethod
    def touch(self, artifact: Artifact) -> None:
        """Create the artifact if needed and set its timestamp to now."""
        pass


class FileArtifactStore(ArtifactStore):
    """
    Artifacts as files under a root directory, freshness from st_mtime.

    Relative artifact paths resolve against the root; absolute paths (the
    root input, the pipeline definition) are used as-is.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def resolve(self, artifact: Artifact) -> Path:
        return self.root / artifact.path

    def timestamp(self, artifact: Artifact) -> Optional[float]:
        try:
            return self.resolve(artifact).stat().st_mtime
        except FileNotFoundError:
            return None

    def staging_path(self, artifact: Artifact) -> Path:
        final = self.resolve(artifact)
        final.parent.mkdir(parents=True, exist_ok=True)
        staging = staging_sibling(final)
        if staging.exists():
            logger.warning(f"Removing leftover staging file: {staging}")
            staging.unlink()
        return staging

    def commit(self, staging: Path, artifact: Artifact) -> None:
        final = self.resolve(artifact)
        os.replace(staging, final)
        # The commit moment is the artifact's freshness, not the last write
        os.utime(final, None)
        logger.debug(f"Committed {staging} -> {final}")

    def discard(self, staging: Path) -> None:
        Path(staging).unlink(missing_ok=True)

    def touch(self, artifact: Artifact) -> None:
        path = self.resolve(artifact)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch(exist_ok=True)
        os.utime(path, None)


class MemoryArtifactStore(ArtifactStore):
    """
    In-memory artifact store with a logical clock.

    Every write (add, touch, commit) advances the clock by one, so ordering is
    exact and independent of filesystem timestamp resolution. Producers write
    staged content with write_staging().
    """

    def __init__(self, root: Union[str, Path] = "/memory"):
        self.root = Path(root)
        self._clock = 0.0
        self._timestamps: Dict[str, float] = {}
        self._contents: Dict[str, bytes] = {}
        self._staged: Dict[str, bytes] = {}

    def _tick(self) -> float:
        self._clock += 1.0
        return self._clock

    def resolve(self, artifact: Artifact) -> Path:
        return self.root / artifact.path

    def timestamp(self, artifact: Artifact) -> Optional[float]:
        return self._timestamps.get(str(self.resolve(artifact)))

    def add(self, artifact: Artifact, content: bytes = b"") -> None:
        """Create or overwrite an artifact directly (sources, fixtures)."""
        key = str(self.resolve(artifact))
        self._contents[key] = content
        self._timestamps[key] = self._tick()

    def read(self, artifact: Artifact) -> bytes:
        key = str(self.resolve(artifact))
        if key not in self._contents:
            raise FileNotFoundError(key)
        return self._contents[key]

    def staging_path(self, artifact: Artifact) -> Path:
        staging = staging_sibling(self.resolve(artifact))
        self._staged.pop(str(staging), None)
        return staging

    def write_staging(self, staging: Path, content: bytes) -> None:
        self._staged[str(staging)] = content

    @property
    def staged_paths(self) -> list:
        """Staging locations currently holding uncommitted content."""
        return sorted(self._staged)

    def commit(self, staging: Path, artifact: Artifact) -> None:
        staged_key = str(staging)
        if staged_key not in self._staged:
            raise FileNotFoundError(staged_key)
        key = str(self.resolve(artifact))
        self._contents[key] = self._staged.pop(staged_key)
        self._timestamps[key] = self._tick()

    def discard(self, staging: Path) -> None:
        self._staged.pop(str(staging), None)

    def touch(self, artifact: Artifact) -> None:
        key = str(self.resolve(artifact))
        self._contents.setdefault(key, b"")
        self._timestamps[key] = self._tick()
