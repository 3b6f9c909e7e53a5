"""
Export archive extraction.

Unpacks gzipped tar exports into a scratch directory so the comparison core
only ever sees plain directory trees.
"""

import logging
import shutil
import tarfile
from pathlib import Path
from typing import List, Union

from export_parity.exceptions import ExtractionError

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIXES = (".tar.gz", ".tgz", ".tar")


def is_archive(path: Union[str, Path]) -> bool:
    """True if the path names a file with a known archive suffix."""
    name = Path(path).name
    return Path(path).is_file() and name.endswith(ARCHIVE_SUFFIXES)


def archive_stem(path: Union[str, Path]) -> str:
    """Archive file name without its archive suffix."""
    name = Path(path).name
    for suffix in ARCHIVE_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return name


class ArchiveExtractor:
    """
    Extract export archives into a scratch directory.

    Each archive lands in ``<scratch_dir>/<label>/<archive stem>``; the label
    keeps two archives with the same file name apart. Cleanup removes only
    what this extractor created, never other content of the scratch directory.
    """

    def __init__(self, scratch_dir: Union[str, Path]):
        self.scratch_dir = Path(scratch_dir)
        self.destinations: List[Path] = []
        self.created_dirs: List[Path] = []

    def _ensure_dir(self, directory: Path) -> None:
        if not directory.exists():
            directory.mkdir(parents=True)
            self.created_dirs.append(directory)

    def extract(self, archive_path: Union[str, Path], label: str) -> Path:
        """
        Extract one archive into a fresh destination.

        A destination left behind by an earlier run is emptied first, so its
        files never mix with the new export.

        Args:
            archive_path: Path to a .tar.gz/.tgz/.tar export
            label: Scratch subdirectory name (e.g. "export1")

        Returns:
            Directory holding the extracted tree

        Raises:
            ExtractionError: If the archive is missing, unreadable or corrupt
        """
        archive_path = Path(archive_path)
        if not archive_path.is_file():
            raise ExtractionError(f"Export archive not found: {archive_path}")

        destination = self.scratch_dir / label / archive_stem(archive_path)
        try:
            self._ensure_dir(self.scratch_dir)
            self._ensure_dir(destination.parent)
            if destination.exists():
                logger.info(f"Removing stale extraction {destination}")
                shutil.rmtree(destination)
            destination.mkdir()
            self.destinations.append(destination)
            with tarfile.open(archive_path, "r:*") as archive:
                archive.extractall(destination, filter="data")
        except (tarfile.TarError, OSError) as e:
            raise ExtractionError(f"Failed to extract {archive_path}: {e}") from e

        logger.info(f"Extracted {archive_path} to {destination}")
        return destination

    def cleanup(self) -> None:
        """Remove extracted trees, then any directory this extractor created if now empty."""
        for destination in self.destinations:
            if destination.exists():
                shutil.rmtree(destination)
                logger.debug(f"Removed extracted tree {destination}")

        for directory in reversed(self.created_dirs):
            if directory.is_dir() and not any(directory.iterdir()):
                directory.rmdir()
                logger.debug(f"Removed scratch directory {directory}")

        self.destinations = []
        self.created_dirs = []
