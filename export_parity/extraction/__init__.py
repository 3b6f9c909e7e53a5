"""Archive extraction - turn export archives into directory trees."""

from .archive import ArchiveExtractor, archive_stem, is_archive

__all__ = ["ArchiveExtractor", "archive_stem", "is_archive"]
