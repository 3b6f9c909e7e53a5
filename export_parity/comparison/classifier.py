"""Entry classifier - map an archive-relative path to its semantic kind."""

import re

from export_parity.domain.entry import EntryKind

ARCHIVE_ROOT_DIR = "puppetdb-bak"
METADATA_FILENAME = "export-metadata.json"
METADATA_PATH = f"{ARCHIVE_ROOT_DIR}/{METADATA_FILENAME}"
CATALOGS_DIR = "catalogs"

_DATA_RECORD_PATTERN = re.compile(
    rf"^{re.escape(ARCHIVE_ROOT_DIR)}/{re.escape(CATALOGS_DIR)}/.+\.json$"
)


def classify(relative_path: str, is_directory: bool = False) -> EntryKind:
    """
    Classify an archive entry by its relative path.

    The layout is fixed: one logical root directory holding the metadata file
    and a catalogs/ directory of JSON documents. Anything else is
    unrecognized; deciding whether that fails a run is the caller's job.

    Args:
        relative_path: POSIX path relative to the archive root
        is_directory: Whether the path names a directory

    Returns:
        EntryKind for the path
    """
    if is_directory or relative_path.endswith("/"):
        return EntryKind.DIRECTORY

    if relative_path == METADATA_PATH:
        return EntryKind.METADATA

    if _DATA_RECORD_PATTERN.match(relative_path):
        return EntryKind.DATA_RECORD

    return EntryKind.UNRECOGNIZED
