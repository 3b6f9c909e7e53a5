"""
Export Normalizer - Convert export entries into canonical comparable form

Collections whose order is an artifact of the exporting system (resource
lists, tag lists) become sets; fields expected to differ between two
independent exports (generation timestamp) are dropped. Everything else
stays position-sensitive.
"""

import json
import logging
from pathlib import Path
from typing import Union

from export_parity.domain.entry import EntryKind
from export_parity.domain.values import (
    CanonicalValue,
    MapValue,
    SequenceValue,
    SetValue,
    from_json,
)
from export_parity.exceptions import ParseError

logger = logging.getLogger(__name__)

VOLATILE_METADATA_KEYS = ("timestamp",)
RESOURCES_PATH = ("data", "resources")
TAGS_KEY = "tags"


def _reject_constant(name: str):
    raise ParseError(f"Non-standard JSON constant: {name}")


class ExportNormalizer:
    """
    Normalize export documents to canonical form.

    Responsibilities:
    - Parse raw JSON content into canonical values
    - Strip volatile metadata fields
    - Convert unordered catalog collections into sets
    """

    @staticmethod
    def parse_document(content: Union[str, bytes]) -> MapValue:
        """
        Parse JSON content that must hold a top-level object.

        Raises:
            ParseError: If content is not valid JSON (NaN and Infinity included)
                or not an object
        """
        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ParseError(f"Content is not valid UTF-8: {e}") from e

        try:
            parsed = json.loads(content, parse_constant=_reject_constant)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON: {e}") from e

        if not isinstance(parsed, dict):
            raise ParseError(f"Expected a JSON object, got {type(parsed).__name__}")

        return from_json(parsed)

    @staticmethod
    def normalize_metadata(content: Union[str, bytes]) -> MapValue:
        """
        Normalize an export metadata document.

        The generation timestamp always differs between two exports, so it
        is removed entirely.
        """
        metadata = ExportNormalizer.parse_document(content)
        for key in VOLATILE_METADATA_KEYS:
            metadata = metadata.without(key)
        return metadata

    @staticmethod
    def normalize_resource(resource: CanonicalValue) -> MapValue:
        """
        Normalize a single catalog resource: tags become a set.

        Raises:
            ParseError: If the resource is not an object or its tags are not a list
        """
        if not isinstance(resource, MapValue):
            raise ParseError(f"Catalog resource must be an object, got {resource.type_name}")

        tags = resource.get(TAGS_KEY)
        if tags is None:
            return resource
        if not isinstance(tags, SequenceValue):
            raise ParseError(f"Resource '{TAGS_KEY}' must be a list, got {tags.type_name}")

        return resource.replace(TAGS_KEY, SetValue(tags.items))

    @staticmethod
    def normalize_catalog(content: Union[str, bytes]) -> MapValue:
        """
        Normalize a catalog document.

        Canonical catalog:
        {
            ...,
            "data": {
                ...,
                "resources": Set{ {..., "tags": Set{...}}, ... }
            }
        }

        Resources are compared as whole records, so two resources differing
        only in key order are still equal members of the set.

        Raises:
            ParseError: If the document lacks a data.resources list
        """
        catalog = ExportNormalizer.parse_document(content)

        data = catalog.get(RESOURCES_PATH[0])
        if not isinstance(data, MapValue):
            raise ParseError("Catalog is missing a 'data' object")

        resources = data.get(RESOURCES_PATH[1])
        if not isinstance(resources, SequenceValue):
            raise ParseError("Catalog is missing a 'data.resources' list")

        normalized_resources = SetValue(
            ExportNormalizer.normalize_resource(resource) for resource in resources
        )
        data = data.replace(RESOURCES_PATH[1], normalized_resources)
        return catalog.replace(RESOURCES_PATH[0], data)


def normalize(kind: EntryKind, file_content: Union[str, bytes]) -> CanonicalValue:
    """
    Normalize raw entry content according to its kind.

    Args:
        kind: Classified entry kind
        file_content: Raw file content

    Returns:
        Canonical value ready for diffing

    Raises:
        ParseError: If the content is not valid for the kind
        ValueError: If the kind has no normalization rule
    """
    if kind is EntryKind.METADATA:
        return ExportNormalizer.normalize_metadata(file_content)
    if kind is EntryKind.DATA_RECORD:
        return ExportNormalizer.normalize_catalog(file_content)
    raise ValueError(f"No normalization rule for entry kind: {kind.value}")


def normalize_file(kind: EntryKind, path: Union[str, Path]) -> CanonicalValue:
    """
    Read a file and normalize its content.

    Raises:
        ParseError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        content = path.read_bytes()
    except OSError as e:
        raise ParseError(f"Cannot read {path}: {e}") from e

    logger.debug(f"Normalizing {kind.value} entry: {path}")
    return normalize(kind, content)

