"""
Catalog of stamp kinds available for placement.
"""
import json
import logging
import os
from typing import Iterable, Iterator, List, Optional

from stampdesk.errors import CatalogError
from stampdesk.utils.resource_loader import get_resource_path
from .models import ImageFormat, StampKind

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "stamps.json"
DEFAULT_KIND_SIZE = 150


class StampCatalog:
    """
    Read-only collection of stamp kinds.

    Built once (usually from the bundled manifest) and passed explicitly to
    whatever needs it. Adding a user image returns a new catalog.
    """

    def __init__(self, kinds: Iterable[StampKind] = ()):
        self._kinds: List[StampKind] = []
        seen = set()
        for kind in kinds:
            if kind.id in seen:
                raise CatalogError(f"Duplicate stamp id: {kind.id}")
            seen.add(kind.id)
            self._kinds.append(kind)

    @classmethod
    def from_manifest(cls, stamps_dir: str = "resources/stamps",
                      default_size: float = DEFAULT_KIND_SIZE) -> "StampCatalog":
        """
        Load the preloaded stamps listed in the manifest of a stamps directory.

        Args:
            stamps_dir: Directory holding the manifest and the images. Relative
                paths resolve against the package resources.
            default_size: Size used for entries that do not declare one

        Returns:
            Catalog with every stamp whose image could be read
        """
        base_dir = stamps_dir if os.path.isabs(stamps_dir) else get_resource_path(stamps_dir)
        manifest_path = os.path.join(base_dir, MANIFEST_FILENAME)

        try:
            with open(manifest_path, 'r', encoding='utf-8') as f:
                entries = json.load(f)
        except OSError as e:
            raise CatalogError(f"Cannot read stamp manifest {manifest_path}: {e}") from e
        except ValueError as e:
            raise CatalogError(f"Malformed stamp manifest {manifest_path}: {e}") from e

        if not isinstance(entries, list):
            raise CatalogError(f"Stamp manifest {manifest_path} must be a list")

        kinds = []
        for entry in entries:
            try:
                filename = entry['filename']
                with open(os.path.join(base_dir, filename), 'rb') as f:
                    image_bytes = f.read()
                kinds.append(StampKind(
                    id=entry['id'],
                    label=entry.get('label', entry['id']),
                    default_size=float(entry.get('size', default_size)),
                    image_bytes=image_bytes,
                    image_format=ImageFormat.from_declared(filename),
                    is_builtin=True,
                ))
            except (OSError, AttributeError, KeyError, TypeError, ValueError) as e:
                logger.error("Failed to load stamp %r: %s", entry, e)

        logger.info("Loaded %d preloaded stamp(s) from %s", len(kinds), base_dir)
        return cls(kinds)

    def with_custom_image(self, label: str, image_bytes: bytes,
                          image_format: Optional[ImageFormat] = None,
                          size: float = DEFAULT_KIND_SIZE) -> "StampCatalog":
        """
        Return a new catalog with a user-supplied image appended.

        Args:
            label: Display label for the stamp
            image_bytes: Raw image data
            image_format: Declared format, PNG when omitted
            size: Default display size of the new stamp

        Returns:
            New catalog; this one is left unchanged
        """
        if not image_bytes:
            raise CatalogError("Custom stamp image is empty")

        custom_count = sum(1 for kind in self._kinds if not kind.is_builtin)
        kind = StampKind(
            id=f"custom-{custom_count + 1}",
            label=label,
            default_size=float(size),
            image_bytes=bytes(image_bytes),
            image_format=image_format or ImageFormat.PNG,
            is_builtin=False,
        )
        return StampCatalog(self._kinds + [kind])

    def get(self, kind_id: str) -> Optional[StampKind]:
        for kind in self._kinds:
            if kind.id == kind_id:
                return kind
        return None

    def default_kind(self) -> Optional[StampKind]:
        """The first kind, selected when a session starts."""
        return self._kinds[0] if self._kinds else None

    @property
    def kinds(self) -> List[StampKind]:
        return list(self._kinds)

    def __iter__(self) -> Iterator[StampKind]:
        return iter(list(self._kinds))

    def __len__(self) -> int:
        return len(self._kinds)
