"""Depth-first harvesting of a directory tree into structural records.

This module provides the HarvestWalker class, which enumerates the files and
directories under a root, filters them through exclusion rules and names every
included entry with a path-derived identifier.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from dir2wix.exceptions import PathNotFoundError, TraversalError
from dir2wix.exclusion_rules.base_rules import BaseExclusionRules
from dir2wix.harvest_tree.records import (
    ComponentRegistry,
    DirectoryClose,
    DirectoryOpen,
    FileUnit,
    HarvestRecord,
    join_reference,
)
from dir2wix.identifiers import component_id, directory_id, file_id
from dir2wix.types import PathType

logger = logging.getLogger(__name__)


class HarvestWalker:
    """Walks a directory tree and yields the records of every included entry.

    Traversal is depth-first. Within each directory the included files are yielded
    first, then each included subdirectory as a DirectoryOpen record, its contents,
    and a matching DirectoryClose record. Entries are visited in the order the
    platform enumerates them; nothing is re-sorted, so an unchanged tree produces the
    same sequence on every run.

    Exclusion rules are consulted with the path relative to the root. An excluded
    directory is never entered, so nothing below it is evaluated or emitted.

    Identifiers depend only on reference paths and names:
    - directory id: derived from the directory's reference path
    - file id: derived from the parent directory id and the file name
    - component id: derived from the parent directory id and the file id

    The root itself is opened as an anchor carrying ``root_ref_id``. Files directly
    under the root derive their ids from the id of the reference base path, which is
    never emitted.

    Attributes:
        root_path (Path): Directory to harvest.
        reference_root (str): Reference path standing for the root in source locators.
        root_ref_id (str): Identifier of the existing directory the harvest attaches to.
        exclusion_rules (Optional[BaseExclusionRules]): Rules for excluding entries.
        reference_separator (str): Separator used to join reference paths.

    Example:
        >>> walker = HarvestWalker("dist", "$(var.HarvestPath)", "INSTALLFOLDER")  # doctest: +SKIP
        >>> registry = ComponentRegistry()  # doctest: +SKIP
        >>> for record in walker.walk(registry):  # doctest: +SKIP
        ...     print(record)
    """

    def __init__(
        self,
        root_path: PathType,
        reference_root: str,
        root_ref_id: str,
        exclusion_rules: Optional[BaseExclusionRules] = None,
        reference_separator: str = "\\",
    ) -> None:
        self.root_path = Path(root_path)
        self.reference_root = reference_root
        self.root_ref_id = root_ref_id
        self.exclusion_rules = exclusion_rules
        self.reference_separator = reference_separator

    def walk(self, registry: Optional[ComponentRegistry] = None) -> Iterator[HarvestRecord]:
        """Yield the records of the harvested tree.

        Args:
            registry: Accumulator receiving every component id in the order emitted.

        Yields:
            DirectoryOpen, FileUnit and DirectoryClose records, starting with the anchor
            DirectoryOpen and ending with the anchor DirectoryClose.

        Raises:
            PathNotFoundError: If the root path doesn't exist or isn't a directory.
            TraversalError: If a directory can't be enumerated or a file's metadata
                can't be read.
        """
        if not self.root_path.exists():
            raise PathNotFoundError(self.root_path, what="Root directory")
        if not self.root_path.is_dir():
            raise PathNotFoundError(self.root_path, what="Root path", reason="is not a directory")

        root_directory_id = directory_id(self.reference_root)

        yield DirectoryOpen(
            directory_id=self.root_ref_id,
            name=self.root_path.resolve().name,
            relative_path="",
            reference_path=self.reference_root,
            is_anchor=True,
        )
        yield from self._walk_directory(self.root_path, "", self.reference_root, root_directory_id, registry)
        yield DirectoryClose(directory_id=self.root_ref_id, is_anchor=True)

    def _walk_directory(
        self,
        path: Path,
        relative_path: str,
        reference_path: str,
        current_directory_id: str,
        registry: Optional[ComponentRegistry],
    ) -> Iterator[HarvestRecord]:
        """Recursively yield records for the contents of one directory."""
        logger.debug("Entering %s", relative_path or ".")
        files, subdirectories = self._scan(path)

        for entry in files:
            child_relative_path = f"{relative_path}/{entry.name}" if relative_path else entry.name
            if self._is_excluded(child_relative_path, is_dir=False):
                continue

            try:
                size = entry.stat().st_size
            except OSError as e:
                raise TraversalError(entry.path, e) from e

            unit_file_id = file_id(current_directory_id, entry.name)
            unit_component_id = component_id(current_directory_id, unit_file_id)
            if registry is not None:
                registry.add(unit_component_id)

            yield FileUnit(
                directory_id=current_directory_id,
                file_id=unit_file_id,
                component_id=unit_component_id,
                name=entry.name,
                relative_path=child_relative_path,
                reference_path=join_reference(reference_path, entry.name, self.reference_separator),
                size=size,
            )

        for entry in subdirectories:
            child_relative_path = f"{relative_path}/{entry.name}" if relative_path else entry.name
            if self._is_excluded(child_relative_path, is_dir=True):
                continue

            child_reference_path = join_reference(reference_path, entry.name, self.reference_separator)
            child_directory_id = directory_id(child_reference_path)

            yield DirectoryOpen(
                directory_id=child_directory_id,
                name=entry.name,
                relative_path=child_relative_path,
                reference_path=child_reference_path,
            )
            yield from self._walk_directory(
                Path(entry.path), child_relative_path, child_reference_path, child_directory_id, registry
            )
            yield DirectoryClose(directory_id=child_directory_id)

    def _scan(self, path: Path) -> Tuple[List[os.DirEntry], List[os.DirEntry]]:
        """Split the immediate entries of a directory into files and subdirectories.

        Entries that are neither regular files nor directories (sockets, FIFOs,
        dangling links) are skipped.

        Raises:
            TraversalError: If the directory or an entry's type can't be read.
        """
        try:
            with os.scandir(path) as it:
                entries = list(it)
        except OSError as e:
            raise TraversalError(path, e) from e

        files: List[os.DirEntry] = []
        subdirectories: List[os.DirEntry] = []
        for entry in entries:
            try:
                if entry.is_dir():
                    subdirectories.append(entry)
                elif entry.is_file():
                    files.append(entry)
                else:
                    logger.debug("Skipping %s: not a regular file or directory", entry.path)
            except OSError as e:
                raise TraversalError(entry.path, e) from e
        return files, subdirectories

    def _is_excluded(self, relative_path: str, is_dir: bool) -> bool:
        if self.exclusion_rules is None:
            return False
        if self.exclusion_rules.exclude(relative_path, is_dir=is_dir):
            logger.debug("Excluding %s%s", relative_path, "/" if is_dir else "")
            return True
        return False
