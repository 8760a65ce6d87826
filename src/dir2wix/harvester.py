"""Directory harvesting into WiX source documents with streaming support.

This module provides the Harvester class, which ties together the walker, the
exclusion rules and an output strategy, and streams the resulting document
piece by piece.
"""

import logging
from pathlib import Path
from typing import Iterator, Optional, Tuple

from anytree import RenderTree

from dir2wix.exceptions import InvalidArgumentsError
from dir2wix.exclusion_rules.base_rules import BaseExclusionRules
from dir2wix.harvest_tree.harvest_node import HarvestNode, build_harvest_tree
from dir2wix.harvest_tree.records import ComponentRegistry, DirectoryOpen, FileUnit, HarvestRecord
from dir2wix.harvest_tree.walker import HarvestWalker
from dir2wix.identifiers import is_valid_identifier
from dir2wix.output_strategies.base_strategy import OutputStrategy
from dir2wix.output_strategies.wix_strategy import WixOutputStrategy
from dir2wix.types import PathType

logger = logging.getLogger(__name__)

DEFAULT_PREPROCESSOR_VARIABLE = "var.HarvestPath"
DEFAULT_COMPONENT_GROUP = "HeatGenerated"
DEFAULT_DIRECTORY_REF = "INSTALLFOLDER"


def preprocessor_reference(variable: str) -> str:
    """Build a reference prefix from a WiX preprocessor variable name.

    Example:
        >>> preprocessor_reference("var.HarvestPath")
        '$(var.HarvestPath)'
    """
    return f"$({variable})"


class Harvester:
    """Streaming directory harvester producing an installer-authoring document.

    Every call to stream_document() or records() performs a fresh walk of the
    directory. Metrics and the collected component ids describe the most recent walk
    and are final once that walk has been consumed completely.

    The document is streamed in walk order: the nested structure first, then the flat
    component group. The group can only be produced after the walk has finished, so
    the component ids are gathered in a ComponentRegistry passed to the walker.

    Attributes:
        directory (Path): Directory being harvested.
        reference_root (str): Prefix of all emitted source locators.
        root_ref_id (str): Id of the anchor directory the harvest attaches to.
        component_group (str): Name of the flat component group.
        harvest_complete (bool): Whether the most recent walk ran to completion.

    Example:
        >>> harvester = Harvester("dist", component_group="AppFiles")  # doctest: +SKIP
        >>> document = "".join(harvester.stream_document())  # doctest: +SKIP
        >>> harvester.file_count  # doctest: +SKIP
        12

    Raises:
        InvalidArgumentsError: If root_ref_id or component_group is not a valid identifier.
    """

    def __init__(
        self,
        directory: PathType,
        *,
        reference_root: str = preprocessor_reference(DEFAULT_PREPROCESSOR_VARIABLE),
        root_ref_id: str = DEFAULT_DIRECTORY_REF,
        component_group: str = DEFAULT_COMPONENT_GROUP,
        exclusion_rules: Optional[BaseExclusionRules] = None,
        output_strategy: Optional[OutputStrategy] = None,
        reference_separator: str = "\\",
    ):
        """Initialize a harvest.

        Args:
            directory: Directory to harvest. Can be any path-like object.
            reference_root: Prefix of emitted source locators, e.g. ``$(var.HarvestPath)``.
            root_ref_id: Id of the existing directory the harvested structure attaches to.
            component_group: Name of the flat component group.
            exclusion_rules: Optional rules filtering files and directories. If None,
                nothing is excluded.
            output_strategy: Document format. Defaults to a WiX 3 strategy.
            reference_separator: Separator joining reference paths.

        Raises:
            InvalidArgumentsError: If root_ref_id or component_group is not a valid identifier.
        """
        if not is_valid_identifier(root_ref_id):
            raise InvalidArgumentsError(f"{root_ref_id!r} is not a valid identifier", "--directory-ref")
        if not is_valid_identifier(component_group):
            raise InvalidArgumentsError(f"{component_group!r} is not a valid identifier", "--component-group")

        self.directory = Path(directory)
        self.reference_root = reference_root
        self.root_ref_id = root_ref_id
        self.component_group = component_group
        self._strategy = output_strategy if output_strategy is not None else WixOutputStrategy()
        self._walker = HarvestWalker(
            self.directory,
            reference_root,
            root_ref_id,
            exclusion_rules=exclusion_rules,
            reference_separator=reference_separator,
        )
        self._reset()

    def _reset(self) -> None:
        self._registry = ComponentRegistry()
        self._directory_count = 0
        self._file_count = 0
        self._total_size = 0
        self.harvest_complete = False

    @property
    def directory_count(self) -> int:
        """Number of harvested directories, excluding the anchor."""
        return self._directory_count

    @property
    def file_count(self) -> int:
        """Number of harvested files (installable units)."""
        return self._file_count

    @property
    def total_size(self) -> int:
        """Combined size in bytes of all harvested files."""
        return self._total_size

    @property
    def component_ids(self) -> Tuple[str, ...]:
        """Component ids of the most recent walk in the order they were encountered."""
        return self._registry.ids

    def records(self) -> Iterator[HarvestRecord]:
        """Walk the directory and yield its records, updating the metrics as they pass.

        Raises:
            PathNotFoundError: If the directory doesn't exist or isn't a directory.
            TraversalError: If part of the tree can't be read.
        """
        self._reset()
        for record in self._walker.walk(self._registry):
            if isinstance(record, FileUnit):
                self._file_count += 1
                self._total_size += record.size
            elif isinstance(record, DirectoryOpen) and not record.is_anchor:
                self._directory_count += 1
            yield record
        self.harvest_complete = True
        logger.info(
            "Harvested %d files in %d directories from %s", self._file_count, self._directory_count, self.directory
        )

    def stream_document(self) -> Iterator[str]:
        """Stream the output document piece by piece.

        Yields:
            Consecutive pieces of the document; their concatenation is the whole document.

        Raises:
            PathNotFoundError: If the directory doesn't exist or isn't a directory.
            TraversalError: If part of the tree can't be read.
        """
        strategy = self._strategy
        depth = 0

        yield strategy.format_document_start()
        for record in self.records():
            if isinstance(record, DirectoryOpen):
                yield strategy.format_directory_start(record, depth)
                depth += 1
            elif isinstance(record, FileUnit):
                yield strategy.format_file(record, depth - 1)
            else:
                depth -= 1
                yield strategy.format_directory_end(record, depth)

        yield strategy.format_structure_end()
        yield strategy.format_component_group(self.component_group, self._registry.ids)
        yield strategy.format_document_end()

    def build_tree(self) -> Optional[HarvestNode]:
        """Walk the directory and return the harvested structure as a node tree."""
        return build_harvest_tree(self.records())

    def stream_tree_representation(self) -> Iterator[str]:
        """Stream a tree view of the harvest, one line per entry.

        Directories are shown with a trailing slash and their id, files with their
        component id.

        Example:
            >>> for line in Harvester("dist").stream_tree_representation():  # doctest: +SKIP
            ...     print(line)
            dist/ [INSTALLFOLDER]
            ├── app.exe [cmp5D0C...]
            └── plugins/ [dir83B1...]
        """
        root = self.build_tree()
        if root is None:
            return
        for prefix, _, node in RenderTree(root):
            suffix = "/" if node.is_dir else ""
            yield f"{prefix}{node.name}{suffix} [{node.identifier}]"
