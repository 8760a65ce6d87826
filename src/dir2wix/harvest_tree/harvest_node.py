"""Node representation of harvested entries for previewing a harvest."""

from typing import Any, Iterable, Optional

from anytree import Node

from dir2wix.harvest_tree.records import DirectoryClose, DirectoryOpen, FileUnit, HarvestRecord


class HarvestNode(Node):  # type: ignore
    """Node class representing a harvested directory or file.

    Extends anytree.Node with the identifiers generated for the entry, so a harvest
    can be inspected as a tree (e.g. with ``anytree.RenderTree``) before any output
    document is written.

    Attributes:
        name (str): The name of the file or directory (just the basename).
        parent (Optional[HarvestNode]): The parent node in the tree.
        is_dir (bool): True if this node represents a directory, False for files.
        identifier (str): Directory id (or anchor id) for directories, component id for files.
        size (int): File size in bytes; 0 for directories.
        children (tuple[HarvestNode]): The child nodes (inherited from anytree.Node).

    Example:
        >>> root = HarvestNode("dist", is_dir=True, identifier="INSTALLFOLDER")
        >>> child = HarvestNode("app.exe", parent=root, identifier="cmp0", size=10)
        >>> root.name
        'dist'
        >>> child.is_dir
        False
    """

    def __init__(
        self,
        name: str,
        parent: Optional["HarvestNode"] = None,
        is_dir: bool = False,
        identifier: str = "",
        size: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, parent, **kwargs)
        self.is_dir = is_dir
        self.identifier = identifier
        self.size = size


def build_harvest_tree(records: Iterable[HarvestRecord]) -> Optional[HarvestNode]:
    """Assemble a stream of harvest records into a HarvestNode tree.

    Args:
        records: Records in walk order, starting with the anchor DirectoryOpen.

    Returns:
        The root node, or None if the stream was empty.

    Raises:
        ValueError: If the DirectoryOpen and DirectoryClose records don't nest properly.

    Example:
        >>> records = [
        ...     DirectoryOpen("INSTALLFOLDER", "dist", "", "$(var.HarvestPath)", is_anchor=True),
        ...     FileUnit("dir0", "fil0", "cmp0", "app.exe", "app.exe", "$(var.HarvestPath)\\\\app.exe", 10),
        ...     DirectoryClose("INSTALLFOLDER", is_anchor=True),
        ... ]
        >>> root = build_harvest_tree(records)
        >>> [child.name for child in root.children]
        ['app.exe']
    """
    root: Optional[HarvestNode] = None
    current: Optional[HarvestNode] = None

    for record in records:
        if isinstance(record, DirectoryOpen):
            node = HarvestNode(record.name, parent=current, is_dir=True, identifier=record.directory_id)
            if root is None:
                root = node
            current = node
        elif isinstance(record, FileUnit):
            if current is None:
                raise ValueError(f"File record {record.relative_path!r} outside of any directory")
            HarvestNode(record.name, parent=current, identifier=record.component_id, size=record.size)
        elif isinstance(record, DirectoryClose):
            if current is None or current.identifier != record.directory_id:
                raise ValueError(f"Unbalanced close record for {record.directory_id!r}")
            current = current.parent

    return root
