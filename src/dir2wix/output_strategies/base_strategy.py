"""Output strategy base class defining the interface for harvest document formatting.

This module provides the abstract base class that defines how harvest records are
turned into document text. It establishes the contract that concrete strategies must
follow: a document start, one piece of text per record, the flat component group, and
a document end, all streamed in that order.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from dir2wix.harvest_tree.records import DirectoryClose, DirectoryOpen, FileUnit


class OutputStrategy(ABC):
    """Abstract base class defining the interface for harvest document formatting strategies.

    This class implements the Strategy pattern for serializing a harvest. A document is
    produced in five phases:
    1. Document start - declaration, root element and the opening of the structure section
    2. Records - one call per DirectoryOpen, FileUnit and DirectoryClose, in walk order
    3. Structure end - closes the structure section
    4. Component group - the flat list of component references
    5. Document end - closes the root element

    Each record method receives the nesting depth of the record, where the anchor
    directory has depth 0, its direct children depth 1, and so on. Strategies use it
    for indentation only.

    Example:
        >>> class ListStrategy(OutputStrategy):
        ...     def format_document_start(self) -> str:
        ...         return ""
        ...     def format_directory_start(self, record, depth) -> str:
        ...         return "  " * depth + record.name + "/\\n"
        ...     def format_file(self, unit, depth) -> str:
        ...         return "  " * depth + unit.name + "\\n"
        ...     def format_directory_end(self, record, depth) -> str:
        ...         return ""
        ...     def format_structure_end(self) -> str:
        ...         return ""
        ...     def format_component_group(self, group_name, component_ids) -> str:
        ...         return f"{group_name}: {len(component_ids)}\\n"
        ...     def format_document_end(self) -> str:
        ...         return ""
        ...     def get_file_extension(self) -> str:
        ...         return ".txt"
    """

    @abstractmethod
    def format_document_start(self) -> str:
        """Format everything that precedes the anchor directory."""
        pass

    @abstractmethod
    def format_directory_start(self, record: DirectoryOpen, depth: int) -> str:
        """Format the opening of a directory, or of the anchor reference when ``record.is_anchor``."""
        pass

    @abstractmethod
    def format_file(self, unit: FileUnit, depth: int) -> str:
        """Format one installable unit.

        Args:
            unit: The harvested file with its identifiers and source locator.
            depth: Depth of the directory containing the file.
        """
        pass

    @abstractmethod
    def format_directory_end(self, record: DirectoryClose, depth: int) -> str:
        """Format the closing of the directory opened at the same depth."""
        pass

    @abstractmethod
    def format_structure_end(self) -> str:
        """Format everything between the anchor directory and the component group."""
        pass

    @abstractmethod
    def format_component_group(self, group_name: str, component_ids: Sequence[str]) -> str:
        """Format the flat list of component references.

        Args:
            group_name: Name of the group.
            component_ids: Component ids in the order they were first encountered.
        """
        pass

    @abstractmethod
    def format_document_end(self) -> str:
        """Format everything that follows the component group."""
        pass

    @abstractmethod
    def get_file_extension(self) -> str:
        """Get the appropriate file extension for this output format, including the leading dot."""
        pass
