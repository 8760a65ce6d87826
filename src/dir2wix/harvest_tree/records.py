"""Structural records produced while harvesting a directory tree."""

from dataclasses import dataclass
from typing import Iterator, List, Tuple, Union


@dataclass(frozen=True)
class DirectoryOpen:
    """Start of a directory in the harvested structure.

    The root of a harvest is opened as an anchor: a reference to an existing
    directory whose id is supplied by the caller rather than generated.

    Attributes:
        directory_id: Generated directory id, or the anchor id for the root.
        name: Literal directory name.
        relative_path: Path relative to the harvest root using forward slashes.
            Empty for the root.
        reference_path: Path as it appears in emitted source locators.
        is_anchor: True only for the root of the harvest.
    """

    directory_id: str
    name: str
    relative_path: str
    reference_path: str
    is_anchor: bool = False


@dataclass(frozen=True)
class DirectoryClose:
    """End of the directory opened by the DirectoryOpen with the same id."""

    directory_id: str
    is_anchor: bool = False


@dataclass(frozen=True)
class FileUnit:
    """An installable unit: one harvested file and its identifiers.

    Attributes:
        directory_id: Id of the parent directory used to derive the other ids.
        file_id: Generated file id.
        component_id: Generated id of the component wrapping the file.
        name: File name.
        relative_path: Path relative to the harvest root using forward slashes.
        reference_path: Source locator, the reference prefix joined with the
            relative path.
        size: File size in bytes.
    """

    directory_id: str
    file_id: str
    component_id: str
    name: str
    relative_path: str
    reference_path: str
    size: int


HarvestRecord = Union[DirectoryOpen, FileUnit, DirectoryClose]


class ComponentRegistry:
    """Flat, ordered collection of component ids gathered during a walk.

    The walker appends every emitted component id in the order it is first
    encountered, independent of nesting, so the ids can later be listed in a
    component group.

    Example:
        >>> registry = ComponentRegistry()
        >>> registry.add("cmpA")
        >>> registry.add("cmpB")
        >>> list(registry), len(registry)
        (['cmpA', 'cmpB'], 2)
    """

    def __init__(self) -> None:
        self._ids: List[str] = []

    def add(self, component_id: str) -> None:
        self._ids.append(component_id)

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)


def join_reference(base: str, name: str, separator: str = "\\") -> str:
    """Join a reference path and an entry name.

    Example:
        >>> join_reference("$(var.HarvestPath)", "bin")
        '$(var.HarvestPath)\\\\bin'
        >>> join_reference("dist/", "app.exe", "/")
        'dist/app.exe'
        >>> join_reference("", "app.exe")
        'app.exe'
    """
    if not base:
        return name
    if base.endswith(("\\", "/")):
        return base + name
    return f"{base}{separator}{name}"
