"""WiX output strategy for harvest document formatting.

This module provides a strategy for formatting a harvest as a WiX source fragment
(``.wxs``), ensuring proper XML structure and attribute escaping.
"""

from typing import Dict, Sequence
from xml.sax.saxutils import escape as xml_escape

from dir2wix.harvest_tree.records import DirectoryClose, DirectoryOpen, FileUnit

from .base_strategy import OutputStrategy

WIX_NAMESPACES: Dict[int, str] = {
    3: "http://schemas.microsoft.com/wix/2006/wi",
    4: "http://wixtoolset.org/schemas/v4/wxs",
}


class WixOutputStrategy(OutputStrategy):
    """Output strategy that formats a harvest as a WiX source document.

    The document has two fragments. The first nests the harvested structure under a
    ``DirectoryRef`` to the anchor directory: each directory becomes a ``Directory``
    element and each file a ``Component`` holding one ``File``. The second fragment
    holds a ``ComponentGroup`` referencing every component in harvest order:

    <?xml version="1.0" encoding="UTF-8"?>
    <Wix xmlns="http://schemas.microsoft.com/wix/2006/wi">
      <Fragment>
        <DirectoryRef Id="INSTALLFOLDER">
          <Component Id="cmp..." Guid="*">
            <File Id="fil..." KeyPath="yes" Source="$(var.HarvestPath)\\a.txt" />
          </Component>
          <Directory Id="dir..." Name="sub">
          </Directory>
        </DirectoryRef>
      </Fragment>
      <Fragment>
        <ComponentGroup Id="HeatGenerated">
          <ComponentRef Id="cmp..." />
        </ComponentGroup>
      </Fragment>
    </Wix>

    WiX 3 components carry ``Guid="*"`` so the toolset derives component GUIDs from
    the key path; WiX 4 does this by default and the attribute is omitted.

    Attributes:
        wix_version (int): Target WiX schema version (3 or 4).
        indent (str): Indentation unit.

    Example:
        >>> strategy = WixOutputStrategy()
        >>> unit = FileUnit("dir0", "fil0", "cmp0", "a&b.txt", "a&b.txt", "$(var.HarvestPath)\\\\a&b.txt", 3)
        >>> print(strategy.format_file(unit, 0), end='')
              <Component Id="cmp0" Guid="*">
                <File Id="fil0" KeyPath="yes" Source="$(var.HarvestPath)\\a&amp;b.txt" />
              </Component>
    """

    def __init__(self, wix_version: int = 3, indent: str = "  ") -> None:
        """Initialize the WiX output strategy.

        Args:
            wix_version: Target WiX schema version, 3 or 4.
            indent: Indentation unit. Defaults to two spaces.

        Raises:
            ValueError: If wix_version is not supported.
        """
        if wix_version not in WIX_NAMESPACES:
            raise ValueError(f"Unsupported WiX version: {wix_version}. Must be one of: 3, 4")
        self.wix_version = wix_version
        self.indent = indent
        self._xml_entities = {
            '"': "&quot;",
        }

    @property
    def namespace(self) -> str:
        return WIX_NAMESPACES[self.wix_version]

    def _attr(self, value: str) -> str:
        return xml_escape(value, self._xml_entities)

    def _line(self, level: int, text: str) -> str:
        return f"{self.indent * level}{text}\n"

    def format_document_start(self) -> str:
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f'<Wix xmlns="{self.namespace}">\n'
            + self._line(1, "<Fragment>")
        )

    def format_directory_start(self, record: DirectoryOpen, depth: int) -> str:
        """Format the opening tag of a directory.

        Example:
            >>> strategy = WixOutputStrategy()
            >>> anchor = DirectoryOpen("INSTALLFOLDER", "dist", "", "$(var.HarvestPath)", is_anchor=True)
            >>> print(strategy.format_directory_start(anchor, 0), end='')
                <DirectoryRef Id="INSTALLFOLDER">
            >>> sub = DirectoryOpen("dirA", "Tom & Jerry", "Tom & Jerry", "$(var.HarvestPath)\\\\Tom & Jerry")
            >>> print(strategy.format_directory_start(sub, 1), end='')
                  <Directory Id="dirA" Name="Tom &amp; Jerry">
        """
        if record.is_anchor:
            return self._line(depth + 2, f'<DirectoryRef Id="{self._attr(record.directory_id)}">')
        return self._line(
            depth + 2, f'<Directory Id="{self._attr(record.directory_id)}" Name="{self._attr(record.name)}">'
        )

    def format_file(self, unit: FileUnit, depth: int) -> str:
        guid = ' Guid="*"' if self.wix_version == 3 else ""
        return (
            self._line(depth + 3, f'<Component Id="{self._attr(unit.component_id)}"{guid}>')
            + self._line(
                depth + 4,
                f'<File Id="{self._attr(unit.file_id)}" KeyPath="yes" Source="{self._attr(unit.reference_path)}" />',
            )
            + self._line(depth + 3, "</Component>")
        )

    def format_directory_end(self, record: DirectoryClose, depth: int) -> str:
        return self._line(depth + 2, "</DirectoryRef>" if record.is_anchor else "</Directory>")

    def format_structure_end(self) -> str:
        return self._line(1, "</Fragment>")

    def format_component_group(self, group_name: str, component_ids: Sequence[str]) -> str:
        """Format the fragment holding the component group.

        Example:
            >>> print(WixOutputStrategy().format_component_group("Files", ["cmp1", "cmp2"]), end='')
              <Fragment>
                <ComponentGroup Id="Files">
                  <ComponentRef Id="cmp1" />
                  <ComponentRef Id="cmp2" />
                </ComponentGroup>
              </Fragment>
        """
        parts = [self._line(1, "<Fragment>"), self._line(2, f'<ComponentGroup Id="{self._attr(group_name)}">')]
        parts.extend(self._line(3, f'<ComponentRef Id="{self._attr(cid)}" />') for cid in component_ids)
        parts.append(self._line(2, "</ComponentGroup>"))
        parts.append(self._line(1, "</Fragment>"))
        return "".join(parts)

    def format_document_end(self) -> str:
        return "</Wix>\n"

    def get_file_extension(self) -> str:
        return ".wxs"
