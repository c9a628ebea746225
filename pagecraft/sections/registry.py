"""
Section registry for pagecraft.

This module defines the canonical page sections pagecraft knows about
(their aliases, header icon and color). The registry is built once from
configuration and never mutated; components receive it by reference.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..config import config
from ..models.blocks import BlockDescriptor, Icon
from ..models.rich_text import text_span

DEFAULT_SECTION_ICON = "https://www.notion.so/icons/document_gray.svg"
DEFAULT_SECTION_COLOR = "gray_background"


@dataclass(frozen=True)
class SectionConfig:
    """
    Definition of a canonical page section.
    """
    name: str
    aliases: Tuple[str, ...] = ()
    icon_url: str = DEFAULT_SECTION_ICON
    color: str = DEFAULT_SECTION_COLOR


class SectionRegistry:
    """
    Immutable lookup of canonical sections by lower-cased name.
    """

    def __init__(self, sections: Iterable[SectionConfig] = ()):
        self._sections = MappingProxyType({section.name.lower(): section for section in sections})

    @classmethod
    def from_config(cls, definitions: Dict[str, Any]) -> "SectionRegistry":
        """
        Build a registry from the `sections` configuration mapping.

        Args:
            definitions: canonical name -> {aliases, icon_url, color}

        Returns:
            A new SectionRegistry
        """
        sections = []
        for name, definition in (definitions or {}).items():
            definition = definition or {}
            sections.append(SectionConfig(
                name=name,
                aliases=tuple(definition.get("aliases") or ()),
                icon_url=definition.get("icon_url") or DEFAULT_SECTION_ICON,
                color=definition.get("color") or DEFAULT_SECTION_COLOR,
            ))
        return cls(sections)

    def get(self, name: str) -> Optional[SectionConfig]:
        return self._sections.get(name.lower())

    def aliases_for(self, name: str) -> Tuple[str, ...]:
        section = self.get(name)
        return section.aliases if section else ()

    def list_sections(self) -> List[str]:
        return list(self._sections.keys())

    def header_block(self, name: str) -> BlockDescriptor:
        """
        Build the callout that opens a section.

        Args:
            name: Section name as it should be displayed

        Returns:
            Callout descriptor with the section's bold title, icon and color
        """
        section = self.get(name) or SectionConfig(name=name)
        return BlockDescriptor.callout(
            [text_span(name, bold=True)],
            icon=Icon(kind="external", value=section.icon_url),
            color=section.color,
        )


# Global section registry instance
section_registry = SectionRegistry.from_config(config.section_definitions)
