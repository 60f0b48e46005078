#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidymd/state.py
"""Per-document conversion state.

Conversion results are not stored on the tree nodes themselves. Instead each
call to :func:`tidymd.tidy_markdown` owns a :class:`ConversionState` that maps
node identity to an :class:`Annotation`. An annotation is created when a
node's rule is resolved and completed exactly once when the node is
processed, after all of its descendants.

"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Iterable, NamedTuple, Optional

from bs4 import PageElement

from tidymd.dom import node_type
from tidymd.exceptions import ConversionError

if TYPE_CHECKING:
    from tidymd.converters import Rule


@dataclass(frozen=True, order=True)
class Link:
    """A named link reference, rendered in the trailing definition block.

    Instances order by ``(name, url)``, which is the order of the definitions
    in the output.
    """

    name: str
    url: str
    title: Optional[str] = None

    def definition(self) -> str:
        """Render the ``[name]: url "title"`` definition line."""
        optional_title = f' "{self.title}"' if self.title else ""
        return f"[{self.name}]: {self.url}{optional_title}"


class Whitespace(NamedTuple):
    """Whitespace a node contributes to its neighbours during assembly."""

    leading: str = ""
    trailing: str = ""


NO_WHITESPACE = Whitespace()


@dataclass(frozen=True)
class Annotation:
    """Conversion data for one node.

    Attributes
    ----------
    node : PageElement
        The annotated node, held so its identity stays valid
    rule : Rule
        The conversion rule resolved for the node
    replacement : str or None
        Markdown for the node, None until processed
    whitespace : Whitespace or None
        Flanking whitespace, None until processed

    """

    node: PageElement
    rule: "Rule"
    replacement: Optional[str] = None
    whitespace: Optional[Whitespace] = None

    @property
    def processed(self) -> bool:
        return self.replacement is not None


class ConversionState:
    """Side-table of annotations for one document.

    Parameters
    ----------
    links : iterable of Link
        The document's link references, in output order

    """

    def __init__(self, links: Iterable[Link] = ()):
        self.links: tuple[Link, ...] = tuple(links)
        self._annotations: dict[int, Annotation] = {}

    def __len__(self) -> int:
        return len(self._annotations)

    def _get(self, node: Optional[PageElement]) -> Optional[Annotation]:
        if node is None:
            return None
        annotation = self._annotations.get(id(node))
        if annotation is None or annotation.node is not node:
            return None
        return annotation

    def assign_rule(self, node: PageElement, rule: "Rule") -> None:
        """Record the rule resolved for ``node``."""
        if self._get(node) is not None:
            raise ConversionError(f"Rule already assigned to {node_type(node)}", node_name=node_type(node))
        self._annotations[id(node)] = Annotation(node=node, rule=rule)

    def rule_of(self, node: Optional[PageElement]) -> Optional["Rule"]:
        annotation = self._get(node)
        return annotation.rule if annotation else None

    def has_rule(self, node: Optional[PageElement]) -> bool:
        return self._get(node) is not None

    def record(self, node: PageElement, replacement: str, whitespace: Whitespace) -> None:
        """Store the processing result for ``node``.

        Raises
        ------
        ConversionError
            If the node has no rule yet or was already processed

        """
        annotation = self._get(node)
        if annotation is None:
            raise ConversionError(f"No rule resolved for {node_type(node)}", node_name=node_type(node))
        if annotation.processed:
            raise ConversionError(f"{node_type(node)} was already converted", node_name=node_type(node))
        self._annotations[id(node)] = replace(annotation, replacement=replacement, whitespace=whitespace)

    def replacement_of(self, node: Optional[PageElement]) -> Optional[str]:
        annotation = self._get(node)
        return annotation.replacement if annotation else None

    def whitespace_of(self, node: Optional[PageElement]) -> Whitespace:
        """Flanking whitespace of ``node``, empty for unannotated nodes."""
        annotation = self._get(node)
        if annotation is None or annotation.whitespace is None:
            return NO_WHITESPACE
        return annotation.whitespace
