"""Minimal host-document model used by the display adapter.

Only the operations the adapter needs are modelled: lookup by id, element
creation, attribute/style mutation, tree edits and click listeners. A page can
be serialized with ``Document.to_html()`` for server-side rendering.
"""

from __future__ import annotations

import html
import logging
import webbrowser
from typing import Any, Callable, Iterator, Optional

logger = logging.getLogger(__name__)

VOID_TAGS = frozenset({"br", "hr", "img", "input", "link", "meta"})

EventListener = Callable[["DomEvent"], Any]
WindowOpener = Callable[[str, str], Any]


class DomEvent:
    def __init__(self, type: str, target: Optional[Element] = None) -> None:
        self.type = type
        self.target = target
        self.default_prevented = False

    def prevent_default(self) -> None:
        self.default_prevented = True


class Element:
    def __init__(self, tag: str, *, text: str = "") -> None:
        self.tag = tag.lower()
        self.text = text
        self.attributes: dict[str, str] = {}
        self.style: dict[str, str] = {}
        self.class_list: list[str] = []
        self.children: list[Element] = []
        self.parent: Optional[Element] = None
        self._listeners: dict[str, list[EventListener]] = {}

    @property
    def id(self) -> Optional[str]:
        return self.attributes.get("id")

    @id.setter
    def id(self, value: str) -> None:
        self.attributes["id"] = value

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def add_class(self, *names: str) -> None:
        for name in names:
            if name not in self.class_list:
                self.class_list.append(name)

    def append_child(self, child: Element) -> Element:
        if child.parent is not None:
            child.parent.remove_child(child)
        child.parent = self
        self.children.append(child)
        return child

    def insert_before(self, child: Element, reference: Optional[Element]) -> Element:
        if reference is None:
            return self.append_child(child)
        if reference.parent is not self:
            raise ValueError("reference element is not a child of this element")
        if child.parent is not None:
            child.parent.remove_child(child)
        child.parent = self
        self.children.insert(self.children.index(reference), child)
        return child

    def remove_child(self, child: Element) -> Element:
        self.children.remove(child)
        child.parent = None
        return child

    def replace_with(self, replacement: Element) -> None:
        """Put ``replacement`` where this element sits in its parent."""
        parent = self.parent
        if parent is None:
            raise ValueError("element has no parent")
        parent.insert_before(replacement, self)
        parent.remove_child(self)

    def add_event_listener(self, type: str, listener: EventListener) -> None:
        self._listeners.setdefault(type, []).append(listener)

    def dispatch_event(self, event: DomEvent) -> bool:
        """Run listeners for ``event``; returns False if one prevented the default."""
        if event.target is None:
            event.target = self
        for listener in list(self._listeners.get(event.type, [])):
            listener(event)
        return not event.default_prevented

    def click(self) -> bool:
        return self.dispatch_event(DomEvent("click", self))

    def iter(self) -> Iterator[Element]:
        yield self
        for child in self.children:
            yield from child.iter()

    def find_all(self, predicate: Callable[[Element], bool]) -> list[Element]:
        return [element for element in self.iter() if predicate(element)]

    def find_by_class(self, name: str) -> list[Element]:
        return self.find_all(lambda element: name in element.class_list)

    def to_html(self) -> str:
        attrs = dict(self.attributes)
        if self.class_list:
            attrs["class"] = " ".join(self.class_list)
        if self.style:
            attrs["style"] = "; ".join(f"{key}: {value}" for key, value in self.style.items())
        rendered_attrs = "".join(
            f' {name}="{html.escape(value, quote=True)}"' for name, value in attrs.items()
        )
        if self.tag in VOID_TAGS:
            return f"<{self.tag}{rendered_attrs}>"
        # style bodies are CSS, not markup
        text = self.text if self.tag == "style" else html.escape(self.text)
        inner = text + "".join(child.to_html() for child in self.children)
        return f"<{self.tag}{rendered_attrs}>{inner}</{self.tag}>"


class Document:
    """A page: ``head`` and ``body`` plus a way to open new browsing contexts."""

    def __init__(self, *, opener: Optional[WindowOpener] = None) -> None:
        self.root = Element("html")
        self.head = self.root.append_child(Element("head"))
        self.body = self.root.append_child(Element("body"))
        self._opener = opener or _open_in_browser

    def create_element(self, tag: str, *, text: str = "") -> Element:
        return Element(tag, text=text)

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        for element in self.root.iter():
            if element.id == element_id:
                return element
        return None

    def open_window(self, url: str, target: str = "_blank") -> None:
        logger.debug("Opening %s in %s", url, target)
        self._opener(url, target)

    def to_html(self) -> str:
        return "<!DOCTYPE html>" + self.root.to_html()


def _open_in_browser(url: str, target: str) -> None:
    webbrowser.open_new_tab(url)
