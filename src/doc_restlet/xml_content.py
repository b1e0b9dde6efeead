"""XML helpers: example extraction, whitespace cleanup and pretty printing.

If a document has an element named <example> directly below its root,
only the first element inside it is of interest:

    <root>
      <example>
        <item id="1"/>     <- the example content
      </example>
    </root>

Pretty printing first removes every whitespace-only text node from the
owning document, then indents element-only content two spaces per level.
Text inside mixed content is never touched, so printing the output of a
previous print yields the same string.
"""
from typing import List, Optional, Union
from xml.dom import minidom, Node, XMLNS_NAMESPACE
from xml.parsers.expat import ExpatError

from .errors import XmlError
from .logging import logger

ELEMENT_EXAMPLE = "example"
CHARSET = "UTF-8"
INDENT = "  "

_XML_WHITESPACE = " \t\r\n"
_TEXT_NODES = (Node.TEXT_NODE, Node.CDATA_SECTION_NODE)


def parse_xml(content: Union[bytes, str], source: str = "") -> minidom.Document:
    """Parse ``content`` into a namespace-aware DOM document.

    Raises:
        XmlError: If the content is not well-formed XML
    """
    try:
        return minidom.parseString(content)
    except ExpatError as ex:
        raise XmlError(
            f"Failed to parse the response from url: {source}",
            details={"url": source, "cause": str(ex)}
        ) from ex


def get_example_content(doc: minidom.Document) -> Optional[minidom.Element]:
    """Return the first element child of the first <example> below the root.

    <example> elements deeper in the tree are ignored.

    Returns:
        The example element, or None if there is none
    """
    root = doc.documentElement
    example = None
    for node in doc.getElementsByTagNameNS("*", ELEMENT_EXAMPLE):
        if node.parentNode is root:
            example = node
            break
    if example is None:
        logger.debug("No valid element %s", ELEMENT_EXAMPLE)
        return None

    for child in example.childNodes:
        if child.nodeType == Node.ELEMENT_NODE:
            return child
    logger.debug("No element content inside %s", ELEMENT_EXAMPLE)
    return None


def _whitespace_text_nodes(node: Node, found: List[Node]) -> List[Node]:
    for child in node.childNodes:
        if child.nodeType in _TEXT_NODES:
            if not child.data.strip(_XML_WHITESPACE):
                found.append(child)
        elif child.hasChildNodes():
            _whitespace_text_nodes(child, found)
    return found


def clean_whitespace(doc: minidom.Document) -> int:
    """Remove all text nodes that contain only XML whitespace.

    Returns:
        Number of removed nodes
    """
    nodes = _whitespace_text_nodes(doc, [])
    for node in nodes:
        node.parentNode.removeChild(node)
    return len(nodes)


def _indent(element: minidom.Element, level: int) -> None:
    children = list(element.childNodes)
    if not children:
        return
    if any(child.nodeType in _TEXT_NODES for child in children):
        return  # mixed or text content
    doc = element.ownerDocument
    inner = "\n" + INDENT * (level + 1)
    for child in children:
        element.insertBefore(doc.createTextNode(inner), child)
        if child.nodeType == Node.ELEMENT_NODE:
            _indent(child, level + 1)
    element.appendChild(doc.createTextNode("\n" + INDENT * level))


def _namespace_declarations(element: minidom.Element) -> List[tuple]:
    """xmlns attributes declared on the ancestors of ``element``, nearest first."""
    declarations = []
    parent = element.parentNode
    while parent is not None and parent.nodeType == Node.ELEMENT_NODE:
        for name, value in parent.attributes.items():
            if name == "xmlns" or name.startswith("xmlns:"):
                declarations.append((name, value))
        parent = parent.parentNode
    return declarations


def _as_document(element: minidom.Element) -> minidom.Document:
    impl = minidom.getDOMImplementation()
    doc = impl.createDocument(None, None, None)
    root = doc.importNode(element, True)
    for name, value in _namespace_declarations(element):
        if not root.hasAttribute(name):
            root.setAttributeNS(XMLNS_NAMESPACE, name, value)
    doc.appendChild(root)
    return doc


def to_string(node: Union[minidom.Document, minidom.Element]) -> str:
    """Pretty print ``node`` as a standalone UTF-8 XML document.

    The document owning ``node`` is cleaned of whitespace-only text first.

    Raises:
        XmlError: If the node cannot be serialized
    """
    if node.nodeType == Node.DOCUMENT_NODE:
        clean_whitespace(node)
        doc = node
    else:
        clean_whitespace(node.ownerDocument)
        doc = _as_document(node)

    if doc.documentElement is None:
        raise XmlError("Nothing to serialize.", details={"node": node.nodeName})
    _indent(doc.documentElement, 0)
    try:
        return doc.toxml(encoding=CHARSET, standalone=True).decode(CHARSET)
    except (ValueError, UnicodeError) as ex:
        raise XmlError("Failed to serialize XML.", details={"cause": str(ex)}) from ex
