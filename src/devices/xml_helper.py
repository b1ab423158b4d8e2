# XML Helper for device documents
# UPnP documents use a default namespace; lookups here match on local names only

import xml.etree.ElementTree as ET
from typing import Optional

from errors import DecodeError

def local_name(tag: str) -> str:
    """Strip a '{namespace}' prefix from an element tag"""
    return tag.rsplit('}', 1)[-1]

def parse_document(url: str, document: bytes) -> ET.Element:
    """Parse a document body, raising DecodeError for malformed XML"""
    try:
        return ET.fromstring(document)
    except ET.ParseError as e:
        raise DecodeError(url, f"malformed XML: {e}") from e

def find_child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if local_name(child.tag) == name:
            return child
    return None

def find_descendant(element: ET.Element, name: str) -> Optional[ET.Element]:
    for node in element.iter():
        if local_name(node.tag) == name:
            return node
    return None

def child_text(element: ET.Element, name: str) -> str:
    child = find_child(element, name)
    if child is None or child.text is None:
        return ""
    return child.text.strip()
