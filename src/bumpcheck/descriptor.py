"""Read a single top-level field from an XML build descriptor (e.g. ``pom.xml``)."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from bumpcheck.exceptions import DescriptorParseError, NoRootElementError

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    """Strip an ElementTree ``{namespace}`` prefix from ``tag``."""
    return tag.rsplit("}", 1)[-1] if tag.startswith("{") else tag


def read_field(file_path: str | Path, field_name: str) -> Optional[str]:
    """Return the text of the first root child named ``field_name``.

    Only direct children of the root element are considered, so a
    ``<version>`` nested inside ``<parent>`` or ``<dependency>`` is ignored.
    Namespaces are ignored when matching, which lets a Maven POM with
    ``xmlns="http://maven.apache.org/POM/4.0.0"`` match ``"version"``.

    Args:
        file_path: Path to the XML document
        field_name: Tag name of the field to read

    Returns:
        The element's full text content (unstripped), or ``None`` if the
        root has no such child

    Raises:
        DescriptorParseError: If the file is missing, unreadable or not XML
        NoRootElementError: If the document is empty
    """
    path = Path(file_path)
    try:
        content = path.read_bytes()
    except OSError as e:
        raise DescriptorParseError(
            f"Cannot read {path.name} in {path.parent}: {e}",
            context={"path": str(path)},
        ) from e

    if not content.strip():
        raise NoRootElementError(
            f"{path.name} in {path.parent} has no root element",
            context={"path": str(path)},
        )

    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise DescriptorParseError(
            f"Cannot parse {path.name} in {path.parent}: {e}",
            context={"path": str(path)},
        ) from e

    for child in root:
        if isinstance(child.tag, str) and _local_name(child.tag) == field_name:
            return "".join(child.itertext())

    logger.debug(f"No <{field_name}> under <{_local_name(root.tag)}> in {path}")
    return None
