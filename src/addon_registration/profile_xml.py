"""
Typed XML codec for unattended profiles and reg-code files.

Profiles use the AutoYaST XML layout: every element is either a nested map,
a list (config:type="list"), a boolean (config:type="boolean"), an integer
(config:type="integer") or a plain string. There is no representation for a
null value, callers must encode "no value" themselves before writing.

Example:
    <profile xmlns="http://www.suse.com/1.0/yast2ns"
             xmlns:config="http://www.suse.com/1.0/configns">
      <suse_register>
        <do_registration config:type="boolean">true</do_registration>
        <addons config:type="list">
          <addon><name>sle-sdk</name><release_type>nil</release_type></addon>
        </addons>
      </suse_register>
    </profile>
"""

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .exceptions import ProfileError

PROFILE_NS = "http://www.suse.com/1.0/yast2ns"
CONFIG_NS = "http://www.suse.com/1.0/configns"
TYPE_ATTR = f"{{{CONFIG_NS}}}type"

# Top-level section holding the registration settings
REGISTRATION_SECTION = "suse_register"

ET.register_namespace("", PROFILE_NS)
ET.register_namespace("config", CONFIG_NS)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _element_type(element: ET.Element) -> Optional[str]:
    for name, value in element.attrib.items():
        if _local_name(name) == "type":
            return value
    return None


def element_to_value(element: ET.Element) -> Any:
    """Convert a typed XML element into a Python value."""
    declared = _element_type(element)
    raw = element.text or ""
    text = raw.strip()

    if declared == "list":
        return [element_to_value(child) for child in element]
    if declared == "boolean":
        return text.lower() == "true"
    if declared == "integer":
        try:
            return int(text)
        except ValueError:
            raise ProfileError(
                code="invalid_integer",
                message=f"Invalid integer value in <{_local_name(element.tag)}>: {text!r}",
                details={"element": _local_name(element.tag)},
            ) from None

    if len(element):
        return {_local_name(child.tag): element_to_value(child) for child in element}
    return raw


def _singular(key: str) -> str:
    if key.endswith("s") and len(key) > 1:
        return key[:-1]
    return "listentry"


def value_to_element(name: str, value: Any) -> ET.Element:
    """
    Convert a Python value into a typed XML element.

    Raises:
        ProfileError: If the value (or a nested value) is None or of an
            unsupported type
    """
    element = ET.Element(f"{{{PROFILE_NS}}}{name}")

    if value is None:
        raise ProfileError(
            code="null_value",
            message=f"Value of <{name}> is None, the profile format cannot store it",
            details={"element": name},
        )
    if isinstance(value, bool):
        element.set(TYPE_ATTR, "boolean")
        element.text = "true" if value else "false"
    elif isinstance(value, int):
        element.set(TYPE_ATTR, "integer")
        element.text = str(value)
    elif isinstance(value, str):
        element.text = value
    elif isinstance(value, Mapping):
        for key, item in value.items():
            element.append(value_to_element(str(key), item))
    elif isinstance(value, (list, tuple)):
        element.set(TYPE_ATTR, "list")
        for item in value:
            element.append(value_to_element(_singular(name), item))
    else:
        raise ProfileError(
            code="unsupported_type",
            message=f"Value of <{name}> has unsupported type {type(value).__name__}",
            details={"element": name},
        )

    return element


def parse_xml_file(path: Union[str, Path]) -> dict[str, Any]:
    """
    Parse a typed XML file into a nested mapping of the root's children.

    Raises:
        ProfileError: If the file cannot be read or is not well-formed XML
    """
    try:
        tree = ET.parse(path)
    except ET.ParseError as e:
        raise ProfileError(
            code="parse_error",
            message=f"Failed to parse XML file: {e}",
            details={"file_path": str(path)},
        ) from e
    except OSError as e:
        raise ProfileError(
            code="io_error",
            message=f"Failed to read XML file: {e}",
            details={"file_path": str(path)},
        ) from e

    value = element_to_value(tree.getroot())
    if not isinstance(value, dict):
        return {}
    return value


def read_profile(path: Union[str, Path]) -> dict[str, Any]:
    """
    Read the registration section of a persisted profile.

    Returns:
        Raw registration settings, empty when the section is missing
    """
    section = parse_xml_file(path).get(REGISTRATION_SECTION, {})
    if not isinstance(section, dict):
        return {}
    return section


def profile_to_xml(settings: Mapping[str, Any]) -> str:
    """Serialize raw registration settings into a profile document."""
    root = ET.Element(f"{{{PROFILE_NS}}}profile")
    root.append(value_to_element(REGISTRATION_SECTION, settings))
    ET.indent(root)
    return ET.tostring(root, encoding="unicode", xml_declaration=True) + "\n"


def write_profile(path: Union[str, Path], settings: Mapping[str, Any]) -> None:
    """
    Write raw registration settings to a profile file.

    Raises:
        ProfileError: If a value cannot be encoded or the file cannot be written
    """
    document = profile_to_xml(settings)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(document)
    except OSError as e:
        raise ProfileError(
            code="io_error",
            message=f"Failed to write profile: {e}",
            details={"file_path": str(path)},
        ) from e
