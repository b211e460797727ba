"""Conversion between internal and Salesforce naming conventions.

Internal names are lower snake case without the custom suffix
(``my_object``). Wire names are capitalized words joined together, with a
``__c`` suffix for custom components (``MyObject__c``). Labels use the
same words separated by spaces (``My Object``).

Names that contain the custom suffix anywhere but at the end do not
survive a round trip.
"""

import re

from .constants import CUSTOM_SUFFIX

# Acronym followed by a capitalized word, capitalized or lowercase word,
# bare acronym, number.
_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")


def split_words(name: str) -> list[str]:
    """Split a name on case changes, digits and any non-alphanumeric run.

    Examples:
    'field_level_security' -> ['field', 'level', 'security']
    'APIVersion2' -> ['API', 'Version', '2']
    """
    return _WORD_PATTERN.findall(name)


def to_wire_name(name: str, is_custom: bool = False) -> str:
    """Convert an internal name to its Salesforce form."""
    wire = "".join(word[:1].upper() + word[1:].lower() for word in split_words(name))
    if is_custom:
        wire += CUSTOM_SUFFIX
    return wire


def to_label(name: str) -> str:
    """Human readable label: capitalized words separated by spaces."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in split_words(name))


def to_internal_name(name: str) -> str:
    """Convert a Salesforce name to its internal snake case form."""
    if name.endswith(CUSTOM_SUFFIX):
        name = name[: -len(CUSTOM_SUFFIX)]
    return "_".join(word.lower() for word in split_words(name))


def field_full_name(object_api_name: str, field_api_name: str) -> str:
    """Fully qualified field name as the metadata API expects it."""
    return f"{object_api_name}.{field_api_name}"
