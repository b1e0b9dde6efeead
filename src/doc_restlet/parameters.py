"""Parser for doc.restlet tag parameters.

A tag body is a set of ``name="value"`` attributes, e.g.::

    service="ts" method="test" type="POST" query="par1=1&par2=2" body_uri="/ts/test2?par3=3"

Recognized attributes:
- body_uri: where to GET the HTTP body for the request, relative to the
  configured REST URI. Only POST requests use it.
- method: the REST method name
- query: query string without the ``?`` prefix
- service: the REST service name
- type: HTTP method type, GET, POST or DELETE (case-insensitive)

Values may reference constants as ``[package.Type#CONSTANT]``; those are
resolved before any URI is built.
"""
import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .constants import ConstantRegistry, default_registry
from .errors import BadTypeError, BadValueError
from .logging import logger

ATTRIBUTE_BODY_URI = "body_uri"
ATTRIBUTE_METHOD = "method"
ATTRIBUTE_QUERY = "query"
ATTRIBUTE_SERVICE = "service"
ATTRIBUTE_TYPE = "type"
_ATTRIBUTES = (ATTRIBUTE_BODY_URI, ATTRIBUTE_METHOD, ATTRIBUTE_QUERY, ATTRIBUTE_SERVICE, ATTRIBUTE_TYPE)

# Values cannot contain whitespace
_ATTRIBUTE_PATTERN = re.compile(r'\w+="\S*"')


class MethodType(str, Enum):
    """The type of the HTTP method call."""
    DELETE = "DELETE"
    GET = "GET"
    POST = "POST"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "MethodType":
        if value is not None:
            for t in cls:
                if t.value.lower() == value.lower():
                    return t
        raise BadTypeError(f"Unknown type: {value}", details={"type": value})


class RequestSpec(BaseModel):
    """Parsed attributes describing one REST call."""
    service: Optional[str] = None
    method: Optional[str] = None
    verb: Optional[MethodType] = None
    query: Optional[str] = None
    body_uri: Optional[str] = None


def resolve_value(value: str, registry: ConstantRegistry = default_registry) -> Optional[str]:
    """Strip quotation marks from ``value`` and expand ``[path]`` references.

    Returns:
        The expanded value, or None if the value is blank

    Raises:
        BadValueError: On a ``]`` without ``[`` or an unterminated ``[``
        BadReferenceError: If a referenced constant cannot be resolved
    """
    stripped = value.replace('"', "")
    if not stripped.strip():
        logger.debug("Blank value.")
        return None

    out = []
    ref = []
    in_brackets = False
    for c in stripped:
        if c == "[":
            in_brackets = True
        elif c == "]":
            if not in_brackets:
                raise BadValueError(f"Invalid value: {value}", details={"value": value})
            in_brackets = False
            out.append(registry.resolve("".join(ref)))
            ref = []
        elif in_brackets:
            ref.append(c)
        else:
            out.append(c)
    if in_brackets:
        raise BadValueError(f"Invalid value: {value}", details={"value": value})
    return "".join(out)


def parse(params: str, registry: ConstantRegistry = default_registry) -> Optional[RequestSpec]:
    """Parse a tag body into a RequestSpec.

    Attributes may come in any order; when one is repeated, the last one
    wins. Unknown attribute names are ignored.

    Args:
        params: Tag body, e.g. ``service="ts" method="test" type="GET"``
        registry: Where bracketed constant references are looked up

    Returns:
        The parsed RequestSpec, or None if no attribute was found
    """
    spec = None
    for match in _ATTRIBUTE_PATTERN.finditer(params):
        name, value = match.group(0).split("=", 1)
        if spec is None:
            spec = RequestSpec()
        if name not in _ATTRIBUTES:
            logger.debug("Ignored unknown attribute %s.", name)
            continue
        value = resolve_value(value, registry)
        if name == ATTRIBUTE_BODY_URI:
            spec.body_uri = value
        elif name == ATTRIBUTE_METHOD:
            spec.method = value
        elif name == ATTRIBUTE_QUERY:
            spec.query = value
        elif name == ATTRIBUTE_SERVICE:
            spec.service = value
        else:
            spec.verb = MethodType.from_string(value)
    return spec
