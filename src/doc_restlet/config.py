import os
from typing import Mapping, Optional

from pydantic import BaseModel

from .errors import FatalConfigError

# Property name used to define the REST base URI
PROPERTY_REST_URI = "tut.pori.javadocer.rest_uri"
# Same setting, spelled so that a shell can export it
ENV_REST_URI = "DOC_RESTLET_REST_URI"


class Settings(BaseModel):
    # Prefix that service + "/" + method is appended to, e.g. http://example.org/rest/
    rest_uri: Optional[str] = None

    @classmethod
    def from_properties(cls, properties: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from a key/value source (default: the environment).

        The dotted property name wins over the environment alias.
        """
        if properties is None:
            properties = os.environ
        rest_uri = properties.get(PROPERTY_REST_URI)
        if rest_uri is None:
            rest_uri = properties.get(ENV_REST_URI)
        return cls(rest_uri=rest_uri)

    def require_rest_uri(self) -> str:
        """Return the REST base URI, raising FatalConfigError when it is blank."""
        if self.rest_uri is None or not self.rest_uri.strip():
            raise FatalConfigError(
                f"Bad {PROPERTY_REST_URI}",
                details={"property": PROPERTY_REST_URI, "value": self.rest_uri}
            )
        return self.rest_uri


def load_settings(overrides: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from the environment with ``overrides`` layered on top."""
    properties = dict(os.environ)
    if overrides:
        properties.update(overrides)
    return Settings.from_properties(properties)

