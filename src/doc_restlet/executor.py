"""Request executor for doc.restlet tags.

Creates pretty printed XML responses from the configured REST service.

Example with a configured REST URI http://example.org/rest/ and the tag
body ``service="ts" method="test" type="POST" query="par1=1&par2=2" body_uri="/ts/test2?par3=3"``:

1. GET http://example.org/rest//ts/test2?par3=3 retrieves the body content
   (the example content of that document).
2. POST http://example.org/rest/ts/test?par1=1&par2=2 with that body.
3. The example content of the response, or the whole response when it has
   none, is returned as a pretty printed XML string.

An executor is meant to be used once per tag, as a context manager:

    >>> with RestExecutor(settings) as executor:
    ...     xml = executor.retrieve_content(spec)
"""
from typing import Optional

import requests

from .config import Settings
from .errors import BadSpecError, BadTypeError, NoExampleError, UpstreamError
from .logging import logger
from .parameters import MethodType, RequestSpec
from .xml_content import CHARSET, get_example_content, parse_xml, to_string

CONTENT_TYPE_XML = f"text/xml; charset={CHARSET}"


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class RestExecutor:
    """Executes the REST calls described by a RequestSpec.

    Args:
        settings: Configuration carrying the REST base URI
        session: HTTP session to use (default: a new requests.Session,
            closed by close())

    Raises:
        FatalConfigError: If the REST base URI is missing or blank
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self._rest_uri = settings.require_rest_uri()
        self._session = session if session is not None else requests.Session()

    @property
    def rest_uri(self) -> str:
        return self._rest_uri

    def create_uri(self, service: Optional[str], method: Optional[str], query: Optional[str] = None) -> str:
        """Return ``rest_uri + service + "/" + method [+ "?" + query]``.

        Raises:
            BadSpecError: If service or method is blank
        """
        if _is_blank(service) or _is_blank(method):
            raise BadSpecError(
                f"Invalid service: {service} or method: {method}",
                details={"service": service, "method": method}
            )
        uri = f"{self._rest_uri}{service}/{method}"
        if not _is_blank(query):
            uri = f"{uri}?{query}"
        return uri

    def _execute(self, verb: str, url: str, **kwargs) -> requests.Response:
        """Run one request and check that the server answered 2xx.

        Raises:
            UpstreamError: On transport failures and non-2xx statuses
        """
        logger.debug("Calling url: %s %s", verb, url)
        try:
            response = self._session.request(verb, url, **kwargs)
        except requests.exceptions.RequestException as ex:
            raise UpstreamError(
                f"Request to {url} failed: {ex}",
                details={"url": url, "verb": verb}
            ) from ex

        status_code = response.status_code
        if status_code < 200 or status_code >= 300:
            raise UpstreamError(
                f"Server responded: {status_code} {response.reason}",
                details={"url": url, "verb": verb, "status_code": status_code, "reason": response.reason}
            )
        return response

    def retrieve_body(self, body_uri: str) -> str:
        """Fetch the example content at ``rest_uri + body_uri`` as an XML string.

        Raises:
            UpstreamError: If the server does not answer 2xx
            NoExampleError: If the document has no example content
            XmlError: If the document is not valid XML
        """
        url = f"{self._rest_uri}{body_uri}"
        logger.debug("Retrieving body from url: %s", url)
        response = self._execute("GET", url)
        node = get_example_content(parse_xml(response.content, url))
        if node is None:
            raise NoExampleError(f"No example returned by url: {url}", details={"url": url})
        return to_string(node)

    def retrieve_content(self, spec: RequestSpec) -> str:
        """Execute the request described by ``spec``.

        Returns:
            The example content of the response, or the whole response
            document, as a pretty printed XML string
        """
        if spec.verb is None:
            raise BadTypeError("Type is missing.")
        uri = self.create_uri(spec.service, spec.method, spec.query)

        kwargs = {}
        if spec.verb == MethodType.POST and not _is_blank(spec.body_uri):
            body = self.retrieve_body(spec.body_uri)
            kwargs["data"] = body.encode(CHARSET)
            kwargs["headers"] = {"Content-Type": CONTENT_TYPE_XML}

        response = self._execute(spec.verb.value, uri, **kwargs)
        doc = parse_xml(response.content, uri)
        node = get_example_content(doc)
        if node is None:
            logger.debug("No example content.")
            return to_string(doc)
        return to_string(node)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "RestExecutor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
