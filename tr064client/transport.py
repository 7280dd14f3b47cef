import asyncio
from collections import namedtuple

import aiohttp
import requests
from requests.compat import urljoin

from .const import DEFAULT_PORT, DEFAULT_SCHEME, HTTP_TIMEOUT
from .util import _getLogger

TransportResponse = namedtuple("TransportResponse", ["body", "status_ok", "error"])


def base_url(host, port=DEFAULT_PORT, scheme=DEFAULT_SCHEME):
    return "%s://%s:%s" % (scheme, host, port)


class Transport(object):
    """
    Performs the HTTP requests for a client. `url` is relative to the router's
    base URL. An empty `body` is a plain GET, anything else is POSTed as
    `text/xml` with a SOAPACTION header when `soap_action` is given.

    Never raises for network or HTTP errors: those come back as
    `TransportResponse("", False, reason)`.
    """

    def __init__(self, host, port=DEFAULT_PORT, scheme=DEFAULT_SCHEME,
                 timeout=HTTP_TIMEOUT, http_headers=None):
        self.base_url = base_url(host, port, scheme)
        self.timeout = timeout
        self.http_headers = http_headers
        self._log = _getLogger("Transport")

    def __repr__(self):
        return "<%s '%s'>" % (self.__class__.__name__, self.base_url)

    def _prepare(self, url, body, soap_action):
        """
        Returns (method, full url, headers) for a request.
        """
        full_url = urljoin(self.base_url, url)
        headers = dict(self.http_headers or {})
        if not body:
            return "GET", full_url, headers
        headers["Content-Type"] = "text/xml"
        if soap_action:
            headers["SOAPACTION"] = soap_action
        return "POST", full_url, headers

    def _failed(self, method, url, reason):
        self._log.error("[HTTP] %s %s failed: %s", method, url, reason)
        return TransportResponse("", False, reason)


class RequestsTransport(Transport):
    def __init__(self, host, port=DEFAULT_PORT, scheme=DEFAULT_SCHEME,
                 timeout=HTTP_TIMEOUT, http_headers=None, session=None):
        super(RequestsTransport, self).__init__(
            host, port=port, scheme=scheme, timeout=timeout, http_headers=http_headers)
        self.session = session or requests.Session()

    def send(self, url, body=None, soap_action=None):
        method, full_url, headers = self._prepare(url, body, soap_action)
        self._log.debug("[HTTP] %s %s SOAPACTION: %s", method, full_url, soap_action)
        try:
            resp = self.session.request(
                method, full_url, data=body or None, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            return self._failed(method, full_url, str(exc))
        if not 200 <= resp.status_code < 300:
            return self._failed(method, full_url, "HTTP %d" % resp.status_code)
        self._log.debug("[HTTP] %s %s code: %d", method, full_url, resp.status_code)
        return TransportResponse(resp.text, True, None)

    def close(self):
        self.session.close()


class AsyncTransport(Transport):
    def __init__(self, host, port=DEFAULT_PORT, scheme=DEFAULT_SCHEME,
                 timeout=HTTP_TIMEOUT, http_headers=None, session=None):
        super(AsyncTransport, self).__init__(
            host, port=port, scheme=scheme, timeout=timeout, http_headers=http_headers)
        # Created on first use so that it belongs to the running loop
        self.session = session

    async def send(self, url, body=None, soap_action=None):
        method, full_url, headers = self._prepare(url, body, soap_action)
        self._log.debug("[HTTP] %s %s SOAPACTION: %s", method, full_url, soap_action)
        if self.session is None:
            self.session = aiohttp.ClientSession()
        try:
            async with self.session.request(
                method,
                full_url,
                data=body or None,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as resp:
                if not 200 <= resp.status < 300:
                    return self._failed(method, full_url, "HTTP %d" % resp.status)
                text = await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            return self._failed(method, full_url, str(exc) or exc.__class__.__name__)
        self._log.debug("[HTTP] %s %s code: %d", method, full_url, resp.status)
        return TransportResponse(text, True, None)

    async def close(self):
        if self.session is not None:
            await self.session.close()
