import asyncio
import threading
import time
from functools import wraps

from tr064client.transport import TransportResponse

from tests.const import TEST_REALM, TEST_ROTATING_NONCE_RESPONSE


class MockTransport(object):
    """
    In-memory transport. Replies are taken from `responses` in order (the
    last one is repeated); each is a body string or a TransportResponse.
    Every request is recorded in `requests` as (url, body, soap_action).
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def _next(self):
        if len(self.responses) > 1:
            resp = self.responses.pop(0)
        elif self.responses:
            resp = self.responses[0]
        else:
            resp = ""
        if isinstance(resp, TransportResponse):
            return resp
        return TransportResponse(resp, True, None)

    def send(self, url, body=None, soap_action=None):
        self.requests.append((url, body, soap_action))
        return self._next()

    def close(self):
        pass

    @property
    def last_envelope(self):
        return self.requests[-1][1]


class AsyncMockTransport(MockTransport):
    async def send(self, url, body=None, soap_action=None):
        self.requests.append((url, body, soap_action))
        return self._next()

    async def close(self):
        pass


FAILED = TransportResponse("", False, "HTTP 500")


class SlowMockTransport(object):
    """
    Answers every request after `delay` seconds with the next nonce (N1, N2,
    ...) and keeps track of how many requests were in flight at once.
    """

    def __init__(self, delay=0.01):
        self.delay = delay
        self.requests = []
        self.inflight = 0
        self.max_inflight = 0
        self._count_lock = threading.Lock()

    def _enter(self, body):
        with self._count_lock:
            self.inflight += 1
            self.max_inflight = max(self.max_inflight, self.inflight)
            self.requests.append(body)
            return len(self.requests)

    def _leave(self, count):
        with self._count_lock:
            self.inflight -= 1
        return TransportResponse(TEST_ROTATING_NONCE_RESPONSE % (count, TEST_REALM), True, None)

    def send(self, url, body=None, soap_action=None):
        count = self._enter(body)
        time.sleep(self.delay)
        return self._leave(count)


class AsyncSlowMockTransport(SlowMockTransport):
    async def send(self, url, body=None, soap_action=None):
        count = self._enter(body)
        await asyncio.sleep(self.delay)
        return self._leave(count)


def async_test(f):
    """
    Decorator to create asyncio context for asyncio methods or functions.
    """
    @wraps(f)
    def g(*args, **kwargs):
        loop = asyncio.new_event_loop()
        try:
            loop.run_until_complete(f(*args, **kwargs))
        finally:
            loop.close()
    return g


class SimpleMock(dict):
    """Case insensitive dict to mock HTTP response."""
    def __init__(self, *args, **kwargs):
        super(SimpleMock, self).__init__(*args, **kwargs)
        for k in list(self.keys()):
            v = super(SimpleMock, self).pop(k)
            self.__setitem__(k, v)

    def __setitem__(self, key, value):
        super(SimpleMock, self).__setitem__(str(key).lower(), value)

    def __getitem__(self, key):
        if key.lower() not in self:
            return None
        return super(SimpleMock, self).__getitem__(key.lower())

    def __setattr__(self, key, value):
        self.__setitem__(key, value)

    def __getattr__(self, key):
        return self.__getitem__(key)


class SimpleMockRequest(SimpleMock):
    """Case insensitive dict interface for an aiohttp Request object."""
    def update(self, request, body=None):
        self.clear()
        self.headers = SimpleMock(request.headers)
        self.url = str(request.url)  # match requests interface
        self.method = request.method
        self.path = request.path
        self.body = body
