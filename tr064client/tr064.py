from .auth import DigestAuthenticator
from .const import (
    DEFAULT_PORT,
    DEFAULT_SCHEME,
    DETECT_PAGE,
    HTTP_TIMEOUT,
    NONCE_ACTION,
    NONCE_PARAMS,
    NONCE_SERVICE,
)
from .errors import ErrorKind
from .services import ServiceDirectory
from .soap import ActionInvoker, AsyncActionInvoker
from .transport import AsyncTransport, RequestsTransport
from .util import _getLogger


class TR064(object):
    """
    TR-064 client for a single router.

    `host` and `port` locate the router's TR-064 endpoint (usually port
    49000), `user` and `password` are the credentials of a router account
    allowed to use TR-064. Nothing is sent until `init()` (or `async_init()`
    when created with `use_async=True`) is called, which reads the list of
    services and obtains the first nonce.

    Example:

    >>> router = TR064('192.168.178.1', 'admin', 'secret')
    >>> router.init()
    >>> ret = router.action(
    ...     'urn:dslforum-org:service:WLANConfiguration:1', 'GetInfo',
    ...     result=['NewSSID'])
    >>> ret.as_dict()
    {'NewSSID': 'MyNetwork'}
    """

    def __init__(
        self,
        host,
        user,
        password,
        port=DEFAULT_PORT,
        scheme=DEFAULT_SCHEME,
        timeout=HTTP_TIMEOUT,
        use_async=False,
        session=None,
        http_headers=None,
        transport=None,
        observer=None,
        nonce_service=NONCE_SERVICE,
        nonce_action=NONCE_ACTION,
        nonce_params=NONCE_PARAMS,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.use_async = use_async
        self._log = _getLogger("TR064")

        if transport is None:
            transport_class = AsyncTransport if use_async else RequestsTransport
            transport = transport_class(
                host,
                port=port,
                scheme=scheme,
                timeout=timeout,
                http_headers=http_headers,
                session=session,
            )
        self.transport = transport
        self.directory = ServiceDirectory()
        self.authenticator = DigestAuthenticator(user, password, observer=observer)

        invoker_class = AsyncActionInvoker if use_async else ActionInvoker
        self.invoker = invoker_class(
            self.directory,
            self.authenticator,
            self.transport,
            observer=observer,
            nonce_service=nonce_service,
            nonce_action=nonce_action,
            nonce_params=nonce_params,
        )

    def __repr__(self):
        return "<TR064 '%s:%s'>" % (self.host, self.port)

    def __contains__(self, service_type):
        return service_type in self.directory

    @property
    def services(self):
        return self.directory.service_types

    @property
    def auth_status(self):
        return self.authenticator.status

    def _read_services(self, response):
        if not response.status_ok:
            self._log.error("Unable to read %s: %s", DETECT_PAGE, response.error)
            return ErrorKind.TRANSPORT_FAILURE
        count = self.directory.discover(response.body)
        self._log.debug("%s: %d services", self, count)
        if not count:
            return ErrorKind.MALFORMED_RESPONSE
        return None

    def init(self):
        """
        Read the service list and fetch the initial nonce and realm. Returns
        None on success or the ErrorKind of the step that failed.
        """
        error = self._read_services(self.transport.send(DETECT_PAGE))
        if error is not None:
            return error
        return self.invoker.acquire_nonce()

    async def async_init(self):
        """
        Asynchronously read the service list and fetch the initial nonce.
        """
        error = self._read_services(await self.transport.send(DETECT_PAGE))
        if error is not None:
            return error
        return await self.invoker.acquire_nonce()

    def action(self, service, action, params=None, result=None):
        """
        Call `action` on `service`. `params` is a mapping or a sequence of
        `(name, value)` pairs, `result` the names (or Parameters) of the
        response fields to extract. Returns an ActionResult, or a coroutine
        resolving to one when the client is async.
        """
        return self.invoker.invoke(service, action, params, result)

    def close(self):
        """
        Close the transport's HTTP session (a coroutine when async).
        """
        return self.transport.close()
