import asyncio
import threading
from collections import namedtuple

from .const import (
    EVENT_REQUEST_BUILT,
    EVENT_RESPONSE_RECEIVED,
    NONCE_ACTION,
    NONCE_PARAMS,
    NONCE_SERVICE,
    REQUEST_BODY_START,
    REQUEST_END,
    REQUEST_START,
)
from .errors import ERROR_CLASSES, ErrorKind
from .util import _getLogger, take_param


class Parameter(namedtuple("Parameter", ["name", "value"])):
    """
    A named action argument or result field. A Parameter with an empty name
    means "no parameter" and is skipped everywhere.
    """

    __slots__ = ()

    def __new__(cls, name, value=""):
        return super(Parameter, cls).__new__(cls, name, value)


class ActionResult(namedtuple("ActionResult", ["raw_response", "filled_bindings", "error"])):
    """
    Result of an action call. `error` is None or an `ErrorKind`; check it (or
    call `raise_for_error()`) before trusting the other fields.
    """

    __slots__ = ()

    @property
    def ok(self):
        return self.error is None

    def as_dict(self):
        return dict((p.name, p.value) for p in self.filled_bindings if p.name)

    def raise_for_error(self):
        if self.error is not None:
            raise ERROR_CLASSES[self.error](
                "Action failed with %s" % self.error.value, self)


def to_parameters(params):
    """
    Normalise a mapping, a sequence of `(name, value)` pairs or a sequence of
    bare names into a list of Parameters.
    """
    if params is None:
        return []
    if hasattr(params, "items"):
        params = params.items()
    out = []
    for param in params:
        if isinstance(param, str):
            out.append(Parameter(param))
        else:
            out.append(Parameter(*param))
    return out


def build_envelope(service, action, params, header):
    """
    Compose the SOAP request for `action` on `service`. Parameters with an
    empty name are left out; the order of the others is kept.
    """
    args = "".join(
        "<%s>%s</%s>" % (p.name, p.value, p.name) for p in to_parameters(params) if p.name)
    return "".join((
        REQUEST_START,
        header,
        REQUEST_BODY_START.format(action=action, service=service),
        args,
        REQUEST_END.format(action=action),
    ))


def soap_action_header(service, action):
    return "%s#%s" % (service, action)


class ActionInvoker(object):
    """
    Calls actions on a router: resolves the control URL, wraps the arguments
    in an authenticated SOAP envelope, sends it and picks the requested
    result fields out of the response.
    """

    def __init__(self, directory, authenticator, transport, observer=None,
                 nonce_service=NONCE_SERVICE, nonce_action=NONCE_ACTION,
                 nonce_params=NONCE_PARAMS):
        self.directory = directory
        self.authenticator = authenticator
        self.transport = transport
        self.nonce_service = nonce_service
        self.nonce_action = nonce_action
        self.nonce_params = nonce_params
        self._observer = observer
        self._lock = threading.Lock()
        self._log = _getLogger("SOAP")

    def _notify(self, event, **details):
        if self._observer is not None:
            self._observer(event, details)

    @staticmethod
    def _empty_bindings(result):
        return [Parameter(p.name) for p in to_parameters(result)]

    def _prepare_request(self, service, action, params):
        """
        Returns (control url, envelope, soap action) or None if the service
        is unknown.
        """
        url, found = self.directory.resolve(service)
        if not found:
            self._log.error("Unknown service %r", service)
            return None
        envelope = build_envelope(service, action, params, self.authenticator.build_header())
        soap_action = soap_action_header(service, action)
        self._log.debug(">> %s (%s)", soap_action, params)
        self._notify(EVENT_REQUEST_BUILT, url=url, envelope=envelope, soap_action=soap_action)
        return url, envelope, soap_action

    def _transport_failed(self, service, action, response):
        self._log.error("%s#%s failed: %s", service, action, response.error)
        self.authenticator.mark_failed()

    def _read_response(self, service, action, body, result):
        """
        Update the auth state from `body` and fill in the `result` bindings.
        """
        self._log.debug("<< %s#%s: %s", service, action, body)
        self._notify(EVENT_RESPONSE_RECEIVED, service=service, action=action, body=body)
        if body:
            self.authenticator.observe(body)
        if result is None:
            return ActionResult(body, [], None)

        soap_body, found = take_param(body, "s:Body")
        if not found:
            self._log.warning("No <s:Body> in response to %s#%s", service, action)
            return ActionResult(body, self._empty_bindings(result), ErrorKind.MALFORMED_RESPONSE)

        error = None
        filled = []
        for binding in to_parameters(result):
            if not binding.name:
                filled.append(binding)
                continue
            value, found = take_param(soap_body, binding.name)
            if not found:
                self._log.warning("%s#%s: no %r in response", service, action, binding.name)
                error = ErrorKind.MISSING_RESULT_FIELD
            filled.append(Parameter(binding.name, value))
        return ActionResult(body, filled, error)

    def invoke(self, service, action, params=None, result=None):
        """
        Call `action` on `service` with `params` and return an ActionResult.
        `result` lists the response fields to extract.
        """
        with self._lock:
            return self._invoke(service, action, params, result)

    def _invoke(self, service, action, params, result, reacquire=True):
        request = self._prepare_request(service, action, params)
        if request is None:
            return ActionResult("", self._empty_bindings(result), ErrorKind.UNKNOWN_SERVICE)
        url, envelope, soap_action = request

        response = self.transport.send(url, envelope, soap_action)
        if not response.status_ok:
            self._transport_failed(service, action, response)
            if reacquire:
                self._acquire_nonce()
            return ActionResult("", self._empty_bindings(result), ErrorKind.TRANSPORT_FAILURE)
        return self._read_response(service, action, response.body, result)

    def _nonce_outcome(self, ret):
        if ret.error is not None:
            return ret.error
        state = self.authenticator.state
        if not state.has_nonce or state.auth_failed or state.realm is None:
            return ErrorKind.MALFORMED_RESPONSE
        self._log.debug("Got the nonce %r and the realm %r", state.nonce, state.realm)
        return None

    def _acquire_nonce(self):
        self._log.debug("Getting a fresh nonce and realm")
        return self._nonce_outcome(self._invoke(
            self.nonce_service, self.nonce_action, self.nonce_params, None, reacquire=False))

    def acquire_nonce(self):
        """
        Call the bootstrap action so that the router hands out a nonce and
        realm. Returns None or an ErrorKind.
        """
        with self._lock:
            return self._acquire_nonce()


class AsyncActionInvoker(ActionInvoker):
    def __init__(self, directory, authenticator, transport, observer=None,
                 nonce_service=NONCE_SERVICE, nonce_action=NONCE_ACTION,
                 nonce_params=NONCE_PARAMS):
        super().__init__(
            directory,
            authenticator,
            transport,
            observer=observer,
            nonce_service=nonce_service,
            nonce_action=nonce_action,
            nonce_params=nonce_params,
        )
        # Created on first use, bound to the running loop
        self._lock = None
        self._lock_loop = None

    def _get_lock(self):
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def invoke(self, service, action, params=None, result=None):
        async with self._get_lock():
            return await self._invoke(service, action, params, result)

    async def _invoke(self, service, action, params, result, reacquire=True):
        request = self._prepare_request(service, action, params)
        if request is None:
            return ActionResult("", self._empty_bindings(result), ErrorKind.UNKNOWN_SERVICE)
        url, envelope, soap_action = request

        response = await self.transport.send(url, envelope, soap_action)
        if not response.status_ok:
            self._transport_failed(service, action, response)
            if reacquire:
                await self._acquire_nonce()
            return ActionResult("", self._empty_bindings(result), ErrorKind.TRANSPORT_FAILURE)
        return self._read_response(service, action, response.body, result)

    async def _acquire_nonce(self):
        self._log.debug("Getting a fresh nonce and realm")
        return self._nonce_outcome(await self._invoke(
            self.nonce_service, self.nonce_action, self.nonce_params, None, reacquire=False))

    async def acquire_nonce(self):
        async with self._get_lock():
            return await self._acquire_nonce()
