# Copyright (c) 2012-2016, Ferry Boender <ferry.boender@gmail.com>
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
This module provides a client for the TR-064 protocol spoken by many home
routers (e.g. the Fritz!Box). TR-064 is SOAP over HTTP: every remote procedure
("action") belongs to a service, and every service has its own control URL.
Requests are authenticated with a nonce/digest handshake carried in the SOAP
header instead of HTTP authentication.

The usual flow for working with a TR-064 router is:

- Find the router.

  If you don't know its address, `discover()` sends an SSDP M-SEARCH for
  TR-064 devices and returns a TR064 instance for every router that answers.
  Otherwise instantiate TR064 directly.

- Read the service list.

  TR064.init() fetches /tr64desc.xml and fills a ServiceDirectory mapping each
  service type to its control URL.

- Authenticate.

  The first request only names the user (InitChallenge). The router answers
  with a nonce and a realm, from which the client derives its secret
  md5(user:realm:password). Every following request carries
  md5(secret:nonce), and every response hands out the nonce for the next one.
  init() does this handshake by calling a harmless bootstrap action.

- Call actions.

  TR064.action(service, action, params, result) returns an ActionResult with
  the raw response, the requested result fields and an ErrorKind (or None).
  Nothing is raised for protocol errors; use ActionResult.raise_for_error() if
  you prefer exceptions.

Example:

------------------------------------------------------------------------------
import tr064client

router = tr064client.TR064("192.168.178.1", "admin", "secret")
router.init()
ret = router.action(
    "urn:dslforum-org:service:WLANConfiguration:1", "GetInfo",
    result=["NewSSID", "NewChannel"])
if ret.ok:
    print(ret.as_dict())
------------------------------------------------------------------------------

Useful Links:

* https://avm.de/fileadmin/user_upload/Global/Service/Schnittstellen/AVM_TR-064_first_steps.pdf
* https://www.broadband-forum.org/technical/download/TR-064.pdf
"""
from tr064client import auth, const, errors, services, soap, ssdp, transport, util  # noqa: F401
from .auth import AuthState, AuthStatus, DigestAuthenticator
from .errors import (
    ErrorKind, TR064Error, UnknownServiceError, TransportError, MissingResultFieldError,
    MalformedResponseError)
from .services import ServiceDirectory
from .soap import ActionInvoker, AsyncActionInvoker, ActionResult, Parameter
from .transport import RequestsTransport, AsyncTransport, TransportResponse
from .tr064 import TR064
from .ssdp import discover

__all__ = [
    "TR064", "ServiceDirectory", "DigestAuthenticator", "AuthState", "AuthStatus",
    "ActionInvoker", "AsyncActionInvoker", "ActionResult", "Parameter",
    "RequestsTransport", "AsyncTransport", "TransportResponse",
    "ErrorKind", "TR064Error", "UnknownServiceError", "TransportError",
    "MissingResultFieldError", "MalformedResponseError", "discover",
]
