"""
TR-064 SOAP digest authentication.

A router protects its actions with a challenge/response scheme carried in the
SOAP header. The first request only names the user (`InitChallenge`); the
router answers with a `Nonce` and a `Realm`. From then on every request carries
a `ClientAuth` header with an `Auth` token of md5(secret:nonce), where the
secret is md5(user:realm:password). Every response hands out the nonce to use
for the next request.
"""
import hashlib
from enum import Enum

from .const import CHALLENGE_HEADER, CLIENT_AUTH_HEADER, EVENT_AUTH_STATE_CHANGED
from .errors import ErrorKind
from .util import _getLogger, take_param


def md5_hex(text):
    """
    MD5 digest of `text` (UTF-8 encoded) as 32 lowercase hex characters.
    """
    return hashlib.md5(text.encode("utf-8")).hexdigest()


class AuthStatus(Enum):
    UNAUTHENTICATED = "unauthenticated"
    CHALLENGED = "challenged"
    AUTHENTICATED = "authenticated"


class AuthState(object):
    """
    Mutable authentication state of one client. `nonce` is only ever replaced
    by a newer value observed from the router.
    """

    def __init__(self, realm=None, secret_hash=None, nonce="", has_nonce=None, auth_failed=False):
        self.realm = realm
        self.secret_hash = secret_hash
        self.nonce = nonce
        self.has_nonce = bool(nonce) if has_nonce is None else has_nonce
        self.auth_failed = auth_failed

    def __repr__(self):
        return "<AuthState realm=%r has_nonce=%r auth_failed=%r>" % (
            self.realm, self.has_nonce, self.auth_failed)


class DigestAuthenticator(object):
    """
    Builds the SOAP authentication header for each request and keeps the
    nonce/realm state up to date from the responses.
    """

    def __init__(self, user, password, state=None, observer=None):
        self.user = user
        self._password = password
        self.state = AuthState() if state is None else state
        self._observer = observer
        self._sent_client_auth = False
        self._authenticated = False
        self._log = _getLogger("Auth")
        if self.state.realm and self.state.secret_hash is None:
            self._derive_secret()

    def __repr__(self):
        return "<DigestAuthenticator user=%r status=%s>" % (self.user, self.status.value)

    @property
    def status(self):
        if not self._can_authenticate():
            return AuthStatus.UNAUTHENTICATED
        if self._authenticated:
            return AuthStatus.AUTHENTICATED
        return AuthStatus.CHALLENGED

    def _can_authenticate(self):
        state = self.state
        return state.has_nonce and not state.auth_failed and state.secret_hash is not None

    def _derive_secret(self):
        self.state.secret_hash = md5_hex(
            "%s:%s:%s" % (self.user, self.state.realm, self._password))
        self._log.debug("Derived secret for realm %r", self.state.realm)

    def _notify(self, previous):
        status = self.status
        if status is previous:
            return
        self._log.debug("Auth state %s -> %s", previous.value, status.value)
        if self._observer is not None:
            self._observer(EVENT_AUTH_STATE_CHANGED, dict(
                previous=previous, status=status, realm=self.state.realm))

    def compute_token(self):
        """
        Return the digest token md5(secret_hash:nonce), or None if either part
        isn't known yet.
        """
        if self.state.secret_hash is None or not self.state.has_nonce:
            return None
        return md5_hex("%s:%s" % (self.state.secret_hash, self.state.nonce))

    def build_header(self):
        """
        Return the `<s:Header>` for the next request: an `InitChallenge` when
        we have no usable nonce (or the last call failed), a `ClientAuth`
        otherwise.
        """
        if not self._can_authenticate():
            self._sent_client_auth = False
            return CHALLENGE_HEADER.format(user=self.user)
        self._sent_client_auth = True
        return CLIENT_AUTH_HEADER.format(
            nonce=self.state.nonce,
            auth=self.compute_token(),
            user=self.user,
            realm=self.state.realm,
        )

    def observe(self, response):
        """
        Pick the next nonce (and the realm, if it isn't known yet or has
        changed) out of a response. Returns None on success or
        `ErrorKind.MALFORMED_RESPONSE` if a required value was missing, in
        which case the previously known state is kept.
        """
        previous = self.status
        error = None

        realm, realm_found = take_param(response, "Realm")
        if realm_found and realm != self.state.realm:
            self._log.debug("Realm changed from %r to %r", self.state.realm, realm)
            self.state.realm = realm
            self._derive_secret()
        elif not realm_found and self.state.realm is None:
            self._log.warning("No realm in response and none known yet")
            error = ErrorKind.MALFORMED_RESPONSE

        nonce, nonce_found = take_param(response, "Nonce")
        if nonce_found:
            self.state.nonce = nonce
            self.state.has_nonce = True
            self.state.auth_failed = False
            self._authenticated = self._sent_client_auth and self.state.secret_hash is not None
        else:
            self._log.warning("No nonce in response, keeping the previous one")
            error = ErrorKind.MALFORMED_RESPONSE

        self._notify(previous)
        return error

    def mark_failed(self):
        """
        Force the next header to be a challenge. The nonce itself is kept
        until the router hands out a new one.
        """
        previous = self.status
        self.state.auth_failed = True
        self._authenticated = False
        self._sent_client_auth = False
        self._notify(previous)
