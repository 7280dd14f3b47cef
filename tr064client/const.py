HTTP_TIMEOUT = 10

DEFAULT_PORT = 49000
DEFAULT_SCHEME = "http"

# Relative location of the TR-064 device description
DETECT_PAGE = "/tr64desc.xml"

# Action used to obtain a nonce and realm before the first authenticated call
NONCE_SERVICE = "urn:dslforum-org:service:WLANConfiguration:1"
NONCE_ACTION = "GetGenericAssociatedDeviceInfo"
NONCE_PARAMS = (("NewAssociatedDeviceIndex", "1"),)

AUTH_NAMESPACE = "http://soap-authentication.org/digest/2001/10/"

REQUEST_START = (
    '<?xml version="1.0"?>'
    '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" '
    's:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">'
)
REQUEST_BODY_START = "<s:Body><u:{action} xmlns:u='{service}'>"
REQUEST_END = "</u:{action}></s:Body></s:Envelope>"

CHALLENGE_HEADER = (
    '<s:Header><h:InitChallenge xmlns:h="%s" s:mustUnderstand="1">'
    "<UserID>{user}</UserID>"
    "</h:InitChallenge></s:Header>" % AUTH_NAMESPACE
)
CLIENT_AUTH_HEADER = (
    '<s:Header><h:ClientAuth xmlns:h="%s" s:mustUnderstand="1">'
    "<Nonce>{nonce}</Nonce><Auth>{auth}</Auth>"
    "<UserID>{user}</UserID><Realm>{realm}</Realm>"
    "</h:ClientAuth></s:Header>" % AUTH_NAMESPACE
)

# Observer trace points
EVENT_REQUEST_BUILT = "request_built"
EVENT_RESPONSE_RECEIVED = "response_received"
EVENT_AUTH_STATE_CHANGED = "auth_state_changed"
