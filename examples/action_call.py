#!/usr/bin/env python
#
# Show how to actually perform TR-064 calls.
#

import logging

import tr064client

logging.basicConfig(level=logging.DEBUG)

# Get a tr064client.TR064 instance for the router. Nothing is sent until
# init() reads the service list and fetches the first nonce.
router = tr064client.TR064('192.168.178.1', 'admin', 'secret')
error = router.init()
if error is not None:
    raise SystemExit("Unable to talk to the router: %s" % error.value)

# Call an action and pick some fields out of the response.
ret = router.action(
    'urn:dslforum-org:service:WLANConfiguration:1', 'GetInfo',
    result=['NewSSID', 'NewChannel', 'NewStatus'])
print(ret.as_dict())
# Output: {'NewSSID': 'MyNetwork', 'NewChannel': '6', 'NewStatus': 'Up'}

# Parameters are passed as (name, value) pairs and keep their order.
ret = router.action(
    'urn:dslforum-org:service:Hosts:1', 'GetGenericHostEntry',
    [('NewIndex', '0')],
    result=['NewIPAddress', 'NewHostName', 'NewActive'])

# Errors are returned, not raised. If a field is missing, the others are
# still filled in.
if ret.error is tr064client.ErrorKind.MISSING_RESULT_FIELD:
    print("Partial result:", ret.as_dict())

# If you prefer exceptions:
try:
    router.action('urn:dslforum-org:service:Nope:1', 'GetInfo').raise_for_error()
except tr064client.UnknownServiceError as exc:
    print(exc)

# The observer hook sees every request, response and auth state change.
def trace(event, details):
    print(event, sorted(details))

router = tr064client.TR064('192.168.178.1', 'admin', 'secret', observer=trace)
router.init()
