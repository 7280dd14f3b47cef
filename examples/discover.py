#!/usr/bin/env python
#
# Demonstrate a simple TR-064 router discovery.
#

import sys

import tr064client

# Credentials of a router account that is allowed to use TR-064
user, password = sys.argv[1], sys.argv[2]

routers = tr064client.discover(user, password, timeout=5)

for router in routers:
    error = router.init()
    if error is not None:
        print(router, "failed:", error.value)
        continue
    print(router, router.auth_status.value)
    for service_type in router.services:
        print("   ", service_type)
