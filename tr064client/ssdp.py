from .tr064 import TR064
from .const import DEFAULT_PORT, DEFAULT_SCHEME
from .util import _getLogger
import socket
import re
from datetime import datetime, timedelta
import select
from urllib.parse import urlparse
import ifaddr

DISCOVER_TIMEOUT = 2
SSDP_TARGET = ("239.255.255.250", 1900)
SSDP_MX = DISCOVER_TIMEOUT
ST_TR064 = "urn:dslforum-org:device:InternetGatewayDevice:1"
SCHEME_PORTS = {"http": 80, "https": 443}


class Entry(object):
    def __init__(self, location):
        self.location = location

    def __repr__(self):
        return "<Entry '%s'>" % self.location

    def __eq__(self, other):
        return isinstance(other, Entry) and self.location == other.location

    def __hash__(self):
        return hash(self.location)


def ssdp_request(ssdp_st, ssdp_mx=SSDP_MX):
    """Return request bytes for given st and mx."""
    return "\r\n".join(
        [
            "M-SEARCH * HTTP/1.1",
            "ST: {}".format(ssdp_st),
            "MX: {:d}".format(ssdp_mx),
            'MAN: "ssdp:discover"',
            "HOST: {}:{}".format(*SSDP_TARGET),
            "",
            "",
        ]
    ).encode("utf-8")


def scan(timeout=5):
    """
    M-SEARCH for TR-064 devices on every IPv4 interface and return the set of
    `Entry` objects for the LOCATION headers received before `timeout`.
    """
    urls = []
    sockets = []
    request = ssdp_request(ST_TR064)
    stop_wait = datetime.now() + timedelta(seconds=timeout)

    for addr in get_addresses_ipv4():
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, SSDP_MX)
            sock.bind((addr, 0))
            sockets.append(sock)
        except socket.error:
            _getLogger("ssdp").debug("Unable to bind to %s", addr)

    for sock in [s for s in sockets]:
        try:
            sock.sendto(request, SSDP_TARGET)
            sock.setblocking(False)
        except socket.error:
            sockets.remove(sock)
            sock.close()
    try:
        while sockets:
            time_diff = stop_wait - datetime.now()
            seconds_left = time_diff.total_seconds()
            if seconds_left <= 0:
                break

            ready = select.select(sockets, [], [], seconds_left)[0]

            for sock in ready:
                try:
                    data, address = sock.recvfrom(1024)
                    response = data.decode("utf-8")
                except UnicodeDecodeError:
                    _getLogger("ssdp").debug(
                        "Ignoring invalid unicode response from %s", address
                    )
                    continue
                except socket.error:
                    _getLogger("ssdp").exception(
                        "Socket error while discovering SSDP devices"
                    )
                    sockets.remove(sock)
                    sock.close()
                    continue
                locations = re.findall(
                    r"LOCATION: *(?P<url>\S+)\s+", response, re.IGNORECASE
                )
                if locations:
                    urls.append(Entry(locations[0]))

    finally:
        for s in sockets:
            s.close()

    return set(urls)


def get_addresses_ipv4():
    # Get all adapters on current machine
    adapters = ifaddr.get_adapters()
    # Get the ip from the found adapters
    # Ignore localhost und IPv6 addresses
    return list(
        set(
            addr.ip
            for iface in adapters
            for addr in iface.ips
            if addr.is_IPv4 and addr.ip != "127.0.0.1"
        )
    )


def discover(user, password, timeout=5, **kwargs):
    """
    Convenience method to discover TR-064 routers on the network. Returns a
    list of `TR064` instances, one per router, which still need `init()`.
    Locations that can't be parsed are logged and ignored.
    """
    routers = {}
    for entry in scan(timeout):
        try:
            url = urlparse(entry.location)
            scheme = url.scheme or DEFAULT_SCHEME
            # No port in LOCATION means the scheme's own default
            host, port = url.hostname, url.port or SCHEME_PORTS.get(scheme, DEFAULT_PORT)
        except ValueError as exc:
            _getLogger("ssdp").error("Error '%s' for %s", exc, entry)
            continue
        if not host or (host, port) in routers:
            continue
        routers[(host, port)] = TR064(host, user, password, port=port, scheme=scheme, **kwargs)
    return list(routers.values())
