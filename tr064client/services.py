import threading

from .util import _getLogger, take_param

SERVICE_START = "<service>"
SERVICE_END = "</service>"


class ServiceDirectory(object):
    """
    Maps each service type a router offers to its control URL. Populated from
    the TR-064 device description (`tr64desc.xml`).

    The description is scanned block by block between `<service>` markers
    rather than parsed as a whole, which is all the well-known shape of these
    documents needs.
    """

    def __init__(self):
        self._services = {}
        self._lock = threading.Lock()
        self._log = _getLogger("ServiceDirectory")

    def __repr__(self):
        return "<ServiceDirectory services=%d>" % len(self._services)

    def __len__(self):
        return len(self._services)

    def __contains__(self, service_type):
        return service_type in self._services

    def __iter__(self):
        return iter(self._services.items())

    @property
    def service_types(self):
        return list(self._services.keys())

    def discover(self, document):
        """
        Replace the directory with the services listed in `document`. A
        service type listed more than once keeps the last control URL seen.
        Returns the number of services registered.
        """
        services = {}
        pos = 0
        while True:
            start = document.find(SERVICE_START, pos)
            if start == -1:
                break
            stop = document.find(SERVICE_END, start)
            if stop == -1:
                self._log.warning("Unterminated <service> block at offset %d", start)
                break
            block = document[start + len(SERVICE_START):stop]
            pos = stop + len(SERVICE_END)

            service_type, type_found = take_param(block, "serviceType")
            control_url, url_found = take_param(block, "controlURL")
            if not (type_found and url_found):
                self._log.warning("Skipping <service> block without serviceType/controlURL")
                continue
            service_type = service_type.strip()
            control_url = control_url.strip()
            services[service_type] = control_url
            self._log.debug("Service no %d: %r @ %r", len(services), service_type, control_url)

        with self._lock:
            self._services = services
        return len(services)

    def resolve(self, service_type):
        """
        Return `(control_url, found)` for `service_type`.
        """
        try:
            return self._services[service_type], True
        except KeyError:
            return "", False
