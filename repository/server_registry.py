# repository/server_registry.py
import logging
from typing import Optional, Tuple

from config.settings import settings
from core.entities import ServerEndpoint
from util.constants import DEFAULT_MEMCACHED_PORT

logger = logging.getLogger(__name__)


def parse_servers(
    servers: str, default_port: int = DEFAULT_MEMCACHED_PORT
) -> Tuple[ServerEndpoint, ...]:
    """
    "10.0.0.5:11211, 10.0.0.6" -> (ServerEndpoint(...), ...)
    Blank entries are ignored; a missing or unparsable port falls back to
    `default_port`. Duplicate endpoints are collapsed, first one wins.
    """
    out: list[ServerEndpoint] = []
    for item in (servers or "").split(","):
        item = item.strip()
        if not item:
            continue
        host, sep, port_txt = item.rpartition(":")
        if not sep:
            host, port_txt = item, ""
        try:
            port = int(port_txt) if port_txt else default_port
        except ValueError:
            logger.warning("servers.port.invalid entry=%s", item)
            port = default_port
        endpoint = ServerEndpoint(host=host.strip(), port=port)
        if endpoint.host and endpoint not in out:
            out.append(endpoint)
    return tuple(out)


class ServerRegistry:
    """
    Memcached servers the inspector may talk to.

    Each call returns a fresh immutable snapshot; nothing is cached between
    requests.
    """

    def __init__(
        self,
        servers: str = settings.MEMCACHED_SERVERS,
        default_port: int = settings.MEMCACHED_DEFAULT_PORT,
    ) -> None:
        self._servers = servers
        self._default_port = default_port

    def get_servers(self) -> Tuple[ServerEndpoint, ...]:
        return parse_servers(self._servers, self._default_port)

    def find(self, host: str) -> Optional[ServerEndpoint]:
        """Resolve "host" or "host:port" to a registered endpoint."""
        wanted = (host or "").strip()
        for endpoint in self.get_servers():
            if wanted in (endpoint.host, str(endpoint)):
                return endpoint
        return None
