import enum
import logging
import xml.parsers.expat
import xmlrpc.client
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

import requests

from .version import Version

__doc__ = """
XML-RPC proxy for the Odoo services.

Each proxy targets one service (common, object or db) and is meant to be
created for a single call.
"""

DEFAULT_PORT = 8069


class OdooError(RuntimeError):
    """Base error for the Odoo client"""

    pass


class RpcError(OdooError):
    """Error during an XML-RPC call (transport, protocol or server fault)"""

    @property
    def fault(self) -> Optional[xmlrpc.client.Fault]:
        """Get the fault returned by the server, if any"""
        cause = self.__cause__
        return cause if isinstance(cause, xmlrpc.client.Fault) else None

    @property
    def fault_code(self) -> Any:
        fault = self.fault
        return fault.faultCode if fault else None

    @property
    def fault_string(self) -> Optional[str]:
        """Get the message (usually a remote trace) sent by the server"""
        fault = self.fault
        return fault.faultString if fault else None


class RPCProtocol(enum.Enum):
    """Protocol used to reach the server"""

    HTTP = 'http'
    HTTPS = 'https'


class RPCService(enum.Enum):
    """Services exposed by Odoo over XML-RPC"""

    COMMON = '/xmlrpc/common'
    OBJECT = '/xmlrpc/object'
    DATABASE = '/xmlrpc/db'


@dataclass
class ProxyConfig:
    """Coordinates of a service; the protocol defaults to HTTP"""

    host: str
    port: int = DEFAULT_PORT
    service: RPCService = RPCService.COMMON
    protocol: RPCProtocol = RPCProtocol.HTTP
    timeout: Optional[float] = None

    @property
    def url(self) -> str:
        return f"{self.protocol.value}://{self.host}:{self.port}{self.service.value}"


class RequestsTransport(xmlrpc.client.Transport):
    """Transport posting the marshalled requests using requests"""

    def __init__(
        self,
        scheme: str = 'http',
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__()
        self.scheme = scheme
        self.session = session or requests.Session()
        self.timeout = timeout

    def request(self, host, handler, request_body, verbose=False):
        url = f"{self.scheme}://{host}{handler}"
        resp = self.session.post(
            url,
            data=request_body,
            headers={'Content-Type': 'text/xml', 'User-Agent': self.user_agent},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        parser, unmarshaller = self.getparser()
        parser.feed(resp.content)
        parser.close()
        return unmarshaller.close()


class OdooXmlRpcProxy:
    """Proxy to handle calls to and from one Odoo service"""

    config: ProxyConfig

    def __init__(self, config: ProxyConfig, session: Optional[requests.Session] = None):
        """Create the proxy; no connection is made until `execute`

        :param config: The service coordinates
        :param session: Optional requests session used by the transport
        """
        self.config = config
        transport = RequestsTransport(config.protocol.value, session, config.timeout)
        # Odoo does not support the XML-RPC extensions
        self._server = xmlrpc.client.ServerProxy(config.url, transport=transport)

    @property
    def url(self) -> str:
        return self.config.url

    def execute(self, method_name: str, args: Sequence = ()) -> Any:
        """Call a method on the service and return the decoded response"""
        logging.getLogger(__name__).debug("Call %s on %s", method_name, self.url)
        method = getattr(self._server, method_name)
        try:
            return method(*args)
        except xmlrpc.client.Fault as e:
            raise RpcError(f"Server fault on {method_name}: {e.faultString}") from e
        except (xmlrpc.client.Error, requests.RequestException, OSError) as e:
            raise RpcError(f"Call {method_name} failed on {self.url}: {e}") from e
        except (xml.parsers.expat.ExpatError, ValueError) as e:
            # not an XML-RPC response (ex: html page of a gateway)
            raise RpcError(f"Invalid response for {method_name} from {self.url}: {e}") from e
        except TypeError as e:
            # unmarshallable arguments
            raise RpcError(f"Cannot send arguments for {method_name}: {e}") from e

    def __repr__(self) -> str:
        return f"OdooXmlRpcProxy({self.url})"

    @staticmethod
    def list_databases(host: str, port: int = DEFAULT_PORT, protocol=RPCProtocol.HTTP):
        return list_databases(host, port, protocol)

    @staticmethod
    def get_server_version(host: str, port: int = DEFAULT_PORT, protocol=RPCProtocol.HTTP):
        return get_server_version(host, port, protocol)

    @staticmethod
    def create_database(host: str, port: int = DEFAULT_PORT, protocol=RPCProtocol.HTTP, **kw):
        return create_database(host, port, protocol, **kw)

    @staticmethod
    def drop_database(host: str, port: int = DEFAULT_PORT, protocol=RPCProtocol.HTTP, **kw):
        return drop_database(host, port, protocol, **kw)


def _database_proxy(host: str, port: int, protocol: RPCProtocol) -> OdooXmlRpcProxy:
    return OdooXmlRpcProxy(ProxyConfig(host, port, RPCService.DATABASE, protocol))


def list_databases(
    host: str, port: int = DEFAULT_PORT, protocol: RPCProtocol = RPCProtocol.HTTP
) -> List[str]:
    """Get the list of databases (may be disabled on the server and fail)"""
    result = _database_proxy(host, port, protocol).execute("list")
    if not isinstance(result, (list, tuple)):
        raise RpcError(f"Invalid database list received from {host}: {result!r}")
    return [str(name) for name in result]


def get_server_version(
    host: str, port: int = DEFAULT_PORT, protocol: RPCProtocol = RPCProtocol.HTTP
) -> Version:
    """Get the server version, for example 7.0-20130216-002451 or 6.1-1"""
    result = _database_proxy(host, port, protocol).execute("server_version")
    return Version(str(result))


def create_database(
    host: str,
    port: int = DEFAULT_PORT,
    protocol: RPCProtocol = RPCProtocol.HTTP,
    *,
    database: str,
    master_password: str,
    password: str,
    demo: bool = False,
    lang: str = 'en_US',
) -> bool:
    """Create a new database

    :param database: Name of the database to create
    :param master_password: The server's master (admin) password
    :param password: Password of the admin user of the new database
    :param demo: Load demo data (default: no)
    :param lang: Language of the database
    :return: Whether the server created it
    """
    logging.getLogger(__name__).info("Create database [%s] on [%s]", database, host)
    proxy = _database_proxy(host, port, protocol)
    return bool(proxy.execute("create_database", [master_password, database, demo, lang, password]))


def drop_database(
    host: str,
    port: int = DEFAULT_PORT,
    protocol: RPCProtocol = RPCProtocol.HTTP,
    *,
    database: str,
    master_password: str,
) -> bool:
    """Drop a database"""
    logging.getLogger(__name__).info("Drop database [%s] on [%s]", database, host)
    proxy = _database_proxy(host, port, protocol)
    return bool(proxy.execute("drop", [master_password, database]))
