import logging
import threading
from typing import Any, Dict, List, NamedTuple, Optional, Sequence

from . import proxy as odoo_proxy
from .command import OdooCommand
from .context import Context
from .proxy import (
    DEFAULT_PORT,
    OdooError,
    OdooXmlRpcProxy,
    ProxyConfig,
    RPCProtocol,
    RPCService,
    RpcError,
)
from .version import Version

__doc__ = """
Odoo session: credentials, login and authenticated calls.
"""


class ConfigurationError(OdooError):
    """The session does not match the server (ex: unknown database)"""

    pass


class AuthenticationError(OdooError):
    """Login refused by the server"""

    pass


class LoginGuard:
    """Serializes the logins of all the sessions sharing the guard.

    Odoo raises concurrency errors when the same user logs in from multiple
    threads at the same time (ex: multi-threaded ETL processes).
    """

    def __init__(self):
        self._lock = threading.Lock()

    def __enter__(self):
        self._lock.acquire()
        return self

    def __exit__(self, *exc):
        self._lock.release()

    def locked(self) -> bool:
        return self._lock.locked()


# guard shared by the sessions of the process
DEFAULT_LOGIN_GUARD = LoginGuard()


class DatabaseList(NamedTuple):
    """Result of the database listing; the listing may be disabled"""

    available: bool
    names: List[str]

    @classmethod
    def unavailable(cls) -> "DatabaseList":
        return cls(False, [])

    def is_missing(self, database: str) -> bool:
        """Whether the database is known to be absent"""
        return self.available and database not in self.names


class Session:
    """Holds the context and initiates all calls to the server"""

    host: str
    port: int
    protocol: RPCProtocol
    database: str
    username: str
    user_id: Optional[int]
    context: Context

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        database: str = '',
        username: str = '',
        password: str = '',
        *,
        protocol: RPCProtocol = RPCProtocol.HTTP,
        timeout: Optional[float] = None,
        guard: Optional[LoginGuard] = None,
    ):
        """New session, call `start_session` to log in

        :param host: Host name or IP address of the Odoo server
        :param port: XML-RPC port number, typically 8069
        :param database: Database name to connect to
        :param username: Login of the user
        :param password: Password of the user
        :param protocol: http or https (default: http)
        :param timeout: Timeout for each call (default: none)
        :param guard: Login guard (default: shared by the process)
        """
        self.host = host
        self.port = port
        self.protocol = protocol
        self.database = database
        self.username = username
        self._password = password
        self.timeout = timeout
        self.guard = guard or DEFAULT_LOGIN_GUARD
        self.user_id = None
        self.context = Context()

    def _proxy(self, service: RPCService) -> OdooXmlRpcProxy:
        config = ProxyConfig(self.host, self.port, service, self.protocol, self.timeout)
        return OdooXmlRpcProxy(config)

    def _fetch_database_list(self) -> DatabaseList:
        """Get the databases; the listing can be disabled on the server
        (--no-database-list), the result is only used as information"""
        try:
            return DatabaseList(True, self.get_database_list())
        except RpcError as e:
            logging.getLogger(__name__).debug(
                "Database list not available on [%s]: %s", self.host, e
            )
            return DatabaseList.unavailable()

    def start_session(self):
        """Log in and save the user id for the next calls

        :raises ConfigurationError: The database is not on the server
        :raises AuthenticationError: Invalid username or password
        :raises RpcError: The call failed
        """
        log = logging.getLogger(__name__)
        databases = self._fetch_database_list()
        if not self.database:
            # use the database when the server has a single one
            if len(databases.names) != 1:
                raise ConfigurationError(
                    'No database given and cannot determine one for [%s]' % self.host
                )
            self.database = databases.names[0]
            log.debug("Using the default database [%s]", self.database)
        if databases.is_missing(self.database):
            raise ConfigurationError(
                'Database [%s] was not found in the following list: %s'
                % (self.database, ', '.join(databases.names))
            )

        self.user_id = None
        common = self._proxy(RPCService.COMMON)
        with self.guard:
            uid = common.execute("login", [self.database, self.username, self._password])

        if not isinstance(uid, int) or isinstance(uid, bool) or uid <= 0:
            raise AuthenticationError(
                'Incorrect username and/or password for %s, login failed' % self.username
            )
        self.user_id = uid
        log.info("Login successful [%s], [%s] uid: %d", self.host, self.username, uid)

        self.context.clear()
        self.context.merge(self.execute_command("res.users", "context_get"))
        # standard behaviour of the web client
        self.context.active_test = True

    def is_connected(self) -> bool:
        """Check if the authentication is done"""
        return self.user_id is not None

    def get_database_list(self) -> List[str]:
        """Get the list of databases (may be disabled on the server and fail)"""
        return odoo_proxy.list_databases(self.host, self.port, self.protocol)

    def get_server_version(self) -> Version:
        return odoo_proxy.get_server_version(self.host, self.port, self.protocol)

    def execute_command(
        self, object_name: str, command_name: str, parameters: Optional[Sequence] = None
    ) -> Any:
        """Execute a method of a model using the object service

        The parameters are prepended with the database, user and password.

        :param object_name: Model name, ex: res.partner
        :param command_name: Method to call, ex: search
        :param parameters: Positional parameters of the method
        :return: The result of the call
        """
        params = [self.database, self.user_id or 0, self._password, object_name, command_name]
        params.extend(parameters or [])
        logging.getLogger(__name__).debug("Execute %s on %s", command_name, object_name)
        return self._proxy(RPCService.OBJECT).execute("execute", params)

    def execute_kw(
        self,
        object_name: str,
        command_name: str,
        args: Optional[Sequence] = None,
        kw: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Execute a method of a model with keyword arguments"""
        params = [
            self.database,
            self.user_id or 0,
            self._password,
            object_name,
            command_name,
            list(args or []),
            dict(kw or {}),
        ]
        logging.getLogger(__name__).debug("Execute %s on %s", command_name, object_name)
        return self._proxy(RPCService.OBJECT).execute("execute_kw", params)

    def execute_workflow(self, object_name: str, signal: str, object_id: int):
        """Send a workflow signal for a record, ex: order_confirm"""
        uid = self.user_id or 0
        params = [self.database, uid, self._password, object_name, signal, object_id]
        logging.getLogger(__name__).debug("Workflow %s on %s,%d", signal, object_name, object_id)
        self._proxy(RPCService.OBJECT).execute("exec_workflow", params)

    def get_odoo_command(self) -> OdooCommand:
        """Get a helper for the usual model methods"""
        return OdooCommand(self)

    def __repr__(self) -> str:
        user = str(self.user_id or self.username)
        url = f"{self.protocol.value}://{self.host}:{self.port}"
        return f"Session({url},db:{self.database},user:{user})"
