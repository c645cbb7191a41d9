"""
AMEE API Client

Connection and communication management for the AMEE REST API.
Handles the auth handshake, session expiry, path validation and the
single reconnect-and-retry on 401 responses.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from .errors import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ProtocolError,
    TransmissionError,
)
from .paths import DEFAULT_ALLOW_LIST, PathAllowList, validate_path
from .protocol import (
    AUTH_PATH,
    METHODS,
    ApiResponse,
    build_request,
    encode_params,
    find_auth_token,
    is_auth_call,
    parse_response,
)
from .session import MemorySession
from .transport import Transport
from .types import AMEEConfig, DEFAULT_PORT, DEFAULT_SSL_PORT, SessionStorage


logger = logging.getLogger("amee_api")

# One original attempt plus one retry after a 401
MAX_ATTEMPTS = 2


class AMEEClient:
    """
    AMEE API Client - SDK entry point.

    Not thread-safe. Each verb call runs to completion, including any
    retry, before returning; use one client per thread.
    """

    def __init__(self, config: AMEEConfig, allow_list: PathAllowList = DEFAULT_ALLOW_LIST) -> None:
        """
        Initialize the AMEE API client.

        Args:
            config: Client configuration options
            allow_list: Path openings permitted per verb
        """
        self._project_key = config.project_key
        self._project_password = config.project_password
        self._host = config.host
        self._port = config.port or DEFAULT_PORT
        self._ssl_port = config.ssl_port or DEFAULT_SSL_PORT
        self._use_ssl = config.use_ssl
        self._timeout = config.timeout
        self._auth_timeout = config.auth_timeout
        self._debug = config.debug
        self._allow_list = allow_list
        self._session: SessionStorage = (
            config.storage if config.storage is not None else MemorySession()
        )
        self._transport = Transport(
            backend=config.network_backend,
            ssl_context=config.ssl_context,
            timeout=config.timeout,
            debug=config.debug,
        )

        self._log(f"AMEEClient initialized (host={self._host})")

    def _log(self, message: str, *args: Any) -> None:
        """Log debug message."""
        if self._debug:
            logger.debug(f"[AMEE] {message}", *args)

    @property
    def session(self) -> SessionStorage:
        """The session storage owned by this client."""
        return self._session

    # =========================================================================
    # Verb Methods
    # =========================================================================

    def post(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Send a POST request.

        Args:
            path: API path, e.g. /auth
            params: Form parameters sent as the request body

        Returns:
            The JSON response string
        """
        validate_path(path, "post", self._allow_list)
        result = self.dispatch("POST", path, encode_params(params))
        return result[0] if result else ""

    def put(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Send a PUT request.

        Args:
            path: API path under /profiles/<uid>/
            params: Form parameters sent as the request body

        Returns:
            The JSON response string
        """
        validate_path(path, "put", self._allow_list)
        result = self.dispatch("PUT", path, encode_params(params))
        return result[0] if result else ""

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Send a GET request.

        Args:
            path: API path under /profiles or /data
            params: Query string parameters

        Returns:
            The JSON response string
        """
        validate_path(path, "get", self._allow_list)
        query = encode_params(params)
        result = self.dispatch("GET", f"{path}?{query}" if query else path)
        return result[0] if result else ""

    def delete(self, path: str) -> str:
        """
        Send a DELETE request.

        Args:
            path: API path under /profiles/<uid>/

        Returns:
            The JSON response string
        """
        validate_path(path, "delete", self._allow_list)
        result = self.dispatch("DELETE", path)
        return result[0] if result else ""

    # =========================================================================
    # Session Methods
    # =========================================================================

    def is_active(self) -> bool:
        """Check if there is an unexpired auth token."""
        return self._session.is_active()

    def connect(self) -> None:
        """
        Authenticate against POST /auth and store the returned token.

        Raises:
            ConfigurationError: If key, password or host is missing
            AuthenticationError: If the response carries no authToken header
        """
        self._check_config()

        self._log(f"Authenticating project {self._project_key}")
        lines = self.dispatch(
            "POST",
            AUTH_PATH,
            encode_params({
                "username": self._project_key,
                "password": self._project_password,
            }),
            want_headers=True,
            allow_retry=False,
        )

        token = find_auth_token(lines)
        if token is None:
            self._session.clear()
            self._log("Authentication failed: no authToken header")
            raise AuthenticationError(
                "Authentication error: No authToken returned by the AMEE REST API."
            )

        self._session.set_token(token, self._auth_timeout)
        self._log("Authentication successful")

    def disconnect(self) -> None:
        """Drop the current session."""
        self._session.clear()

    def reconnect(self) -> None:
        """Drop the current session and authenticate again."""
        self.disconnect()
        self.connect()

    def _check_config(self) -> None:
        if not self._project_key:
            raise ConfigurationError("Cannot connect to the AMEE REST API: No project key defined.")
        if not self._project_password:
            raise ConfigurationError(
                "Cannot connect to the AMEE REST API: No project password defined."
            )
        if not self._host:
            raise ConfigurationError("Cannot connect to the AMEE REST API: No API URL defined.")

    # =========================================================================
    # Dispatch
    # =========================================================================

    def dispatch(
        self,
        method: str,
        path: str,
        body: Optional[str] = None,
        want_headers: bool = False,
        allow_retry: bool = True,
    ) -> List[str]:
        """
        Send a request and return the response lines.

        Args:
            method: GET, POST, PUT or DELETE
            path: Request path, including any query string
            body: Form-encoded body for POST and PUT
            want_headers: Return every response line instead of only the JSON lines
            allow_retry: Reconnect and resend once if the API answers 401

        Returns:
            All response lines if want_headers, else the JSON payload lines
        """
        if method not in METHODS:
            raise ProtocolError(f"Invalid AMEE REST API method specified: {method} {path}")
        if "\r" in path or "\n" in path:
            raise ProtocolError(f"Invalid AMEE REST API path specified: {path!r}")

        auth_call = is_auth_call(method, path)
        attempts = MAX_ATTEMPTS if allow_retry else 1

        for attempt in range(1, attempts + 1):
            if not auth_call and not self.is_active():
                self.connect()

            self._log(f"{method} {path} (attempt {attempt})")
            response = self._exchange(method, path, body, auth_call)

            if not response.is_unauthorized:
                self._session.touch(self._auth_timeout)
                return response.lines if want_headers else response.json_lines

            if attempt < attempts:
                self._log("Got 401 UNAUTH, reconnecting")
                self.reconnect()

        raise AuthorizationError("The AMEE REST API returned an authorisation failure result.")

    def _exchange(self, method: str, path: str, body: Optional[str], auth_call: bool) -> ApiResponse:
        """Open a connection, write the request and read the whole response."""
        # a direct dispatch("POST", "/auth") skips connect()
        if not self._host:
            raise ConfigurationError("Cannot connect to the AMEE REST API: No API URL defined.")

        request = build_request(
            method,
            path,
            self._host,
            token=None if auth_call else self._session.get_token(),
            body=body,
        )

        use_tls = auth_call and self._use_ssl
        port = self._ssl_port if use_tls else self._port

        with self._transport.open(self._host, port, use_tls=use_tls) as connection:
            written = connection.send(request)
            if written != len(request):
                raise TransmissionError(
                    "Error sending the AMEE REST API request",
                    {"written": written, "expected": len(request)},
                )
            raw = connection.receive_all()

        return parse_response(raw)

    def get_config(self) -> Dict[str, Any]:
        """
        Get client configuration (read-only).

        Returns:
            Configuration dictionary with the password masked
        """
        return {
            "project_key": self._project_key,
            "project_password": "***" if self._project_password else None,
            "host": self._host,
            "port": self._port,
            "ssl_port": self._ssl_port,
            "use_ssl": self._use_ssl,
            "timeout": self._timeout,
            "auth_timeout": self._auth_timeout,
        }


def create_amee_client(config: AMEEConfig) -> AMEEClient:
    """
    Create a new AMEE API client instance.

    Args:
        config: Client configuration options

    Returns:
        AMEEClient instance
    """
    return AMEEClient(config)
