"""
=============================================================================
PRODUCT SERVER
=============================================================================

Ties the pieces together:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        REQUEST FLOW                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   SocketServer.accept()                                              │
    │        │                                                             │
    │        ▼                                                             │
    │   Connection.read_request()      bytes until headers + body          │
    │        │                         (413 if over max_request_size)      │
    │        ▼                                                             │
    │   parse_request()                lenient UTF-8 → HTTPRequest         │
    │        │                                                             │
    │        ▼                                                             │
    │   LoggingMiddleware ─► Router.handle ─► ProductHandlers.*            │
    │                                              │                       │
    │                                              ▼                       │
    │                                   ProductRepository ─► Database      │
    │                                              (new connection/call)   │
    │        ▼                                                             │
    │   Connection.send_response()  ─►  Connection.close()                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

One connection is handled at a time, start to finish.

=============================================================================
STARTUP
=============================================================================

    1. Configure logging
    2. CREATE TABLE IF NOT EXISTS products  (failure ends the process)
    3. Bind and listen on host:port
    4. Accept loop until SIGINT / SIGTERM / stop()

=============================================================================
"""

import logging
from typing import Callable, Optional, Tuple

from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState, RequestTooLargeError
from .db import Database, create_tables
from .handlers import ProductHandlers, create_router
from .http import HTTPRequest, HTTPResponse, Router, parse_request, internal_error, payload_too_large
from .middleware import LoggingMiddleware, Middleware, MiddlewarePipeline
from .repositories import ProductRepository


logger = logging.getLogger(__name__)


class ProductServer:
    """
    Sequential HTTP server for the product API.

    Args:
        config: Validated on construction.
        router: Route table to dispatch to.
        database: When given, the products table is created on run().
    """

    def __init__(
        self,
        config: ServerConfig,
        router: Router,
        database: Optional[Database] = None,
    ):
        self.config = config
        self.config.validate()

        self.database = database
        self._router = router
        self._middleware = MiddlewarePipeline()
        self._socket_server = SocketServer(self.config)
        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def use(self, middleware: Middleware) -> "ProductServer":
        """Add middleware (first added = outermost). Returns self."""
        self._middleware.add(middleware)
        return self

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port) once listening."""
        return self._socket_server.address

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server (blocking).

        Raises:
            psycopg2.Error: If the schema cannot be created.
            OSError: If the port cannot be bound.
        """
        self._setup_logging()

        if self.database is not None:
            create_tables(self.database)

        self._handler = self._middleware.wrap(self._router.handle)

        logger.info(f"Starting product server on {self.config.host}:{self.config.port}")
        logger.info("\n" + self._router.describe_routes())

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def stop(self):
        """Ask the accept loop to exit; run() returns within about a second."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the listening socket is up."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("productserver").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Read one request, answer it, close. Runs on the accept thread."""
        with conn:
            try:
                raw_request = conn.read_request()
            except RequestTooLargeError as e:
                logger.warning(f"[{conn.id}] {e}")
                conn.send_response(payload_too_large().to_bytes())
                return
            except TimeoutError as e:
                logger.warning(f"[{conn.id}] {e}")
                return

            if raw_request is None:
                return  # Client connected and left

            request = parse_request(raw_request, conn.address)
            conn.state = ConnectionState.PROCESSING

            try:
                response = self._handler(request)
            except Exception as e:
                logger.exception(f"[{conn.id}] Handler error: {e}")
                response = internal_error()

            conn.send_response(response.to_bytes())


def create_app(config: ServerConfig) -> ProductServer:
    """
    Wire the production object graph.

        Database(dsn) → ProductRepository → ProductHandlers → Router
                                                                 │
        ProductServer(config, router, database) + LoggingMiddleware
    """
    database = Database(config.database_url)
    handlers = ProductHandlers(ProductRepository(database))
    server = ProductServer(config, create_router(handlers), database=database)
    server.use(LoggingMiddleware())
    return server
