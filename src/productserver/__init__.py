"""
=============================================================================
PRODUCTSERVER - CRUD over a PostgreSQL table on raw sockets
=============================================================================

A small HTTP/1.1 server, built on Python sockets with no HTTP framework,
that exposes create/read/update/delete for a single `products` table.

=============================================================================
ENDPOINTS
=============================================================================

    POST   /products          {"name": "...", "price": N}  → Product created
    GET    /products/<id>     one product as JSON
    GET    /products          all products as a JSON array
    GET    /price/<T>         products with price < T
    PUT    /products/<id>     {"name": "...", "price": N}  → Product updated
    DELETE /products/<id>     → Product deleted

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    productserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m productserver)
    ├── server.py            # ProductServer + create_app()
    ├── config.py            # ServerConfig dataclass
    ├── core/                # Sockets
    │   ├── socket_server.py # Sequential accept loop
    │   └── connection.py    # Read one request / send one response
    ├── http/                # Protocol
    │   ├── request.py       # Lenient decoding, path/body extraction
    │   ├── response.py      # Status line + headers + body
    │   ├── router.py        # Ordered prefix route table
    │   └── status_codes.py  # 200 / 404 / 413 / 500
    ├── middleware/          # Access logging
    ├── handlers/            # One handler per route
    ├── models/              # Product dataclass + JSON
    ├── repositories/        # SQL for the products table
    └── db/                  # psycopg2 gateway + schema

=============================================================================
QUICK START
=============================================================================

    from productserver import ServerConfig, create_app

    config = ServerConfig(database_url="postgresql://localhost/shop")
    create_app(config).run()

Or from a shell:

    DATABASE_URL=postgresql://localhost/shop python -m productserver

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig, ConfigError
from .server import ProductServer, create_app

__all__ = ["ProductServer", "ServerConfig", "ConfigError", "create_app", "__version__"]
