"""Entry point for the chunk-aware file server."""

import argparse
import asyncio
import time
import uuid
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import Response

from common.logging_config import get_logger, setup_logging
from server import config
from server.delivery import ChunkedDeliveryHandler, ChunkedResponse
from server.reassembly_cache import ReassemblyCache
from server.static_files import create_static_app

logger = get_logger('server')

INTERCEPTED_METHODS = ('GET', 'HEAD')


def create_app(
    public_dir: Optional[str] = None,
    chunks_dir: Optional[str] = None,
    cache_ttl_ms: Optional[int] = None,
    cache: Optional[ReassemblyCache] = None,
) -> FastAPI:
    """
    Build the server application.

    Requests whose file name has a manifest in `chunks_dir` are answered with
    the reassembled file; everything else is served from `public_dir`.

    Args:
        public_dir: Static root (default: config.PUBLIC_DIR)
        chunks_dir: Manifest and chunk directory (default: config.CHUNKS_DIR)
        cache_ttl_ms: Reassembly cache TTL (default: config.CACHE_TTL)
        cache: Pre-built cache, overrides cache_ttl_ms

    Returns:
        FastAPI application
    """
    public_dir = public_dir or config.PUBLIC_DIR
    chunks_dir = chunks_dir or config.CHUNKS_DIR
    if cache is None:
        cache = ReassemblyCache(ttl_ms=config.CACHE_TTL if cache_ttl_ms is None else cache_ttl_ms)

    app = FastAPI(
        title="LFS Bypasser Server",
        description="Static build server with on-demand reassembly of chunked files",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    handler = ChunkedDeliveryHandler(chunks_dir, cache)
    app.state.delivery_handler = handler
    app.state.reassembly_cache = cache

    @app.middleware("http")
    async def serve_chunked_files(request: Request, call_next):
        """
        Answer requests for chunked files with the reassembled content.
        """
        if request.method not in INTERCEPTED_METHODS:
            return await call_next(request)

        outcome = await asyncio.to_thread(handler.attempt, request.url.path)

        if isinstance(outcome, ChunkedResponse):
            return Response(content=outcome.buffer, media_type=outcome.media_type)

        return await call_next(request)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """
        Middleware to log all HTTP requests and responses.
        """
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()
        logger.debug(f"Request started: {request.method} {request.url.path} [request_id={request_id}]")

        response = await call_next(request)

        duration = time.time() - start_time
        logger.info(
            f"Request completed: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
        )

        response.headers["X-Request-ID"] = request_id
        return response

    app.mount("/", create_static_app(public_dir), name="public")

    logger.info(f"Serving {public_dir} with chunked files from {chunks_dir}")
    return app


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse server command-line arguments."""
    parser = argparse.ArgumentParser(description="Serve a build with chunked large files")
    parser.add_argument('port', nargs='?', type=int, default=config.SERVER_PORT,
                        help=f"Port to listen on (default: PORT env or {config.SERVER_PORT})")
    parser.add_argument('--host', default=config.SERVER_HOST)
    parser.add_argument('--public-dir', default=config.PUBLIC_DIR)
    parser.add_argument('--chunks-dir', default=config.CHUNKS_DIR)
    parser.add_argument('--cache-ttl-ms', type=int, default=config.CACHE_TTL)
    parser.add_argument('--debug', action='store_true', help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> None:
    """
    Start the server with uvicorn.
    """
    args = parse_args(argv)
    setup_logging('server', log_level='DEBUG' if args.debug else None)

    app = create_app(
        public_dir=args.public_dir,
        chunks_dir=args.chunks_dir,
        cache_ttl_ms=args.cache_ttl_ms,
    )
    logger.info(f"Server is running on http://localhost:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
