"""FastAPI application and endpoints."""

import asyncio
import html
import logging
from typing import Optional
from urllib.parse import quote

from fastapi import FastAPI, Query, Request
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse

from thumbserve import __version__
from thumbserve.core.config import StoreConfig
from thumbserve.core.resolver import ImageRequest, ThumbnailResolver
from thumbserve.core.store import ArtifactStore

log = logging.getLogger(__name__)

IMAGE_UNAVAILABLE_MESSAGE = "The requested image is not available on disk."


def create_app(config: Optional[StoreConfig] = None, resolver: Optional[ThumbnailResolver] = None) -> FastAPI:
    """Build the application around an explicit store configuration."""
    if resolver is None:
        store = ArtifactStore(config or StoreConfig.from_env())
        resolver = ThumbnailResolver(store)
    store = resolver.store

    app = FastAPI(title="thumbserve", version=__version__)
    app.state.resolver = resolver

    @app.on_event("startup")
    async def startup():
        """Make sure thumbnails can be written before serving."""
        if store.ensure_thumbnail_root():
            log.info(f"Thumbnails in {store.thumbnails_dir}")
        log.info(f"Originals in {store.originals_dir}")

    @app.get("/", response_class=HTMLResponse)
    def index():
        """Short usage page with links to the available images."""
        links = "".join(
            f'<li><a href="/api/images?filename={quote(name)}">{html.escape(name)}</a></li>'
            for name in sorted(store.list_originals())
        )
        return (
            "<h1>thumbserve</h1>"
            "<p>Request an image via "
            "<code>/api/images?filename=&lt;name&gt;&amp;width=&lt;w&gt;&amp;height=&lt;h&gt;</code>. "
            "Width and height are optional but must be passed together.</p>"
            f"<ul>{links}</ul>"
        )

    @app.get("/api/images")
    async def get_image(
        request: Request,
        filename: Optional[str] = Query(None),
        width: Optional[str] = Query(None),
        height: Optional[str] = Query(None),
    ):
        """Serve an original or a resized copy of it.

        Validation and processing errors are returned as plain text with
        status 200, like every other response of this endpoint.
        """
        resolver: ThumbnailResolver = request.app.state.resolver
        result = await resolver.resolve(
            ImageRequest(name=filename, width=width, height=height)
        )

        if not result.ok:
            log.info(f"Rejected image request {dict(request.query_params)}: {result.outcome.value}")
            return PlainTextResponse(result.message)

        # The file may be gone between the listing and sending it
        loop = asyncio.get_running_loop()
        if not await loop.run_in_executor(None, resolver.store.exists, result.path):
            log.warning(f"Resolved image {result.path} is missing")
            return PlainTextResponse(IMAGE_UNAVAILABLE_MESSAGE)

        return FileResponse(result.path)

    @app.get("/health")
    def health():
        """Service health and cache counters."""
        scan = store.scan_originals()
        return {
            "status": "ok",
            "version": __version__,
            "originals": {
                "status": scan.status.value,
                "count": len(scan.names),
            },
            "thumbnails": {
                "directory": str(store.thumbnails_dir),
                "generated": resolver.generated,
                "cache_hits": resolver.cache_hits,
                "single_flight": resolver.single_flight,
            },
        }

    return app


app = create_app()
