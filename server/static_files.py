"""Static file delivery for the public root of a served build."""

import os

from starlette.responses import FileResponse, Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

from common.constants import JAVASCRIPT_MEDIA_TYPE, OCTET_STREAM_MEDIA_TYPE, WASM_MEDIA_TYPE


def static_headers_for(path: str) -> dict:
    """
    Get the header overrides for a static file path.

    Args:
        path: File path or name

    Returns:
        Mapping of header name to value (empty when the default inference applies)
    """
    if path.endswith('.wasm'):
        return {'content-type': WASM_MEDIA_TYPE}
    if path.endswith('.data'):
        return {'content-type': OCTET_STREAM_MEDIA_TYPE}
    if path.endswith('.js.gz'):
        return {'content-type': JAVASCRIPT_MEDIA_TYPE, 'content-encoding': 'gzip'}
    return {}


class BuildStaticFiles(StaticFiles):
    """StaticFiles with the content types a WebGL build needs."""

    def file_response(
        self,
        full_path: "os.PathLike[str] | str",
        stat_result: os.stat_result,
        scope: Scope,
        status_code: int = 200,
    ) -> Response:
        response = super().file_response(full_path, stat_result, scope, status_code)
        if isinstance(response, FileResponse):
            for name, value in static_headers_for(str(full_path)).items():
                response.headers[name] = value
        return response


def create_static_app(public_dir: str, check_dir: bool = True) -> BuildStaticFiles:
    """Create the static delivery app for a public directory."""
    return BuildStaticFiles(directory=public_dir, html=True, check_dir=check_dir)
