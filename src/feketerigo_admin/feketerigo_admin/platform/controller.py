from __future__ import annotations

import io
import mimetypes
from pathlib import PurePosixPath

from flask import Flask, send_file

from ..common.web import api_errors, fail, login_required
from ..core.exceptions import StorageError


def register(app: Flask, container) -> None:
    @app.route("/files/<token>", methods=["GET"], endpoint="signed_file")
    @login_required
    @api_errors
    def signed_file(token: str):
        try:
            path = container.storage.resolve_signed(token)
            content = container.storage.download(path)
        except StorageError as e:
            # expired, tampered or missing: nothing to serve
            return fail(str(e), 404)
        mimetype = mimetypes.guess_type(path)[0] or "application/octet-stream"
        return send_file(io.BytesIO(content), mimetype=mimetype, download_name=PurePosixPath(path).name)
