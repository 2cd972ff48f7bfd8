"""HTTP client for the media host (multipart upload via ``requests``)."""

from __future__ import annotations

import logging
import mimetypes
import os
from contextlib import suppress

import requests

from vidhub.services._shared.ports import MediaUploader, MediaUploadError, UploadedMedia

log = logging.getLogger(__name__)


class HttpMediaUploader(MediaUploader):
    """
    Post a local file to ``upload_url`` and return the URL the host assigns.

    The host answers with JSON carrying ``url`` (or ``secure_url``). The local
    file is removed once the attempt is over, successful or not.

    :param upload_url: Endpoint accepting ``multipart/form-data`` with a
        ``file`` part.
    :param api_key: Optional bearer key sent in ``Authorization``.
    :param timeout: Seconds before the request is abandoned.
    :param session: Optional :class:`requests.Session` for connection reuse.
    """

    def __init__(
        self,
        upload_url: str,
        *,
        api_key: str | None = None,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.upload_url = upload_url
        self.api_key = api_key
        self.timeout = timeout
        self.http = session or requests.Session()

    def upload(self, local_path: str) -> UploadedMedia:
        if not local_path or not os.path.isfile(local_path):
            raise MediaUploadError(f"file not found: {local_path!r}")
        try:
            return self._post(local_path)
        finally:
            with suppress(FileNotFoundError):
                os.remove(local_path)

    def _post(self, local_path: str) -> UploadedMedia:
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        filename = os.path.basename(local_path)
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"

        try:
            with open(local_path, "rb") as fh:
                resp = self.http.post(
                    self.upload_url,
                    files={"file": (filename, fh, content_type)},
                    headers=headers,
                    timeout=self.timeout,
                )
            resp.raise_for_status()
            body = resp.json()
        except requests.RequestException as exc:
            raise MediaUploadError(f"media host request failed: {exc}") from exc
        except ValueError as exc:
            # Non-JSON reply
            raise MediaUploadError("media host returned an invalid response") from exc

        url = body.get("secure_url") or body.get("url") if isinstance(body, dict) else None
        if not url:
            raise MediaUploadError("media host response has no url")

        log.info("uploaded %s to media host", filename)
        return UploadedMedia(url=str(url))
