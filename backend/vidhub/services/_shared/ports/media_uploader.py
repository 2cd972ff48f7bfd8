"""Port for pushing a local file to the media host."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class MediaUploadError(Exception):
    """The media host rejected the file or could not be reached."""


@dataclass(frozen=True, slots=True)
class UploadedMedia:
    """
    Result of a successful upload.

    :param url: Public URL of the stored asset.
    :type url: str
    """

    url: str


class MediaUploader(Protocol):
    def upload(self, local_path: str) -> UploadedMedia:
        """
        Upload ``local_path`` and return its public URL.

        Implementations remove the local file once the attempt is over,
        whether it succeeded or not.

        :raises MediaUploadError: on any failure.
        """
        ...
