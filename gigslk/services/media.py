"""Media references and storage URL conversion.

Gallery and avatar entries are one of two variants: a PersistedMedia that
already lives on the media server, or a PendingMedia that only exists as a
staged file in this process. The variant, not the URL text, decides how an
entry is treated on removal and on save.
"""

from dataclasses import dataclass
from urllib.parse import urlsplit


@dataclass(frozen=True)
class StagedFile:
    """An image chosen for upload, held in memory until save."""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class PersistedMedia:
    """A file already stored upstream. `url` is the absolute display form."""

    url: str


@dataclass(frozen=True)
class PendingMedia:
    """A staged file and the preview handle it is displayed through."""

    handle: str
    file: StagedFile


MediaRef = PersistedMedia | PendingMedia


class MediaUrlResolver:
    """Converts between storage-relative paths and absolute display URLs.

    Conversion is pure string prefixing and stripping against the media
    server's base URL.
    """

    def __init__(self, storage_base_url: str, placeholder_prefix: str = "https://placehold.co/") -> None:
        self.storage_base_url = storage_base_url.rstrip("/")
        self.placeholder_prefix = placeholder_prefix

    @staticmethod
    def is_absolute(url: str) -> bool:
        parts = urlsplit(url)
        return bool(parts.scheme and parts.netloc) or url.startswith("//")

    def is_placeholder(self, url: str | None) -> bool:
        return bool(url) and url.startswith(self.placeholder_prefix)

    def absolutize(self, path: str) -> str:
        """Prefix a storage-relative path with the media base URL.

        Absolute URLs and empty strings are returned unchanged.
        """
        if not path or self.is_absolute(path):
            return path
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.storage_base_url}{path}"

    def relativize(self, url: str) -> str:
        """Strip the media base URL, leaving the storage-relative path.

        URLs on other hosts are returned unchanged.
        """
        if url.startswith(self.storage_base_url + "/"):
            return url[len(self.storage_base_url):]
        return url

    def persisted(self, raw: object) -> PersistedMedia | None:
        """Wrap a raw stored path as a persisted reference.

        Empty values and placeholder images are not media.
        """
        if not isinstance(raw, str) or not raw.strip():
            return None
        raw = raw.strip()
        if self.is_placeholder(raw):
            return None
        return PersistedMedia(url=self.absolutize(raw))
