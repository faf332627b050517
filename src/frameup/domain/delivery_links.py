"""Validation of delivered video links."""

import re
from dataclasses import dataclass

from frameup.domain.enums import DeliveryLinkType
from frameup.domain.errors import InvalidDeliveryUrlError

_DRIVE_FILE_ID = re.compile(r"/d/([^/?#]+)")


@dataclass(frozen=True)
class DeliveryLink:
    """A normalized delivery link."""

    type: DeliveryLinkType
    url: str


def to_drive_preview_url(url: str) -> str:
    """Rewrite a Google Drive file link to its embeddable preview form."""
    match = _DRIVE_FILE_ID.search(url)
    if match:
        return f"https://drive.google.com/file/d/{match.group(1)}/preview"
    return url


def normalize_delivery_url(url: str) -> DeliveryLink:
    """Validate a delivery link and return its normalized form.

    Raises:
        InvalidDeliveryUrlError: For folder links, empty links and unsupported hosts.
    """
    url = (url or "").strip()
    if not url:
        raise InvalidDeliveryUrlError("A delivery link is required")

    if "youtube.com" in url or "youtu.be" in url:
        return DeliveryLink(type=DeliveryLinkType.YOUTUBE, url=url)

    if "drive.google.com" in url:
        if "/folders/" in url:
            raise InvalidDeliveryUrlError("Use the link of a video file, not of a folder")
        if "/file/d/" in url:
            return DeliveryLink(type=DeliveryLinkType.GDRIVE, url=to_drive_preview_url(url))

    raise InvalidDeliveryUrlError("Unsupported link. Use YouTube or Google Drive.")
