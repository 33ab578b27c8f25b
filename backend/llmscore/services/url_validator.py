"""URL validation for scan targets.

Checks that a submitted URL is well-formed before any external call is
made. Reachability is left to the scan itself.
"""

import re
from dataclasses import dataclass
from urllib.parse import urlparse

DOMAIN_PATTERN = re.compile(r"^([a-zA-Z0-9]([a-zA-Z0-9\-]*[a-zA-Z0-9])?\.)+[a-zA-Z]{2,}$")


class InvalidURLError(ValueError):
    """The submitted URL cannot be scanned."""


@dataclass
class TargetURL:
    """A validated scan target."""
    url: str  # As submitted, with a scheme added when missing
    origin: str  # scheme://host[:port]
    domain: str  # Lower-cased host without port


class URLValidator:
    """Service for validating URLs before scanning."""

    def parse(self, url: str | None) -> TargetURL:
        """Validate and normalize a URL.

        Raises:
            InvalidURLError: With a message suitable for a 400 response
        """
        if not url or not url.strip():
            raise InvalidURLError("URL is required")

        url = url.strip()
        if not re.match(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://", url):
            url = f"https://{url}"

        format_error = self._validate_format(url)
        if format_error:
            raise InvalidURLError(format_error)

        parsed = urlparse(url)
        return TargetURL(
            url=url,
            origin=f"{parsed.scheme}://{parsed.netloc}",
            domain=(parsed.hostname or "").lower(),
        )

    def _validate_format(self, url: str) -> str | None:
        """Validate URL format. Returns error message or None if valid."""
        try:
            parsed = urlparse(url)
            # Accessing port validates it
            _ = parsed.port
        except ValueError:
            return "Invalid URL format"

        # Check scheme
        if parsed.scheme not in ("http", "https"):
            return "URL must use http:// or https://"

        # Check netloc (domain)
        if not parsed.hostname:
            return "URL must include a domain name"

        domain = parsed.hostname.lower()
        if not DOMAIN_PATTERN.match(domain) and domain != "localhost":
            return "Invalid domain name"

        return None
