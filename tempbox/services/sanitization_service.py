"""
HTML Sanitization Service

Provides XSS-safe cleaning of Mail.tm message bodies using Bleach.
"""

from typing import Any, Dict, List

import bleach

from tempbox.core.exceptions import SanitizationException
from tempbox.core.logging import get_logger

logger = get_logger(__name__)


class SanitizationService:
    """Service for sanitizing HTML content."""

    # Allowed HTML tags (safe subset)
    ALLOWED_TAGS = [
        'a', 'abbr', 'b', 'blockquote', 'br', 'code', 'div',
        'em', 'i', 'li', 'ol', 'p', 'pre', 'span', 'strong', 'ul',
        'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
        'table', 'thead', 'tbody', 'tr', 'th', 'td',
        'img', 'hr', 'center', 'font', 'u', 's', 'small', 'sub', 'sup',
    ]

    ALLOWED_ATTRIBUTES = {
        '*': ['class', 'align'],
        'a': ['href', 'title', 'rel'],
        'img': ['src', 'alt', 'title', 'width', 'height'],
        'abbr': ['title'],
        'font': ['color', 'size'],
        'table': ['border', 'cellpadding', 'cellspacing', 'width'],
        'th': ['colspan', 'rowspan'],
        'td': ['colspan', 'rowspan', 'width'],
    }

    ALLOWED_PROTOCOLS = ['http', 'https', 'mailto']

    def __init__(self):
        self.cleaner = bleach.Cleaner(
            tags=self.ALLOWED_TAGS,
            attributes=self.ALLOWED_ATTRIBUTES,
            protocols=self.ALLOWED_PROTOCOLS,
            strip=True,
            strip_comments=True,
        )

    def sanitize_html(self, html: str) -> str:
        """
        Sanitize HTML content to prevent XSS attacks.

        Args:
            html: Raw HTML string

        Returns:
            str: Sanitized HTML safe for rendering

        Raises:
            SanitizationException: If sanitization fails
        """
        if not html:
            return ""

        try:
            clean_html = self.cleaner.clean(html)
            return bleach.linkify(
                clean_html,
                parse_email=True,
                callbacks=[self._set_link_attributes],
            )
        except Exception as e:
            logger.error("sanitization_failed", error=str(e))
            raise SanitizationException(
                message="Failed to sanitize HTML content",
                detail={"error": str(e)},
            ) from e

    def sanitize_message(self, message: Dict[str, Any]) -> Dict[str, Any]:
        """
        Return a copy of a Mail.tm message with every HTML part cleaned.

        Mail.tm delivers ``html`` as a list of strings.
        """
        sanitized = dict(message)
        html_parts: List[str] = message.get("html") or []
        sanitized["html"] = [self.sanitize_html(part) for part in html_parts]
        return sanitized

    def _set_link_attributes(self, attrs, new=False):
        """Add rel="noopener noreferrer" and open external links in a new tab."""
        href_key = (None, 'href')
        if href_key in attrs:
            attrs[(None, 'rel')] = 'noopener noreferrer'
            if attrs[href_key].startswith('http'):
                attrs[(None, 'target')] = '_blank'

        return attrs
