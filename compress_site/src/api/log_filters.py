"""
Log filters for noisy records.
"""

import logging


class SuppressDisallowedHostFilter(logging.Filter):
    """
    Drop DisallowedHost noise produced by scanners hitting the site with
    forged Host headers.
    """

    SUPPRESSED_PATTERNS = [
        "DisallowedHost",
        "Invalid HTTP_HOST header",
        "Invalid HTTP request line",
    ]

    def filter(self, record):
        message = record.getMessage()
        return all(pattern not in message for pattern in self.SUPPRESSED_PATTERNS)


class TruncateDataURIFilter(logging.Filter):
    """Shorten inline base64 payloads so a PDF never lands in the log file."""

    MAX_LENGTH = 120

    def filter(self, record):
        message = record.getMessage()
        if "base64," in message and len(message) > self.MAX_LENGTH:
            record.msg = message[: self.MAX_LENGTH] + "...[truncated]"
            record.args = ()
        return True
