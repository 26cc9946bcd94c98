"""
Clients Module

HTTP clients for the third-party services TempBox fronts.
"""

from tempbox.clients.gofile import GofileClient
from tempbox.clients.mailtm import MailTMClient

__all__ = [
    "GofileClient",
    "MailTMClient",
]
