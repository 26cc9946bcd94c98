"""
TempBox - Disposable Email Front End

Proxies the Mail.tm API and tracks hosted files until they expire, sweeping
expired files from the file host in paced batches.

License: MIT
Version: 1.0.0
"""

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__license__",
]
