"""
Core Module

Core functionality including:
- Security (shared-secret checks, credential generation)
- Logging (structured logging)
- Metrics (Prometheus)
- Exceptions (custom exceptions)
- Rate limiting
"""

__all__ = [
    "security",
    "logging",
    "metrics",
    "exceptions",
    "rate_limiter",
]
