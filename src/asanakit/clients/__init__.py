"""Transport modules for asanakit.

These wrap httpx so the API client deals only in typed
responses and asanakit errors.
"""

from asanakit.clients.http import HTTPResponse, request

__all__ = ["request", "HTTPResponse"]
