"""Services of the resolution engine."""

from reqvars.services.http_response import HTTPResponse

__all__ = ["HTTPResponse"]
