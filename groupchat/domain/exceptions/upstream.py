"""
UpstreamError - A storage or push backend failed.
Maps to: HTTP 502 Bad Gateway
"""


class UpstreamError(Exception):
    def __init__(self, message: str = "Upstream service failure"):
        super().__init__(message)


class PushGatewayError(UpstreamError):
    """The push gateway rejected or failed a single send."""


class InvalidDeviceTokenError(PushGatewayError):
    """The device token is unknown to the gateway or has expired."""

    def __init__(self, message: str = "Invalid or expired device token"):
        super().__init__(message)
