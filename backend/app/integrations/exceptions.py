class IntegrationError(Exception):
    """Base exception for integration-level failures (config, connectivity, auth)."""


class UpstreamAPIError(Exception):
    """Represents an upstream API call failure (quota, 4xx/5xx, empty reply)."""


class MalformedResponseError(ValueError):
    """The model replied, but the text could not be turned into a trip."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text
