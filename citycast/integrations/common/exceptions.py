"""Common exception classes for integrations."""


class IntegrationAPIError(Exception):
    """Base exception for all integration API errors."""

    pass


class ConfigurationError(IntegrationAPIError):
    """A setting required to talk to the provider is missing."""

    pass


class TransportError(IntegrationAPIError):
    """The request failed, returned a non-2xx status or an unparsable body."""

    pass


class MalformedResponse(TransportError):
    """The response body was parsed but did not have the expected shape."""

    pass
