"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class ProviderError(AdapterError):
    """External provider error."""

    pass


class RemoteTransportError(ProviderError):
    """Network failure while talking to the community platform.

    Raised and caught inside the platform adapter; callers only ever see
    it as an unverified outcome.
    """

    pass
