"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the handshake logic; they depend only on the
    interfaces declared in this package and on the correlation store.
    """

    pass
