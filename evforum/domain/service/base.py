"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the rules that span several entities: attachment
    lifecycles, reply ordering and draft editing.
    """

    pass
