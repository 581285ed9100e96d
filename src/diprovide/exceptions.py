class DIProvideError(Exception):
    """Represent a base class for all diprovide-specific failures.

    Catch this type when you want to handle any diprovide error path without
    matching each concrete exception class individually. Exceptions raised by
    user resolvers are never wrapped in it.
    """


class DIProvideInvalidProviderError(DIProvideError):
    """Signal an invalid provider construction.

    Raised by ``provide``, ``transient``, ``singleton`` and ``scoped`` when the
    resolver is not callable or the lifetime is unknown.
    """


class DIProvideInvalidMockError(DIProvideError):
    """Signal an invalid mock registration.

    Raised by ``MockRegistry.register`` and ``MockRegistry.register_partial``
    when the original or the replacement is not a provider.

    Typical fix is wrapping the replacement resolver with ``transient``,
    ``singleton`` or ``scoped`` before registering it.
    """


class DIProvidePartialMockShapeError(DIProvideError):
    """Signal a partial mock merged into a non-associative value.

    Partial mocks overlay the fields of the mock resolution onto the original
    resolution. Both sides must be field-keyed: the original a mapping, a
    dataclass instance or a pydantic model, and the mock a mapping.

    Typical fix is registering a full mock with ``MockRegistry.register``
    instead.
    """
