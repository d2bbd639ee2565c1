class SecretAgentError(Exception):
    pass


class DecodeError(SecretAgentError):
    """The admission request does not carry a pod we can read."""


class MalformedReference(SecretAgentError):
    """An env value holds the secret marker but not as <location>?<field>."""


class ResolveError(SecretAgentError):
    pass


class StoreUnavailable(ResolveError):
    """The secret store lookup itself failed."""


class FieldNotFound(ResolveError):
    """The secret has no string entry with the requested name."""
