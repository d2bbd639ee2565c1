import typing

from secretagent.exceptions import MalformedReference

MARKER = "ASM_STORED_SECRET_"
SEPARATOR = "?"


class SecretReference(typing.NamedTuple):
    location: str
    field: str

    def __str__(self):
        return f"{MARKER}{self.location}{SEPARATOR}{self.field}"


def is_reference(value: typing.Optional[str]) -> bool:
    return bool(value) and MARKER in value


def parse_reference(value: str) -> SecretReference:
    """
    Split ``ASM_STORED_SECRET_<location>?<field>`` into its location and field.

    :raises MalformedReference: the marker is not a prefix of ``value`` or the
        remainder is not exactly two non-empty segments around a single ``?``
    """
    if not value.startswith(MARKER):
        raise MalformedReference(
            f"expected a value starting with {MARKER}, e.g. {MARKER}/aws/secret/path?key"
        )

    segments = value[len(MARKER):].split(SEPARATOR)
    if len(segments) != 2 or not all(segments):
        raise MalformedReference(
            f"expected format {MARKER}<location>{SEPARATOR}<field>, "
            f"found {len(segments) - 1} separator(s)"
        )

    location, field = segments
    return SecretReference(location, field)
