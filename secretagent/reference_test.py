import pytest

from secretagent.exceptions import MalformedReference
from secretagent.reference import MARKER, SecretReference, is_reference, parse_reference


def test_parse_reference():
    ref = parse_reference("ASM_STORED_SECRET_/path/to/secret?key")
    assert ref == SecretReference("/path/to/secret", "key")
    assert ref.location == "/path/to/secret"
    assert ref.field == "key"


def test_parse_is_idempotent():
    ref = parse_reference("ASM_STORED_SECRET_arn:aws:secretsmanager:us-east-1:123:secret:db?password")
    assert str(ref) == "ASM_STORED_SECRET_arn:aws:secretsmanager:us-east-1:123:secret:db?password"
    assert parse_reference(str(ref)) == ref


@pytest.mark.parametrize("value", [
    "ASM_STORED_SECRET_onlylocation",
    "ASM_STORED_SECRET_a?b?c",
    "ASM_STORED_SECRET_?key",
    "ASM_STORED_SECRET_/path?",
    "ASM_STORED_SECRET_",
    "prefix-ASM_STORED_SECRET_/path?key",
])
def test_parse_malformed(value):
    with pytest.raises(MalformedReference):
        parse_reference(value)


def test_is_reference():
    assert is_reference(MARKER + "/path?key")
    assert is_reference("prefix-" + MARKER)
    assert not is_reference("plain value")
    assert not is_reference("")
    assert not is_reference(None)
