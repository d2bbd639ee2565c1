from .mutate import mutate, review
from .reference import parse_reference, SecretReference
from .resolver import SecretResolver, SecretsManagerStore
from .patch import build_patch
from .webhook import create_app, Manager


__all__ = [
    "mutate",
    "review",
    "parse_reference",
    "SecretReference",
    "SecretResolver",
    "SecretsManagerStore",
    "build_patch",
    "create_app",
    "Manager",
]
