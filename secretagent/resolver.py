import json
import logging
import typing

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from secretagent.exceptions import FieldNotFound, StoreUnavailable

LOG = logging.getLogger(__name__)


class SecretStore(typing.Protocol):
    def fetch(self, location: str) -> typing.Any:
        ...


class SecretsManagerStore:
    """AWS Secrets Manager lookups through a single reusable boto3 client."""

    def __init__(self, client=None, *, region: str = None, profile: str = None, endpoint_url: str = None):
        self._client = client
        self._region = region
        self._profile = profile
        self._endpoint_url = endpoint_url

    def _get_client(self):
        # session errors such as a missing region surface from fetch as StoreUnavailable
        if self._client is None:
            session = boto3.session.Session(profile_name=self._profile, region_name=self._region)
            self._client = session.client("secretsmanager", endpoint_url=self._endpoint_url)
        return self._client

    @classmethod
    def from_settings(cls, settings) -> "SecretsManagerStore":
        return cls(
            region=settings.aws_region,
            profile=settings.aws_profile,
            endpoint_url=settings.aws_endpoint_url,
        )

    def fetch(self, location: str) -> typing.Any:
        try:
            result = self._get_client().get_secret_value(SecretId=location)
        except (BotoCoreError, ClientError) as err:
            LOG.error("failed to retrieve secret %s: %s", location, err)
            raise StoreUnavailable(f"unable to retrieve secret {location}: {err}") from err

        if "SecretString" not in result:
            return result.get("SecretBinary")

        raw = result["SecretString"]
        try:
            return json.loads(raw)
        except ValueError:
            return raw


class SecretResolver:

    def __init__(self, store: SecretStore):
        self._store = store

    def resolve(self, location: str, field: str) -> str:
        """
        Look up ``location`` once and return its string ``field``.

        :raises StoreUnavailable: the store lookup failed
        :raises FieldNotFound: the payload has no string entry named ``field``
        """
        payload = self._store.fetch(location)
        if not isinstance(payload, dict):
            raise FieldNotFound(f"secret {location} is not a key/value document")

        if field not in payload:
            raise FieldNotFound(f"secret {location} has no field {field}")

        value = payload[field]
        if not isinstance(value, str):
            raise FieldNotFound(
                f"field {field} of secret {location} is a {type(value).__name__}, not a string"
            )
        return value
