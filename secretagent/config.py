import os
import tempfile
import typing

from pydantic import BaseModel

ENV_PREFIX = "SECRET_AGENT_"


def _default_cert_dir() -> str:
    return os.path.join(tempfile.gettempdir(), "serving-certs")


class Settings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8443
    cert_dir: str = _default_cert_dir()
    log_level: str = "WARNING"
    timeout: int = 10
    max_header_bytes: int = 1 << 20

    aws_region: typing.Optional[str] = None
    aws_profile: typing.Optional[str] = None
    aws_endpoint_url: typing.Optional[str] = None

    service_name: str = "secret-agent"
    service_namespace: str = "default"
    webhook_name: str = "secret-agent.asm-injection.io"
    ca_bundle: typing.Optional[str] = None

    @property
    def certfile(self) -> str:
        return os.path.join(self.cert_dir, "tls.crt")

    @property
    def keyfile(self) -> str:
        return os.path.join(self.cert_dir, "tls.key")

    @classmethod
    def from_env(cls, environ: typing.Mapping[str, str] = None, **overrides) -> "Settings":
        """Read every field from ``SECRET_AGENT_<FIELD>``; ``overrides`` win."""
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            key = ENV_PREFIX + name.upper()
            if environ.get(key):
                values[name] = environ[key]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
