import base64
import logging
import typing

import fastapi
import uvicorn
import yaml
from fastapi import Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse
from kubernetes.client import (
    AdmissionregistrationV1ServiceReference,
    AdmissionregistrationV1WebhookClientConfig,
    ApiClient,
    V1MutatingWebhook,
    V1MutatingWebhookConfiguration,
    V1ObjectMeta,
    V1RuleWithOperations,
)
from pydantic import ValidationError

from secretagent.mutate import review
from secretagent.config import Settings
from secretagent.exceptions import DecodeError
from secretagent.resolver import SecretResolver, SecretsManagerStore
from secretagent.types import AdmissionReview

LOG = logging.getLogger(__name__)

MUTATE_PATH = "/asm-injection"
OPERATION_CREATE = "CREATE"


def _serialize(obj):
    return ApiClient().sanitize_for_serialization(obj)


async def review_pod(request: Request):
    body = await request.body()
    if not body:
        LOG.warning("received empty http body")
        return PlainTextResponse("Empty Body", status_code=400)

    content_type = request.headers.get("content-type", "")
    if content_type.split(";")[0].strip() != "application/json":
        LOG.warning("Content-Type=%s but expected application/json", content_type)
        return PlainTextResponse("Invalid Content-Type", status_code=415)

    try:
        admission_review = AdmissionReview.model_validate_json(body)
    except ValidationError as err:
        LOG.error("could not decode admission review: %s", err)
        return PlainTextResponse(f"Invalid request: {err}", status_code=400)

    if admission_review.request is None:
        return PlainTextResponse("Invalid request: missing request", status_code=400)

    resolver = request.app.state.resolver
    out = await run_in_threadpool(review, admission_review, resolver)
    req = admission_review.request
    LOG.info("processed admission review %s (%s %s/%s)", req.uid, req.operation, req.namespace, req.name)
    return JSONResponse(out)


def healthcheck():
    return {"status": "Healthy"}


def handle_decode_error(request: Request, err: DecodeError):
    LOG.error("%s %s: %s", request.method, request.url.path, err)
    return PlainTextResponse(str(err), status_code=500)


def create_app(resolver: SecretResolver = None, settings: Settings = None) -> fastapi.FastAPI:
    settings = settings or Settings.from_env()
    if resolver is None:
        resolver = SecretResolver(SecretsManagerStore.from_settings(settings))

    app = fastapi.FastAPI(title="secret-agent")
    app.state.resolver = resolver
    app.state.settings = settings

    app.add_exception_handler(DecodeError, handle_decode_error)
    app.add_api_route("/", healthcheck, methods=["GET"])
    app.add_api_route("/healthcheck", healthcheck, methods=["GET"])
    app.add_api_route(MUTATE_PATH, review_pod, methods=["POST"])
    return app


class Manager:

    def __init__(self, settings: Settings = None, app: fastapi.FastAPI = None):
        self._settings = settings or Settings.from_env()
        self._app = app

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def app(self) -> fastapi.FastAPI:
        if self._app is None:
            self._app = create_app(settings=self._settings)
        return self._app

    def _ca_bundle(self) -> typing.Optional[str]:
        if not self._settings.ca_bundle:
            return None
        with open(self._settings.ca_bundle, "rb") as f:
            return base64.b64encode(f.read()).decode()

    def webhook(self) -> V1MutatingWebhook:
        settings = self._settings
        return V1MutatingWebhook(
            name=settings.webhook_name,
            client_config=AdmissionregistrationV1WebhookClientConfig(
                service=AdmissionregistrationV1ServiceReference(
                    name=settings.service_name,
                    namespace=settings.service_namespace,
                    path=MUTATE_PATH,
                    port=443,
                ),
                ca_bundle=self._ca_bundle(),
            ),
            admission_review_versions=["v1"],
            side_effects="None",
            failure_policy="Fail",
            timeout_seconds=settings.timeout,
            rules=[
                V1RuleWithOperations(
                    api_groups=[""],
                    api_versions=["v1"],
                    resources=["pods"],
                    operations=[OPERATION_CREATE],
                ),
            ],
        )

    def manifest(self) -> str:
        webhook_config = V1MutatingWebhookConfiguration(
            api_version="admissionregistration.k8s.io/v1",
            kind="MutatingWebhookConfiguration",
            metadata=V1ObjectMeta(name=self._settings.service_name),
            webhooks=[self.webhook()],
        )
        return yaml.safe_dump(_serialize(webhook_config), default_flow_style=False)

    def start(self):
        settings = self._settings
        LOG.warning("starting secret-agent server on %s:%d", settings.host, settings.port)
        uvicorn.run(
            self.app,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
            ssl_certfile=settings.certfile,
            ssl_keyfile=settings.keyfile,
            timeout_keep_alive=settings.timeout,
            h11_max_incomplete_event_size=settings.max_header_bytes,
        )
