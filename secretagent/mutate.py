import logging
import typing

from pydantic import ValidationError

from secretagent import responses
from secretagent.exceptions import DecodeError, MalformedReference, ResolveError
from secretagent.patch import build_patch
from secretagent.reference import is_reference, parse_reference
from secretagent.resolver import SecretResolver
from secretagent.types import AdmissionRequest, AdmissionResponse, AdmissionReview, PatchOperation, Pod

LOG = logging.getLogger(__name__)


class Failure(typing.NamedTuple):
    container: str
    env: str
    error: Exception

    def __str__(self):
        return f"container {self.container} env {self.env}: {self.error}"


class ScanResult(typing.NamedTuple):
    patches: typing.List[PatchOperation]
    failures: typing.List[Failure]


def decode_pod(raw) -> Pod:
    try:
        if isinstance(raw, (bytes, str)):
            pod = Pod.model_validate_json(raw)
        else:
            pod = Pod.model_validate(raw)
    except ValidationError as err:
        raise DecodeError(f"could not decode pod: {err}") from err

    if pod.kind is not None and pod.kind != "Pod":
        raise DecodeError(f"expected a Pod, got {pod.kind}")
    return pod


def scan(pod: Pod, resolver: SecretResolver) -> ScanResult:
    patches, failures = [], []
    for i, container in enumerate(pod.spec.containers):
        if not container.env:
            LOG.debug("container %s has no env, nothing to do", container.name)
            continue

        for j, env in enumerate(container.env):
            if not is_reference(env.value):
                continue

            LOG.info("processing %s in container %s", env.name, container.name)
            try:
                ref = parse_reference(env.value)
                value = resolver.resolve(ref.location, ref.field)
            except (MalformedReference, ResolveError) as err:
                LOG.warning("leaving %s in container %s unresolved: %s", env.name, container.name, err)
                failures.append(Failure(container.name, env.name, err))
                continue

            patches.append(build_patch(value, i, j))

    return ScanResult(patches, failures)


def mutate(request: AdmissionRequest, resolver: SecretResolver) -> AdmissionResponse:
    """
    Replace every resolvable secret reference in the pod's container env.

    The response is always allowed: references that fail to parse or resolve
    are left untouched and reported as warnings.

    :raises DecodeError: the request does not carry a readable pod
    """
    pod = decode_pod(request.object)
    result = scan(pod, resolver)

    warnings = [f"secret reference not injected, {failure}" for failure in result.failures]
    if not result.patches:
        LOG.info("no patches required for pod %s", pod.display_name)
    else:
        LOG.info("applying %d patch(es) to pod %s", len(result.patches), pod.display_name)
    return responses.patch(request.uid, result.patches, warnings)


def review(admission_review: AdmissionReview, resolver: SecretResolver) -> dict:
    response = mutate(admission_review.request, resolver)
    return responses.review(admission_review, response)
