import typing

from secretagent import patch as jsonpatches
from secretagent.types import AdmissionResponse, AdmissionReview, PatchOperation


def _response(admission_review: AdmissionReview) -> dict:
    return admission_review.model_dump(by_alias=True, exclude_none=True)


def allowed(uid: str, warnings: typing.List[str] = None) -> AdmissionResponse:
    return AdmissionResponse(
        allowed=True,
        uid=uid,
        warnings=warnings or None,
    )


def patch(uid: str, patches: typing.List[PatchOperation], warnings: typing.List[str] = None) -> AdmissionResponse:
    """
    :param uid: the correlation id of the request
    :param patches: replace operations, in (container, env) order
    :param warnings: messages shown to the client, if any
    :return: an allowed response carrying the encoded patch and its type
    """
    if not patches:
        return allowed(uid, warnings)

    return AdmissionResponse(
        allowed=True,
        uid=uid,
        patch=jsonpatches.serialize(patches),
        patch_type=jsonpatches.PATCH_TYPE,
        warnings=warnings or None,
    )


def review(admission_review: AdmissionReview, response: AdmissionResponse) -> dict:
    out = AdmissionReview(
        kind=admission_review.kind,
        api_version=admission_review.api_version,
        response=response,
    )
    return _response(out)
