import base64

import jsonpatch

from secretagent.types import PatchOperation

PATCH_TYPE = "JSONPatch"


def env_value_path(container_index: int, env_index: int) -> str:
    return f"/spec/containers/{container_index}/env/{env_index}/value"


def build_patch(value: str, container_index: int, env_index: int) -> PatchOperation:
    if container_index < 0 or env_index < 0:
        raise ValueError(f"negative index ({container_index}, {env_index})")
    return PatchOperation(path=env_value_path(container_index, env_index), value=value)


def to_json_patch(patches) -> jsonpatch.JsonPatch:
    return jsonpatch.JsonPatch([p.model_dump() for p in patches])


def serialize(patches) -> str:
    """
    :param patches: ordered PatchOperations
    :return: the JSON Patch document, base64 encoded for an AdmissionResponse
    """
    return base64.b64encode(to_json_patch(patches).to_string().encode()).decode()
