import typing
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, constr


class AdmissionRequest(BaseModel):
    uid: constr(min_length=1)
    namespace: Optional[str] = None
    name: Optional[str] = None
    operation: Optional[str] = None
    # decoded lazily by the mutation engine
    object: typing.Any = None


class AdmissionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uid: str
    allowed: bool
    patch: Optional[str] = None
    patch_type: Optional[str] = Field(None, alias="patchType")
    warnings: Optional[List[str]] = None


class AdmissionReview(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: str = "AdmissionReview"
    api_version: str = Field("admission.k8s.io/v1", alias="apiVersion")
    request: Optional[AdmissionRequest] = None
    response: Optional[AdmissionResponse] = None


class EnvVar(BaseModel):
    name: str
    # unset when the variable uses valueFrom
    value: Optional[str] = None


class Container(BaseModel):
    name: str
    env: Optional[List[EnvVar]] = None


class PodSpec(BaseModel):
    containers: List[Container] = []


class ObjectMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    generate_name: Optional[str] = Field(None, alias="generateName")
    namespace: Optional[str] = None


class Pod(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_version: Optional[str] = Field(None, alias="apiVersion")
    kind: Optional[str] = None
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: PodSpec = Field(default_factory=PodSpec)

    @property
    def display_name(self) -> str:
        return self.metadata.name or self.metadata.generate_name or "<unnamed>"


class PatchOperation(BaseModel):
    op: typing.Literal["replace"] = "replace"
    path: str
    value: str
