import copy

import pytest

from secretagent.exceptions import StoreUnavailable
from secretagent.resolver import SecretResolver


SECRETS = {
    "/path/to/secret": {"key": "s3cr3t", "port": 5432},
    "/db/credentials": {"username": "admin", "password": "hunter2"},
    "plaintext": "not a document",
}


class FakeStore:

    def __init__(self, secrets=None):
        self.secrets = copy.deepcopy(SECRETS if secrets is None else secrets)
        self.calls = []

    def fetch(self, location):
        self.calls.append(location)
        try:
            return self.secrets[location]
        except KeyError:
            raise StoreUnavailable(f"secret {location} not found")


def pod_with(*containers):
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {"generateName": "app-6c54bd5869-", "namespace": "dummy"},
        "spec": {
            "containers": [
                {"name": f"c{i}", "image": "nginx:1.7.9", **({"env": env} if env is not None else {})}
                for i, env in enumerate(containers)
            ],
            "restartPolicy": "Always",
        },
    }


def review_for(pod, uid="0df28fbd-5f5f-11e8-bc74-36e6bb280816"):
    return {
        "kind": "AdmissionReview",
        "apiVersion": "admission.k8s.io/v1",
        "request": {
            "uid": uid,
            "kind": {"group": "", "version": "v1", "kind": "Pod"},
            "resource": {"group": "", "version": "v1", "resource": "pods"},
            "namespace": "dummy",
            "operation": "CREATE",
            "userInfo": {
                "username": "system:serviceaccount:kube-system:replicaset-controller",
                "uid": "a7e0ab33-5f29-11e8-8a3c-36e6bb280816",
                "groups": ["system:serviceaccounts", "system:authenticated"],
            },
            "object": pod,
            "oldObject": None,
        },
    }


@pytest.fixture()
def store():
    return FakeStore()


@pytest.fixture()
def resolver(store):
    return SecretResolver(store)


@pytest.fixture()
def make_pod():
    return pod_with


@pytest.fixture()
def make_review():
    return review_for


@pytest.fixture()
def no_aws_config(monkeypatch, tmp_path):
    for name in ("AWS_DEFAULT_REGION", "AWS_REGION", "AWS_PROFILE", "AWS_DEFAULT_PROFILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "missing-config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "missing-credentials"))
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")
