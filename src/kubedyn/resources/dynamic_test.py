import json
from typing import Any

import pytest

from kubedyn.api.operations import Scope
from kubedyn.api.resource import ApiResource
from kubedyn.errors import UsageError
from kubedyn.resources import ObjectMeta
from kubedyn.resources.dynamic import DynamicObject, ObjectList, TypeMeta

FOO = ApiResource.from_gvk("clux.dev", "v1", "Foo")

DEPLOYMENT = {
    "apiVersion": "apps/v1",
    "kind": "Deployment",
    "metadata": {
        "name": "web",
        "namespace": "default",
        "labels": {"app": "web"},
        "annotations": {"deployment.kubernetes.io/revision": "3"},
        "resourceVersion": "123456",
        "managedFields": [{"manager": "kubectl", "operation": "Update", "fieldsV1": {"f:spec": {}}}],
    },
    "spec": {
        "replicas": 2,
        "selector": {"matchLabels": {"app": "web"}},
        "template": {"spec": {"containers": [{"name": "web", "image": "nginx:1.25", "ports": [{"containerPort": 80}]}]}},
    },
    "status": {"replicas": 2, "conditions": [{"type": "Available", "status": "True"}]},
    "x-unknown": None,
}


def test__DynamicObject__new() -> None:
    obj = DynamicObject.new("baz", FOO)
    assert obj.types == TypeMeta("clux.dev/v1", "Foo")
    assert obj.metadata == ObjectMeta(name="baz")
    assert obj.data == {}
    assert obj.dump() == {"apiVersion": "clux.dev/v1", "kind": "Foo", "metadata": {"name": "baz"}}


def test__DynamicObject__builders_return_fresh_values() -> None:
    base = DynamicObject.new("baz", FOO)
    payload: dict[str, Any] = {"spec": {"replicas": 1}}

    first = base.with_data(payload).with_namespace("a")
    second = base.with_namespace("b")

    assert base.metadata.namespace is None
    assert base.data == {}
    assert first.metadata.namespace == "a"
    assert first.data == {"spec": {"replicas": 1}}
    assert second.metadata.namespace == "b"
    assert second.data == {}

    # The payload is copied, so later changes to it don't leak into the object.
    payload["spec"]["replicas"] = 5
    assert first.data == {"spec": {"replicas": 1}}

    first.meta.labels = {"x": "y"}
    assert base.metadata.labels is None


def test__DynamicObject__with_data__rejects_envelope_keys() -> None:
    with pytest.raises(UsageError):
        DynamicObject.new("baz", FOO).with_data({"metadata": {}, "spec": {}})


def test__DynamicObject__round_trip() -> None:
    obj = DynamicObject.load(DEPLOYMENT)
    assert obj.types == TypeMeta("apps/v1", "Deployment")
    assert obj.metadata.name == "web"
    assert obj.metadata.resource_version == "123456"
    assert list(obj.data) == ["spec", "status", "x-unknown"]

    dumped = obj.dump()
    assert dumped == DEPLOYMENT
    assert list(dumped) == list(DEPLOYMENT)
    assert DynamicObject.load(json.loads(json.dumps(dumped))) == obj


def test__DynamicObject__load__does_not_alias_the_input() -> None:
    manifest = json.loads(json.dumps(DEPLOYMENT))
    obj = DynamicObject.load(manifest)
    manifest["spec"]["replicas"] = 10
    assert obj.data["spec"]["replicas"] == 2


def test__DynamicObject__without_type_information() -> None:
    obj = DynamicObject.load({"metadata": {"name": "x"}, "spec": {}})
    assert obj.types is None
    assert obj.dump() == {"metadata": {"name": "x"}, "spec": {}}
    assert "apiVersion" not in obj.dump()

    # Incomplete type information stays part of the payload.
    partial = DynamicObject.load({"kind": "Foo", "metadata": {}})
    assert partial.types is None
    assert partial.dump() == {"metadata": {}, "kind": "Foo"}


def test__DynamicObject__load__requires_metadata() -> None:
    with pytest.raises(ValueError):
        DynamicObject.load({"apiVersion": "v1", "kind": "Pod"})


def test__DynamicObject__interface_reads_from_descriptor() -> None:
    obj = DynamicObject.load(DEPLOYMENT)
    other = ApiResource(group="", version="v1", kind="Other", plural_name="others", scope=Scope.CLUSTER)
    assert type(obj).kind(other) == "Other"
    assert type(obj).plural(other) == "others"
    assert DynamicObject.api_resource(other) is other
    assert DynamicObject.url_path(other, "ignored") == "/api/v1/others"
    assert obj.name == "web"
    assert obj.namespace == "default"


def test__ObjectList__load() -> None:
    items = ObjectList.load(
        {
            "apiVersion": "v1",
            "kind": "PodList",
            "metadata": {"resourceVersion": "99", "continue": "token", "remainingItemCount": 3},
            "items": [
                {"metadata": {"name": "a", "namespace": "default"}, "spec": {}},
                {"metadata": {"name": "b", "namespace": "default"}, "spec": {}},
            ],
        }
    )
    assert items.metadata.resource_version == "99"
    assert items.metadata.continue_token == "token"
    assert items.metadata.remaining_item_count == 3
    assert len(items) == 2
    assert [item.name for item in items] == ["a", "b"]
    assert all(item.types is None for item in items)


def test__DynamicObject__round_trip__keeps_explicit_null_metadata() -> None:
    manifest = {
        "apiVersion": "clux.dev/v1",
        "kind": "Foo",
        "metadata": {"name": "x", "creationTimestamp": None},
        "spec": {"value": None},
    }
    assert DynamicObject.load(manifest).dump() == manifest
