import pytest

from kubedyn.api.operations import Scope
from kubedyn.api.resource import GroupVersionKind
from kubedyn.discovery.group import ApiGroup, Discovery, resource_list_path, resource_list_paths
from kubedyn.discovery.types import ApiGroupList, ApiResourceList, ApiVersions, ServerVersion

API_VERSIONS = ApiVersions.load(
    {"kind": "APIVersions", "versions": ["v1"], "serverAddressByClientCIDRs": [{"clientCIDR": "0.0.0.0/0"}]}
)

GROUP_LIST = ApiGroupList.load(
    {
        "kind": "APIGroupList",
        "apiVersion": "v1",
        "groups": [
            {
                "name": "apps",
                "versions": [{"groupVersion": "apps/v1", "version": "v1"}],
                "preferredVersion": {"groupVersion": "apps/v1", "version": "v1"},
            },
            {
                "name": "clux.dev",
                "versions": [
                    {"groupVersion": "clux.dev/v2", "version": "v2"},
                    {"groupVersion": "clux.dev/v1", "version": "v1"},
                ],
            },
        ],
    }
)

RESOURCE_LISTS = [
    ApiResourceList.load(
        {
            "groupVersion": "v1",
            "resources": [
                {"name": "namespaces", "namespaced": False, "kind": "Namespace", "verbs": ["get", "list"]},
                {"name": "namespaces/status", "namespaced": False, "kind": "Namespace", "verbs": ["get"]},
                {"name": "services", "namespaced": True, "kind": "Service", "verbs": ["get", "list"]},
            ],
        }
    ),
    ApiResourceList.load(
        {
            "groupVersion": "apps/v1",
            "resources": [
                {"name": "deployments", "namespaced": True, "kind": "Deployment", "verbs": ["get", "list"]},
                {"name": "deployments/scale", "namespaced": True, "kind": "Scale", "group": "autoscaling",
                 "version": "v1", "verbs": ["get", "patch", "update"]},
                {"name": "deployments/status", "namespaced": True, "kind": "Deployment", "verbs": ["get"]},
            ],
        }
    ),
    ApiResourceList.load(
        {
            "groupVersion": "clux.dev/v1",
            "resources": [{"name": "foos", "namespaced": True, "kind": "Foo", "verbs": ["get"]}],
        }
    ),
    ApiResourceList.load({"groupVersion": "unknown.io/v1", "resources": []}),
]


def test__resource_list_path() -> None:
    assert resource_list_path("v1") == "/api/v1"
    assert resource_list_path("apps/v1") == "/apis/apps/v1"


def test__resource_list_paths() -> None:
    assert resource_list_paths(API_VERSIONS, GROUP_LIST) == [
        "/api/v1",
        "/apis/apps/v1",
        "/apis/clux.dev/v2",
        "/apis/clux.dev/v1",
    ]


def test__ApiGroup__preferred_version_or_guess() -> None:
    discovery = Discovery.from_documents(API_VERSIONS, GROUP_LIST, RESOURCE_LISTS)
    assert discovery.get("apps").preferred_version_or_guess() == "v1"  # type: ignore[union-attr]
    assert discovery.get("clux.dev").preferred_version_or_guess() == "v2"  # type: ignore[union-attr]
    assert discovery.get("").preferred_version_or_guess() == "v1"  # type: ignore[union-attr]

    with pytest.raises(ValueError):
        ApiGroup(name="empty.io", versions=()).preferred_version_or_guess()


def test__ApiGroup__resources_by_version() -> None:
    group = ApiGroup.from_record(GROUP_LIST.groups[0], RESOURCE_LISTS)
    assert group.versions == ("v1",)

    resources = group.resources_by_version("v1")
    assert len(resources) == 1
    deployment, extras = resources[0]
    assert deployment.api_version == "apps/v1"
    assert deployment.plural_name == "deployments"
    assert deployment.subresources == ("scale", "status")
    assert extras.scope == Scope.NAMESPACED

    scale, _ = extras.subresources[0]
    assert scale.api_version == "autoscaling/v1"
    assert scale.kind == "Scale"

    assert group.resources_by_version("v2") == []


def test__ApiGroup__core() -> None:
    group = ApiGroup.core(API_VERSIONS, RESOURCE_LISTS)
    assert group.name == ""
    assert [resource.plural_name for resource, _ in group.recommended_resources()] == ["namespaces", "services"]
    namespace, extras = group.recommended_resources()[0]
    assert namespace.scope == Scope.CLUSTER
    assert namespace.subresources == ("status",)


def test__Discovery() -> None:
    discovery = Discovery.from_documents(API_VERSIONS, GROUP_LIST, RESOURCE_LISTS)
    assert [group.name for group in discovery.groups()] == ["", "apps", "clux.dev"]
    assert discovery.has_group("apps")
    assert not discovery.has_group("unknown.io")

    found = discovery.resolve_gvk(GroupVersionKind("clux.dev", "v1", "Foo"))
    assert found is not None
    assert found[0].plural_name == "foos"

    # v2 is listed but no resource list was supplied for it.
    assert discovery.resolve_gvk(GroupVersionKind("clux.dev", "v2", "Foo")) is None
    assert discovery.resolve_gvk(GroupVersionKind("batch", "v1", "Job")) is None


def test__ServerVersion__load() -> None:
    version = ServerVersion.load(
        {
            "major": "1",
            "minor": "28+",
            "gitVersion": "v1.28.3-eks-4f4795d",
            "gitCommit": "8cb2a2e6f5d7c4a1b0d5f2c9c0e8d1b4a6f3e2d1",
            "gitTreeState": "clean",
            "buildDate": "2023-10-20T23:21:29Z",
            "goVersion": "go1.20.10",
            "compiler": "gc",
            "platform": "linux/amd64",
            "emulationMajor": "1",
        }
    )
    assert version.git_version == "v1.28.3-eks-4f4795d"
    assert version.semver == (1, 28)
