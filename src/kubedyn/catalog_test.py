from pathlib import Path

import pytest

from kubedyn.api.operations import Scope
from kubedyn.api.resource import GroupVersionKind
from kubedyn.catalog import Catalog, CatalogConfig

CATALOG_YAML = """
resourceLists:
  - groupVersion: v1
    resources:
      - {name: nodes, namespaced: false, kind: Node, verbs: [get, list, watch]}
      - {name: nodes/status, namespaced: false, kind: Node, verbs: [get, patch]}
  - groupVersion: example.com/v1
    resources:
      - {name: octopi, namespaced: true, kind: Octopus, verbs: [get, list]}
---
# Output of `kubectl get --raw /apis/apps/v1`
{"kind": "APIResourceList", "apiVersion": "v1", "groupVersion": "apps/v1",
 "resources": [{"name": "deployments", "namespaced": true, "kind": "Deployment", "verbs": ["get"]}]}
"""


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    file = tmp_path / CatalogConfig.FILENAMES[0]
    file.write_text(CATALOG_YAML)
    return file


def test__CatalogConfig__load(catalog_file: Path) -> None:
    config = CatalogConfig.load(catalog_file)
    assert config.file == catalog_file
    assert [rl.group_version for rl in config.catalog.resource_lists] == ["v1", "example.com/v1", "apps/v1"]


def test__CatalogConfig__load__searches_parent_directories(
    catalog_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    subdir = catalog_file.parent / "a" / "b"
    subdir.mkdir(parents=True)
    monkeypatch.chdir(subdir)
    assert CatalogConfig.load().file == catalog_file


def test__CatalogConfig__load__finds_json_catalog(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    file = tmp_path / "kubedyn-catalog.json"
    file.write_text('{"groupVersion": "batch/v1", "resources": [{"name": "jobs", "namespaced": true, "kind": "Job"}]}')
    monkeypatch.chdir(tmp_path)

    config = CatalogConfig.load()
    assert config.file == file
    job = config.catalog.resolve(GroupVersionKind("batch", "v1", "Job"))
    assert job.plural_name == "jobs"
    assert job.operations.verbs() == []


def test__CatalogConfig__load__without_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    config = CatalogConfig.load()
    assert config.file is None
    assert config.catalog == Catalog()


def test__Catalog__resources(catalog_file: Path) -> None:
    catalog = CatalogConfig.load(catalog_file).catalog
    names = [resource.plural_name for resource, _ in catalog.resources()]
    assert names == ["nodes", "octopi", "deployments"]

    nodes, extras = catalog.resources("v1")[0]
    assert nodes.scope == Scope.CLUSTER
    assert nodes.subresources == ("status",)
    assert extras.operations.watch


def test__Catalog__resolve(catalog_file: Path) -> None:
    catalog = CatalogConfig.load(catalog_file).catalog

    # The catalog knows the irregular plural.
    octopus = catalog.resolve(GroupVersionKind("example.com", "v1", "Octopus"))
    assert octopus.plural_name == "octopi"

    # Unknown kinds are guessed.
    guessed = catalog.resolve(GroupVersionKind("example.com", "v1", "Squid"))
    assert guessed.plural_name == "squids"
    assert guessed.scope == Scope.NAMESPACED
    assert catalog.find(GroupVersionKind("example.com", "v1", "Squid")) is None
