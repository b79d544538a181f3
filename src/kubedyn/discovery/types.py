"""
Dataclasses for the discovery documents served by the Kubernetes API server. These are the raw bodies that the
transport hands to kubedyn; unknown keys are ignored as servers add fields over time.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any

from databind.core import Alias, ExtraKeys
from databind.json import load as deser


@ExtraKeys()
@dataclass
class ApiResourceRecord:
    """
    A single entry in an `APIResourceList`. Subresources are listed as separate entries named `parent/subresource`.

        {
          "name": "deployments",
          "singularName": "deployment",
          "namespaced": true,
          "kind": "Deployment",
          "verbs": ["create", "delete", "deletecollection", "get", "list", "patch", "update", "watch"],
          "shortNames": ["deploy"],
          "categories": ["all"],
          "storageVersionHash": "8aSe+NMegvE="
        }
    """

    name: str
    namespaced: bool
    kind: str
    verbs: list[str] = field(default_factory=list)

    group: str | None = None
    """
    Only set if the resource belongs to a different group than the list it is reported in.
    """

    version: str | None = None
    """
    Only set if the resource belongs to a different version than the list it is reported in.
    """

    singular_name: Annotated[str, Alias("singularName")] = ""
    short_names: Annotated[list[str], Alias("shortNames")] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    storage_version_hash: Annotated[str | None, Alias("storageVersionHash")] = None

    @staticmethod
    def load(data: Mapping[str, Any]) -> "ApiResourceRecord":
        return deser(data, ApiResourceRecord)


@ExtraKeys()
@dataclass
class ApiResourceList:
    """
    The body of `GET /api/v1` or `GET /apis/{group}/{version}`.
    """

    group_version: Annotated[str, Alias("groupVersion")]
    resources: list[ApiResourceRecord] = field(default_factory=list)

    @staticmethod
    def load(data: Mapping[str, Any], filename: str | None = None) -> "ApiResourceList":
        return deser(data, ApiResourceList, filename=filename)

    def find(self, name: str) -> ApiResourceRecord | None:
        """
        Return the record with exactly the given *name*, if any.
        """

        for record in self.resources:
            if record.name == name:
                return record
        return None


@ExtraKeys()
@dataclass
class ApiGroupVersion:
    group_version: Annotated[str, Alias("groupVersion")]
    version: str


@ExtraKeys()
@dataclass
class ApiGroupRecord:
    """
    A single entry in an `APIGroupList`.
    """

    name: str
    versions: list[ApiGroupVersion] = field(default_factory=list)
    preferred_version: Annotated[ApiGroupVersion | None, Alias("preferredVersion")] = None


@ExtraKeys()
@dataclass
class ApiGroupList:
    """
    The body of `GET /apis`.
    """

    groups: list[ApiGroupRecord] = field(default_factory=list)

    @staticmethod
    def load(data: Mapping[str, Any]) -> "ApiGroupList":
        return deser(data, ApiGroupList)


@ExtraKeys()
@dataclass
class ApiVersions:
    """
    The body of `GET /api`, listing the versions of the core group.
    """

    versions: list[str] = field(default_factory=list)

    @staticmethod
    def load(data: Mapping[str, Any]) -> "ApiVersions":
        return deser(data, ApiVersions)


@ExtraKeys()
@dataclass
class ServerVersion:
    """
    The body of `GET /version`.
    """

    major: str = ""
    minor: str = ""
    git_version: Annotated[str, Alias("gitVersion")] = ""
    git_commit: Annotated[str, Alias("gitCommit")] = ""
    git_tree_state: Annotated[str, Alias("gitTreeState")] = ""
    build_date: Annotated[str, Alias("buildDate")] = ""
    go_version: Annotated[str, Alias("goVersion")] = ""
    compiler: str = ""
    platform: str = ""

    @staticmethod
    def load(data: Mapping[str, Any]) -> "ServerVersion":
        return deser(data, ServerVersion)

    @property
    def semver(self) -> tuple[int, int]:
        """
        The major and minor version as integers. Managed offerings report the minor version with a suffix, e.g.
        `"28+"`, which is stripped.
        """

        return int(self.major.rstrip("+")), int(self.minor.rstrip("+"))
