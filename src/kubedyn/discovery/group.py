from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from loguru import logger

from kubedyn.api.resource import ApiResource, GroupVersionKind, join_group_version, split_group_version
from kubedyn.discovery.extras import ApiResourceExtras
from kubedyn.discovery.types import ApiGroupList, ApiGroupRecord, ApiResourceList, ApiVersions

CORE_GROUP = ""
""" The name of the core API group, whose resources are served under `/api`. """


def resource_list_path(group_version: str) -> str:
    """
    The path that serves the `APIResourceList` for *group_version*.
    """

    group, version = split_group_version(group_version)
    return f"/apis/{group}/{version}" if group else f"/api/{version}"


def resource_list_paths(api_versions: ApiVersions, group_list: ApiGroupList) -> list[str]:
    """
    The paths of all `APIResourceList`s that must be fetched to build a #Discovery. Each of them is independent, so
    the caller may fetch them in parallel.
    """

    paths = [resource_list_path(version) for version in api_versions.versions]
    for group in group_list.groups:
        paths.extend(resource_list_path(version.group_version) for version in group.versions)
    return paths


def top_level_resources(resource_list: ApiResourceList) -> list[tuple[ApiResource, ApiResourceExtras]]:
    """
    Resolve every top-level resource in *resource_list* with its discovery details. The returned descriptors have
    their #ApiResource.subresources populated.
    """

    result = []
    for record in resource_list.resources:
        if "/" in record.name:
            continue
        extras = ApiResourceExtras.from_resource_list(resource_list, record.name)
        resource = ApiResource.from_record(record, resource_list.group_version)
        result.append((resource.with_subresources(extras.subresource_names()), extras))
    return result


@dataclass(frozen=True)
class ApiGroup:
    """
    Describes one API group together with the resources it serves in each of its versions.
    """

    name: str
    versions: tuple[str, ...]
    """
    The versions of the group, in the order reported by the server. The server reports the most preferred version
    first.
    """

    preferred_version: str | None = None
    resource_lists: Mapping[str, ApiResourceList] = field(default_factory=lambda: MappingProxyType({}))
    """
    Maps versions of the group to the resources listed for them. Versions for which no list was supplied serve
    nothing as far as this object knows.
    """

    @staticmethod
    def from_record(record: ApiGroupRecord, resource_lists: Iterable[ApiResourceList]) -> "ApiGroup":
        """
        Create an #ApiGroup from an `/apis` entry and the resource lists fetched for it. Lists that belong to other
        groups are ignored.
        """

        by_version = _lists_by_version(record.name, resource_lists)
        return ApiGroup(
            name=record.name,
            versions=tuple(version.version for version in record.versions),
            preferred_version=record.preferred_version.version if record.preferred_version else None,
            resource_lists=MappingProxyType(by_version),
        )

    @staticmethod
    def core(api_versions: ApiVersions, resource_lists: Iterable[ApiResourceList]) -> "ApiGroup":
        """
        Create the #ApiGroup of the core group from the `/api` body and the resource lists fetched for it.
        """

        by_version = _lists_by_version(CORE_GROUP, resource_lists)
        versions = tuple(api_versions.versions)
        return ApiGroup(
            name=CORE_GROUP,
            versions=versions,
            preferred_version=versions[0] if versions else None,
            resource_lists=MappingProxyType(by_version),
        )

    def preferred_version_or_guess(self) -> str:
        """
        The preferred version of the group. If the server did not report one, the first version is assumed.
        """

        if self.preferred_version is not None:
            return self.preferred_version
        if not self.versions:
            raise ValueError(f"API group {self.name!r} has no versions")
        return self.versions[0]

    def resources_by_version(self, version: str) -> list[tuple[ApiResource, ApiResourceExtras]]:
        """
        Returns every top-level resource served in *version* with its discovery details. The returned descriptors
        have their #ApiResource.subresources populated.
        """

        resource_list = self.resource_lists.get(version)
        if resource_list is None:
            return []
        return top_level_resources(resource_list)

    def recommended_resources(self) -> list[tuple[ApiResource, ApiResourceExtras]]:
        """
        Returns the resources in the preferred version of the group.
        """

        return self.resources_by_version(self.preferred_version_or_guess())


def _lists_by_version(group: str, resource_lists: Iterable[ApiResourceList]) -> dict[str, ApiResourceList]:
    by_version = {}
    for resource_list in resource_lists:
        list_group, version = split_group_version(resource_list.group_version)
        if list_group == group:
            by_version[version] = resource_list
    return by_version


class Discovery:
    """
    A read-only view of the API groups served by a cluster, built from discovery documents that the caller fetched.
    Use #resource_list_paths() to find out which documents are needed.
    """

    def __init__(self, groups: Iterable[ApiGroup]) -> None:
        self._groups = {group.name: group for group in groups}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} groups={list(self._groups)!r}>"

    @staticmethod
    def from_documents(
        api_versions: ApiVersions,
        group_list: ApiGroupList,
        resource_lists: Iterable[ApiResourceList],
    ) -> "Discovery":
        """
        Build a #Discovery from the bodies of `/api`, `/apis` and the resource lists of every group-version.
        """

        resource_lists = list(resource_lists)
        groups = [ApiGroup.core(api_versions, resource_lists)]
        groups.extend(ApiGroup.from_record(record, resource_lists) for record in group_list.groups)

        known = {join_group_version(group.name, version) for group in groups for version in group.versions}
        for resource_list in resource_lists:
            if resource_list.group_version not in known:
                logger.debug("Ignoring resource list for unknown group-version {!r}", resource_list.group_version)

        return Discovery(groups)

    def groups(self) -> Iterator[ApiGroup]:
        return iter(self._groups.values())

    def has_group(self, name: str) -> bool:
        return name in self._groups

    def get(self, name: str) -> ApiGroup | None:
        return self._groups.get(name)

    def resolve_gvk(self, gvk: GroupVersionKind) -> tuple[ApiResource, ApiResourceExtras] | None:
        """
        Find the top-level resource that serves objects of the given kind.
        """

        group = self._groups.get(gvk.group)
        if group is None:
            return None
        for resource, extras in group.resources_by_version(gvk.version):
            if resource.kind == gvk.kind:
                return resource, extras
        return None
