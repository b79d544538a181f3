from dataclasses import dataclass, field

from loguru import logger

from kubedyn.api.operations import Operations, Scope
from kubedyn.api.resource import ApiResource
from kubedyn.discovery.types import ApiResourceList
from kubedyn.errors import ResourceNotFoundError


@dataclass(frozen=True)
class ApiResourceExtras:
    """
    Detailed information about an API resource that is only available from discovery: its scope, its supported
    operations and its subresources.

    The #ApiResource of a subresource is not a standalone resource. Its #ApiResource.plural_name is the subresource
    name (e.g. `status`), not `pods/status`, which is what the request builder expects as subresource segment.
    """

    scope: Scope
    operations: Operations
    subresources: tuple[tuple[ApiResource, "ApiResourceExtras"], ...] = field(default_factory=tuple)

    def subresource_names(self) -> list[str]:
        return [resource.plural_name for resource, _ in self.subresources]

    @staticmethod
    def from_resource_list(resource_list: ApiResourceList, name: str) -> "ApiResourceExtras":
        """
        Resolve the resource named *name* in the flat *resource_list*, including its subresources. Every record named
        `{name}/...` is attached as a subresource whose plural name is the rest of its path, and is resolved
        recursively against the same list. For `a/b/c`, the resource `a` gets the subresource `b/c` and `a/b` gets
        `c`. The order of subresources follows the order of the list.

        Args:
            resource_list: All resources reported under one group-version.
            name: The exact name of the resource, as it appears in *resource_list*.
        Raises:
            ResourceNotFoundError: If *resource_list* contains no resource named *name*.
        """

        return _resolve(resource_list, name)


def _resolve(resource_list: ApiResourceList, name: str) -> ApiResourceExtras:
    record = resource_list.find(name)
    if record is None:
        raise ResourceNotFoundError(f"Resource {name!r} not found in {resource_list.group_version!r}")

    prefix = f"{name}/"
    visited: set[str] = set()
    subresources = []
    for child in resource_list.resources:
        if not child.name.startswith(prefix):
            continue
        segment = child.name[len(prefix) :]
        if not segment or child.name in visited:
            continue
        visited.add(child.name)
        resource = ApiResource.from_record(child, resource_list.group_version).with_plural_name(segment)
        subresources.append((resource, _resolve(resource_list, child.name)))

    logger.debug(
        "Resolved {!r} in {!r} with {} subresource(s)", name, resource_list.group_version, len(subresources)
    )
    return ApiResourceExtras(
        scope=Scope.from_namespaced(record.namespaced),
        operations=Operations.from_verbs(record.verbs),
        subresources=tuple(subresources),
    )
