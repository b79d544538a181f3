from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Any

from loguru import logger

from kubedyn.api.operations import Operations, Scope, Verb
from kubedyn.discovery.types import ApiResourceRecord
from kubedyn.errors import UnsupportedOperationError, UsageError


def split_group_version(group_version: str) -> tuple[str, str]:
    """
    Split a group-version string into its group and version. The core group has no group segment, so `"v1"` becomes
    `("", "v1")` while `"apps/v1"` becomes `("apps", "v1")`.

    Raises:
        UsageError: If the string has more than one `/` or no version.
    """

    parts = group_version.split("/")
    if len(parts) == 1:
        group, version = "", parts[0]
    elif len(parts) == 2:
        group, version = parts
    else:
        raise UsageError(f"Malformed group-version {group_version!r}: expected at most one '/'")
    if not version:
        raise UsageError(f"Malformed group-version {group_version!r}: missing version")
    return group, version


def join_group_version(group: str, version: str) -> str:
    """
    The inverse of #split_group_version().
    """

    return f"{group}/{version}" if group else version


def to_plural(word: str) -> str:
    """
    Pluralize a lower-cased kind with a simple English suffix rule. This is a best-effort heuristic that gets
    irregular plurals wrong; the API server is the authority on a resource's plural name.
    """

    if word.endswith(("s", "x", "ch", "sh")):
        return word + "es"
    if len(word) > 1 and word.endswith("y") and word[-2] not in "aeiou":
        return word[:-1] + "ies"
    return word + "s"


@dataclass(frozen=True)
class GroupVersionKind:
    """
    Identifies a kind of object within an API group and version.
    """

    group: str
    version: str
    kind: str

    @property
    def api_version(self) -> str:
        return join_group_version(self.group, self.version)

    @staticmethod
    def from_api_version(api_version: str, kind: str) -> "GroupVersionKind":
        """
        Create a #GroupVersionKind from the `apiVersion` and `kind` fields of an object.
        """

        group, version = split_group_version(api_version)
        return GroupVersionKind(group, version, kind)

    def __str__(self) -> str:
        return f"{self.kind}.{self.api_version}"


@dataclass(frozen=True)
class ApiResource:
    """
    Describes a REST resource served by the API server, and everything that is needed to build requests for it.

    The `apiVersion` is not a field but always derived from #group and #version, so the two can never disagree.
    Prefer #from_record() to create instances from discovery data. #from_gvk() has to guess some of the
    information.
    """

    group: str
    """
    The API group; an empty string for the core group.
    """

    version: str
    kind: str
    """
    Singular PascalCase name of the object type.
    """

    plural_name: str
    """
    The lowercase plural name that is used as path segment. For subresources this is the subresource name.
    """

    scope: Scope = Scope.NAMESPACED
    subresources: tuple[str, ...] = field(default_factory=tuple)
    """
    Names of the known subresources. Only populated when the descriptor was derived from full discovery data.
    """

    operations: Operations = field(default_factory=Operations.all)

    @property
    def api_version(self) -> str:
        return join_group_version(self.group, self.version)

    @property
    def gvk(self) -> GroupVersionKind:
        return GroupVersionKind(self.group, self.version, self.kind)

    @property
    def namespaced(self) -> bool:
        return self.scope == Scope.NAMESPACED

    @staticmethod
    def from_record(record: ApiResourceRecord | dict[str, Any], group_version: str) -> "ApiResource":
        """
        Create an #ApiResource from a record of an `APIResourceList`. This is the recommended way to create
        descriptors; every field except #subresources is set from what the server reported.

        Args:
            record: The resource record, or its raw JSON representation.
            group_version: The `groupVersion` of the list that the record was reported in. The record's own `group`
                and `version` take precedence if set.
        Raises:
            UsageError: If *group_version* is malformed.
        """

        if not isinstance(record, ApiResourceRecord):
            record = ApiResourceRecord.load(record)

        default_group, default_version = split_group_version(group_version)
        return ApiResource(
            group=default_group if record.group is None else record.group,
            version=default_version if record.version is None else record.version,
            kind=record.kind,
            plural_name=record.name,
            scope=Scope.from_namespaced(record.namespaced),
            subresources=(),
            operations=Operations.from_verbs(record.verbs),
        )

    @staticmethod
    def from_gvk(group: str | GroupVersionKind, version: str | None = None, kind: str | None = None) -> "ApiResource":
        """
        Create an #ApiResource from a group, version and kind.

        !!! warning

            This has to **guess** information that only the server knows. Requests built from the result may be
            rejected by the server if a guess is wrong:

            * the plural name is derived from the kind with #to_plural()
            * the scope is assumed to be namespaced
            * the subresources are assumed to be `["status"]`
            * all standard verbs are assumed to be supported

        Raises:
            UsageError: If *version* and *kind* are missing for a plain group, or passed with a #GroupVersionKind.
        """

        if isinstance(group, GroupVersionKind):
            if version is not None or kind is not None:
                raise UsageError("version and kind must not be passed together with a GroupVersionKind")
            gvk = group
        else:
            if version is None or kind is None:
                raise UsageError("version and kind are required when passing a group")
            gvk = GroupVersionKind(group, version, kind)

        plural_name = to_plural(gvk.kind.lower())
        logger.debug("Guessing resource for {}: plural={!r}, scope=Namespaced", gvk, plural_name)
        return ApiResource(
            group=gvk.group,
            version=gvk.version,
            kind=gvk.kind,
            plural_name=plural_name,
            scope=Scope.NAMESPACED,
            subresources=("status",),
            operations=Operations.all(),
        )

    def with_plural_name(self, plural_name: str) -> "ApiResource":
        return replace(self, plural_name=plural_name)

    def with_subresources(self, subresources: Iterable[str]) -> "ApiResource":
        return replace(self, subresources=tuple(subresources))

    def supports(self, verb: Verb | str) -> bool:
        return self.operations.supports(verb)

    def ensure_supported(self, verb: Verb | str) -> None:
        """
        Pre-flight check that the resource supports *verb*.

        Raises:
            UnsupportedOperationError: If it does not.
        """

        if not self.supports(verb):
            name = f"{self.plural_name}.{self.group}" if self.group else self.plural_name
            raise UnsupportedOperationError(name, verb.value if isinstance(verb, Verb) else verb)
