"""
Parameters that configure the requests built by #kubedyn.api.request.Request.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, ClassVar, cast

from databind.core import Alias, SerializeDefaults
from databind.json import dump as ser

from kubedyn.errors import UsageError

Query = list[tuple[str, str]]

MAX_FIELD_MANAGER_LENGTH = 128
MAX_WATCH_TIMEOUT = 295
""" The API server closes watches after at most this many seconds, so a longer timeout can never be honored. """

DEFAULT_WATCH_TIMEOUT = 290


def to_json_bytes(value: Any) -> bytes:
    """
    Serialize a request body. Objects with a `dump()` method (resources) are dumped first.
    """

    if hasattr(value, "dump"):
        value = value.dump()
    return json.dumps(value).encode()


def _check_field_manager(field_manager: str | None) -> None:
    if field_manager is not None and len(field_manager) > MAX_FIELD_MANAGER_LENGTH:
        raise UsageError(f"Field manager must be at most {MAX_FIELD_MANAGER_LENGTH} characters long")


@dataclass(frozen=True)
class ListParams:
    """
    Parameters for list, watch and delete-collection requests.
    """

    label_selector: str | None = None
    field_selector: str | None = None
    timeout: int | None = None
    """
    Timeout in seconds for the request. For watches it is capped by the server, see #MAX_WATCH_TIMEOUT.
    """

    limit: int | None = None
    continue_token: str | None = None
    """
    The continue token of a previous paginated list response.
    """

    allow_bookmarks: bool = False
    """
    Ask the server to send bookmark events while watching.
    """

    def _selectors(self) -> Query:
        query: Query = []
        if self.field_selector:
            query.append(("fieldSelector", self.field_selector))
        if self.label_selector:
            query.append(("labelSelector", self.label_selector))
        return query

    def list_query(self) -> Query:
        query = self._selectors()
        if self.timeout is not None:
            query.append(("timeoutSeconds", str(self.timeout)))
        if self.limit is not None:
            query.append(("limit", str(self.limit)))
        if self.continue_token is not None:
            query.append(("continue", self.continue_token))
        return query

    def watch_query(self, resource_version: str) -> Query:
        """
        Raises:
            UsageError: If the timeout is not below #MAX_WATCH_TIMEOUT.
        """

        if self.timeout is not None and self.timeout >= MAX_WATCH_TIMEOUT:
            raise UsageError(f"Watch timeout must be below {MAX_WATCH_TIMEOUT} seconds, got {self.timeout}")

        query: Query = [("watch", "true"), ("resourceVersion", resource_version)]
        query.append(("timeoutSeconds", str(DEFAULT_WATCH_TIMEOUT if self.timeout is None else self.timeout)))
        query.extend(self._selectors())
        if self.allow_bookmarks:
            query.append(("allowWatchBookmarks", "true"))
        return query


@dataclass(frozen=True)
class PostParams:
    """
    Parameters for create and replace requests.
    """

    dry_run: bool = False
    field_manager: str | None = None

    def query(self) -> Query:
        _check_field_manager(self.field_manager)
        query: Query = []
        if self.dry_run:
            query.append(("dryRun", "All"))
        if self.field_manager is not None:
            query.append(("fieldManager", self.field_manager))
        return query


@dataclass(frozen=True)
class Patch:
    """
    A patch document together with the strategy the server applies it with.
    """

    CONTENT_TYPE: ClassVar[str]

    value: Any

    def body(self) -> bytes:
        return to_json_bytes(self.value)


@dataclass(frozen=True)
class MergePatch(Patch):
    """
    A JSON merge patch (RFC 7386).
    """

    CONTENT_TYPE = "application/merge-patch+json"


@dataclass(frozen=True)
class StrategicPatch(Patch):
    """
    A strategic merge patch. Only supported by built-in resources.
    """

    CONTENT_TYPE = "application/strategic-merge-patch+json"


@dataclass(frozen=True)
class JsonPatch(Patch):
    """
    A JSON patch (RFC 6902); the value is the list of operations.
    """

    CONTENT_TYPE = "application/json-patch+json"

    def body(self) -> bytes:
        if not isinstance(self.value, list):
            raise UsageError(f"A JSON patch must be a list of operations, got {type(self.value).__name__}")
        return to_json_bytes(self.value)


@dataclass(frozen=True)
class ApplyPatch(Patch):
    """
    A server-side apply patch; the value is the full intended object. Requires a field manager.
    """

    CONTENT_TYPE = "application/apply-patch+yaml"


@dataclass(frozen=True)
class PatchParams:
    """
    Parameters for patch requests.
    """

    dry_run: bool = False
    force: bool = False
    """
    Take ownership of conflicting fields. Only valid for server-side apply.
    """

    field_manager: str | None = None

    def query(self, patch: Patch) -> Query:
        """
        Raises:
            UsageError: If the parameters are inconsistent with the *patch* strategy.
        """

        _check_field_manager(self.field_manager)
        if self.force and not isinstance(patch, ApplyPatch):
            raise UsageError("Force is only supported for server-side apply patches")
        if isinstance(patch, ApplyPatch) and self.field_manager is None:
            raise UsageError("A field manager is required for server-side apply patches")

        query: Query = []
        if self.dry_run:
            query.append(("dryRun", "All"))
        if self.force:
            query.append(("force", "true"))
        if self.field_manager is not None:
            query.append(("fieldManager", self.field_manager))
        return query


class PropagationPolicy(str, Enum):
    ORPHAN = "Orphan"
    BACKGROUND = "Background"
    FOREGROUND = "Foreground"


@dataclass(frozen=True)
class Preconditions:
    """
    Conditions that the object must fulfill for the deletion to go ahead.
    """

    uid: str | None = None
    resource_version: Annotated[str | None, Alias("resourceVersion")] = None


@dataclass
class _DeleteOptions:
    dry_run: Annotated[list[str] | None, Alias("dryRun")] = None
    grace_period_seconds: Annotated[int | None, Alias("gracePeriodSeconds")] = None
    propagation_policy: Annotated[PropagationPolicy | None, Alias("propagationPolicy")] = None
    preconditions: Preconditions | None = None


@dataclass(frozen=True)
class DeleteParams:
    """
    Parameters for delete and delete-collection requests. They are sent as `DeleteOptions` in the request body.
    """

    dry_run: bool = False
    grace_period_seconds: int | None = None
    propagation_policy: PropagationPolicy | None = None
    preconditions: Preconditions | None = None

    def body(self) -> bytes:
        options = _DeleteOptions(
            dry_run=["All"] if self.dry_run else None,
            grace_period_seconds=self.grace_period_seconds,
            propagation_policy=self.propagation_policy,
            preconditions=self.preconditions,
        )
        # Unset fields are omitted at every level, including the preconditions.
        data = ser(options, _DeleteOptions, settings=[SerializeDefaults(False)])
        return to_json_bytes(cast(dict[str, Any], data))
