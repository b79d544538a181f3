"""
Builds the HTTP requests for operations on a resource. Nothing in here performs I/O; the resulting #HttpRequest is
handed to the transport.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from kubedyn.api.operations import Scope, Verb
from kubedyn.api.params import (
    DeleteParams,
    ListParams,
    Patch,
    PatchParams,
    PostParams,
    Query,
    to_json_bytes,
)
from kubedyn.api.resource import ApiResource
from kubedyn.errors import UsageError

if TYPE_CHECKING:
    from kubedyn.resources import Resource

JSON = "application/json"

METHODS = {
    Verb.CREATE: "POST",
    Verb.GET: "GET",
    Verb.LIST: "GET",
    Verb.WATCH: "GET",
    Verb.DELETE: "DELETE",
    Verb.DELETE_COLLECTION: "DELETE",
    Verb.UPDATE: "PUT",
    Verb.PATCH: "PATCH",
}

COLLECTION_VERBS = frozenset({Verb.LIST, Verb.WATCH, Verb.DELETE_COLLECTION})
""" Verbs that act on a whole collection and never take a name. """

NAMED_VERBS = frozenset({Verb.GET, Verb.DELETE, Verb.UPDATE, Verb.PATCH})
""" Verbs that act on a single object and require its name. """

BODY_VERBS = frozenset({Verb.CREATE, Verb.UPDATE, Verb.PATCH})


def build_path(
    resource: ApiResource,
    namespace: str | None = None,
    name: str | None = None,
    subresource: str | None = None,
) -> str:
    """
    Build the REST path for *resource*. The namespace is only included for namespaced resources; leaving it out for
    a namespaced resource addresses the collection across all namespaces.

        /api/v1/namespaces/default/pods/my-pod/status
        /apis/apps/v1/deployments

    Raises:
        UsageError: If a *subresource* is given without a *name*, the namespace or name is empty or contains a `/`,
            or the subresource has an empty segment.
    """

    for label, value in (("namespace", namespace), ("name", name)):
        if value is not None and (not value or "/" in value):
            raise UsageError(f"Invalid {label} {value!r}")
    # Nested subresources span several segments, e.g. `b/c`.
    if subresource is not None and not all(subresource.split("/")):
        raise UsageError(f"Invalid subresource {subresource!r}")
    if subresource is not None and name is None:
        raise UsageError(f"Subresource {subresource!r} requires an object name")

    segments = ["api"] if not resource.group else ["apis", resource.group]
    segments.append(resource.version)
    if resource.scope == Scope.NAMESPACED and namespace is not None:
        segments += ["namespaces", namespace]
    segments.append(resource.plural_name)
    if name is not None:
        segments.append(name)
    if subresource is not None:
        segments.append(subresource)
    return "/" + "/".join(segments)


@dataclass(frozen=True)
class HttpRequest:
    """
    The shape of a request that the transport must issue.
    """

    method: str
    path: str
    query: tuple[tuple[str, str], ...] = ()
    body: bytes | None = None
    content_type: str | None = None

    @property
    def uri(self) -> str:
        """
        The path including the query string, if any.
        """

        if not self.query:
            return self.path
        return f"{self.path}?{urlencode(self.query)}"


@dataclass(frozen=True)
class Request:
    """
    Builds requests for the operations on one resource, optionally scoped to a namespace.
    """

    resource: ApiResource
    namespace: str | None = None

    @staticmethod
    def for_resource(resource_cls: "type[Resource[Any]]", dyntype: Any, namespace: str | None = None) -> "Request":
        """
        Create a #Request for any #Resource implementation, typed or dynamic.
        """

        return Request(resource_cls.api_resource(dyntype), namespace)

    def build(
        self,
        verb: Verb | str,
        *,
        name: str | None = None,
        subresource: str | None = None,
        query: Query | None = None,
        body: bytes | None = None,
        content_type: str | None = None,
    ) -> HttpRequest:
        """
        Build the request for *verb*, checking that the combination of arguments makes sense for it.

        Raises:
            UsageError: If a name is passed to a collection verb, a name is missing for a verb that needs one,
                a namespaced object is addressed without a namespace, or a body is missing.
        """

        try:
            verb = Verb(verb)
        except ValueError:
            raise UsageError(f"Unknown verb {verb!r}") from None

        if verb in COLLECTION_VERBS and (name is not None or subresource is not None):
            raise UsageError(f"The {verb.value!r} verb acts on a collection and does not take a name or subresource")
        if verb in NAMED_VERBS and name is None:
            raise UsageError(f"The {verb.value!r} verb requires an object name")
        if verb is Verb.CREATE and name is not None and subresource is None:
            raise UsageError("The 'create' verb takes an object name only when creating a subresource")
        if self.resource.namespaced and self.namespace is None and (name is not None or verb is Verb.CREATE):
            raise UsageError(
                f"{self.resource.kind} is namespaced; a namespace is required to {verb.value} a single object"
            )
        if verb in BODY_VERBS and body is None:
            raise UsageError(f"The {verb.value!r} verb requires a request body")

        return HttpRequest(
            method=METHODS[verb],
            path=build_path(self.resource, self.namespace, name, subresource),
            query=tuple(query or ()),
            body=body,
            content_type=content_type,
        )

    def create(self, data: Any, params: PostParams | None = None) -> HttpRequest:
        params = params or PostParams()
        return self.build(Verb.CREATE, query=params.query(), body=to_json_bytes(data), content_type=JSON)

    def get(self, name: str) -> HttpRequest:
        return self.build(Verb.GET, name=name)

    def list(self, params: ListParams | None = None) -> HttpRequest:
        params = params or ListParams()
        return self.build(Verb.LIST, query=params.list_query())

    def watch(self, resource_version: str = "0", params: ListParams | None = None) -> HttpRequest:
        params = params or ListParams()
        return self.build(Verb.WATCH, query=params.watch_query(resource_version))

    def delete(self, name: str, params: DeleteParams | None = None) -> HttpRequest:
        params = params or DeleteParams()
        return self.build(Verb.DELETE, name=name, body=params.body(), content_type=JSON)

    def delete_collection(
        self, params: DeleteParams | None = None, list_params: ListParams | None = None
    ) -> HttpRequest:
        params = params or DeleteParams()
        list_params = list_params or ListParams()
        return self.build(
            Verb.DELETE_COLLECTION, query=list_params.list_query(), body=params.body(), content_type=JSON
        )

    def replace(self, name: str, data: Any, params: PostParams | None = None) -> HttpRequest:
        params = params or PostParams()
        return self.build(Verb.UPDATE, name=name, query=params.query(), body=to_json_bytes(data), content_type=JSON)

    def patch(self, name: str, patch: Patch, params: PatchParams | None = None) -> HttpRequest:
        params = params or PatchParams()
        return self.build(
            Verb.PATCH, name=name, query=params.query(patch), body=patch.body(), content_type=patch.CONTENT_TYPE
        )

    # Subresources

    def get_subresource(self, subresource: str, name: str) -> HttpRequest:
        return self.build(Verb.GET, name=name, subresource=subresource)

    def create_subresource(
        self, subresource: str, name: str, data: Any, params: PostParams | None = None
    ) -> HttpRequest:
        params = params or PostParams()
        return self.build(
            Verb.CREATE,
            name=name,
            subresource=subresource,
            query=params.query(),
            body=to_json_bytes(data),
            content_type=JSON,
        )

    def replace_subresource(
        self, subresource: str, name: str, data: Any, params: PostParams | None = None
    ) -> HttpRequest:
        params = params or PostParams()
        return self.build(
            Verb.UPDATE,
            name=name,
            subresource=subresource,
            query=params.query(),
            body=to_json_bytes(data),
            content_type=JSON,
        )

    def patch_subresource(
        self, subresource: str, name: str, patch: Patch, params: PatchParams | None = None
    ) -> HttpRequest:
        params = params or PatchParams()
        return self.build(
            Verb.PATCH,
            name=name,
            subresource=subresource,
            query=params.query(patch),
            body=patch.body(),
            content_type=patch.CONTENT_TYPE,
        )
