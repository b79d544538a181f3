from enum import Enum
from pathlib import Path
from typing import Any, Optional

from loguru import logger
from typer import Argument, Exit, Option

from kubedyn.api.operations import Verb
from kubedyn.api.params import (
    ApplyPatch,
    DeleteParams,
    JsonPatch,
    ListParams,
    MergePatch,
    Patch,
    PatchParams,
    PostParams,
    Query,
    StrategicPatch,
    to_json_bytes,
)
from kubedyn.api.request import JSON, HttpRequest, Request
from kubedyn.api.resource import GroupVersionKind
from kubedyn.catalog import CatalogConfig
from kubedyn.errors import UsageError
from kubedyn.tools.fs import read_documents
from . import INPUT_ERRORS, app


class PatchType(str, Enum):
    MERGE = "merge"
    STRATEGIC = "strategic"
    JSON = "json"
    APPLY = "apply"


PATCH_TYPES: dict[PatchType, type[Patch]] = {
    PatchType.MERGE: MergePatch,
    PatchType.STRATEGIC: StrategicPatch,
    PatchType.JSON: JsonPatch,
    PatchType.APPLY: ApplyPatch,
}


@app.command()
def request(
    verb: Verb = Argument(..., help="The operation to build the request for."),
    api_version: str = Argument(..., help="The apiVersion of the resource, e.g. `apps/v1`."),
    kind: str = Argument(..., help="The kind of the resource, e.g. `Deployment`."),
    name: Optional[str] = Argument(None, help="The name of the object."),
    namespace: Optional[str] = Option(None, "--namespace", "-n", help="The namespace of the object(s)."),
    subresource: Optional[str] = Option(None, "--subresource", "-s", help="Address a subresource of the object."),
    body: Optional[Path] = Option(None, help="A YAML or JSON file with the request body or patch document."),
    patch_type: PatchType = Option(PatchType.MERGE, help="The patch strategy to use with the `patch` verb."),
    field_manager: Optional[str] = Option(None, help="The field manager to send with write requests."),
    dry_run: bool = Option(False, help="Ask the server not to persist any changes."),
    force: bool = Option(False, help="Force conflicts for server-side apply patches."),
    selector: Optional[str] = Option(None, help="A label selector for collection requests."),
    resource_version: str = Option("0", help="The resource version to start watching from."),
    catalog: Optional[Path] = Option(
        None,
        help=f"Path to the catalog file. If not set, `{CatalogConfig.FILENAMES[0]}` is searched in the current directory "
        "and its parents.",
    ),
) -> None:
    """
    Print the HTTP request for an operation on a resource. The resource is looked up in the catalog; if it is not
    found, its plural name and scope are guessed from the kind.
    """

    try:
        gvk = GroupVersionKind.from_api_version(api_version, kind)
        resource = CatalogConfig.load(catalog).catalog.resolve(gvk)
        if subresource is None:
            # The verbs of a subresource are not known from the parent resource.
            resource.ensure_supported(verb)

        http = build_request(
            Request(resource, namespace),
            verb,
            name=name,
            subresource=subresource,
            document=_load_body(body),
            patch_type=patch_type,
            post_params=PostParams(dry_run=dry_run, field_manager=field_manager),
            patch_params=PatchParams(dry_run=dry_run, force=force, field_manager=field_manager),
            delete_params=DeleteParams(dry_run=dry_run),
            list_params=ListParams(label_selector=selector),
            resource_version=resource_version,
        )
    except UsageError as exc:
        logger.error("{}", exc)
        raise Exit(1)
    except INPUT_ERRORS as exc:
        logger.error("Could not read input: {}", exc)
        raise Exit(1)

    print(http.method, http.uri)
    if http.content_type is not None:
        print("Content-Type:", http.content_type)
    if http.body is not None:
        print()
        print(http.body.decode())


def build_request(
    request: Request,
    verb: Verb,
    *,
    name: str | None = None,
    subresource: str | None = None,
    document: Any = None,
    patch_type: PatchType = PatchType.MERGE,
    post_params: PostParams = PostParams(),
    patch_params: PatchParams = PatchParams(),
    delete_params: DeleteParams = DeleteParams(),
    list_params: ListParams = ListParams(),
    resource_version: str = "0",
) -> HttpRequest:
    """
    Build the request for any *verb* from the options of the `request` command.
    """

    query: Query = []
    body: bytes | None = None
    content_type: str | None = None

    if verb in (Verb.CREATE, Verb.UPDATE, Verb.PATCH) and document is None:
        raise UsageError(f"The {verb.value!r} verb requires a request body")

    match verb:
        case Verb.CREATE | Verb.UPDATE:
            query = post_params.query()
            body, content_type = to_json_bytes(document), JSON
        case Verb.PATCH:
            patch = PATCH_TYPES[patch_type](document)
            query = patch_params.query(patch)
            body, content_type = patch.body(), patch.CONTENT_TYPE
        case Verb.LIST:
            query = list_params.list_query()
        case Verb.WATCH:
            query = list_params.watch_query(resource_version)
        case Verb.DELETE:
            body, content_type = delete_params.body(), JSON
        case Verb.DELETE_COLLECTION:
            query = list_params.list_query()
            body, content_type = delete_params.body(), JSON

    return request.build(verb, name=name, subresource=subresource, query=query, body=body, content_type=content_type)


def _load_body(file: Path | None) -> Any:
    if file is None:
        return None
    documents = read_documents(file)
    if len(documents) != 1:
        raise UsageError(f"Expected exactly one document in '{file}', got {len(documents)}")
    return documents[0]
