from collections.abc import Iterator, Mapping
from copy import deepcopy
from dataclasses import dataclass, field, replace
from typing import Annotated, Any

from databind.core import Alias, ExtraKeys
from databind.json import load as deser

from kubedyn.api.operations import Scope
from kubedyn.api.resource import ApiResource
from kubedyn.errors import UsageError
from kubedyn.resources import Manifest, ObjectMeta, Resource

_ENVELOPE_KEYS = ("apiVersion", "kind", "metadata")


@dataclass(frozen=True)
class TypeMeta:
    api_version: str
    kind: str


@dataclass
class DynamicObject(Resource[ApiResource]):
    """
    A Kubernetes object of any type, without a schema. Everything besides the type information and the metadata is
    kept as-is in #data and written back unchanged.

    The type of the object is not taken from #types but from the #ApiResource passed to the class methods, so the
    same object can be used with different descriptors. The server is authoritative about the type of a payload.
    """

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    data: dict[str, Any] = field(default_factory=dict)
    """
    All top-level keys of the object other than `apiVersion`, `kind` and `metadata`.
    """

    types: TypeMeta | None = None
    """
    The `apiVersion` and `kind` of the object. Not always present, e.g. for the items of a list.
    """

    @staticmethod
    def new(name: str, resource: ApiResource) -> "DynamicObject":
        """
        Create an object named *name* with the type information of *resource* and no data.
        """

        return DynamicObject(
            metadata=ObjectMeta(name=name),
            types=TypeMeta(resource.api_version, resource.kind),
        )

    def with_data(self, data: Mapping[str, Any]) -> "DynamicObject":
        """
        Returns a copy of the object with *data* attached as its payload.

        Raises:
            UsageError: If *data* contains `apiVersion`, `kind` or `metadata`, which would clash with the envelope.
        """

        clashes = [key for key in _ENVELOPE_KEYS if key in data]
        if clashes:
            raise UsageError(f"Payload must not contain the envelope key(s) {', '.join(clashes)}")
        return replace(self, metadata=deepcopy(self.metadata), data=deepcopy(dict(data)))

    def with_namespace(self, namespace: str) -> "DynamicObject":
        """
        Returns a copy of the object that lives in *namespace*.
        """

        return replace(self, metadata=replace(deepcopy(self.metadata), namespace=namespace), data=deepcopy(self.data))

    @classmethod
    def group(cls, dyntype: ApiResource) -> str:
        return dyntype.group

    @classmethod
    def version(cls, dyntype: ApiResource) -> str:
        return dyntype.version

    @classmethod
    def kind(cls, dyntype: ApiResource) -> str:
        return dyntype.kind

    @classmethod
    def api_version(cls, dyntype: ApiResource) -> str:
        return dyntype.api_version

    @classmethod
    def plural(cls, dyntype: ApiResource) -> str:
        return dyntype.plural_name

    @classmethod
    def scope(cls, dyntype: ApiResource) -> Scope:
        return dyntype.scope

    @classmethod
    def api_resource(cls, dyntype: ApiResource) -> ApiResource:
        return dyntype

    @property
    def meta(self) -> ObjectMeta:
        return self.metadata

    @staticmethod
    def load(manifest: Mapping[str, Any]) -> "DynamicObject":
        """
        Load an object from its JSON representation. The type information is only picked up if both `apiVersion`
        and `kind` are strings; otherwise they stay part of the payload.

        Raises:
            ValueError: If the object has no `metadata` mapping.
        """

        data = deepcopy(dict(manifest))

        types = None
        if isinstance(data.get("apiVersion"), str) and isinstance(data.get("kind"), str):
            types = TypeMeta(data.pop("apiVersion"), data.pop("kind"))

        metadata = data.pop("metadata", None)
        if not isinstance(metadata, Mapping):
            raise ValueError(f"Expected 'metadata' to be a mapping, got {type(metadata).__name__}")

        return DynamicObject(metadata=ObjectMeta.load(dict(metadata)), data=data, types=types)

    def dump(self) -> Manifest:
        """
        Dump the object to its JSON representation: the type information (if known) and the metadata are merged
        with the payload into a single object.
        """

        manifest: dict[str, Any] = {}
        if self.types is not None:
            manifest["apiVersion"] = self.types.api_version
            manifest["kind"] = self.types.kind
        manifest["metadata"] = self.metadata.dump()
        manifest.update(deepcopy(self.data))
        return Manifest(manifest)


@ExtraKeys()
@dataclass
class ListMeta:
    resource_version: Annotated[str | None, Alias("resourceVersion")] = None
    continue_token: Annotated[str | None, Alias("continue")] = None
    remaining_item_count: Annotated[int | None, Alias("remainingItemCount")] = None


@dataclass
class ObjectList:
    """
    The body of a list response. The items of a list usually carry no type information.
    """

    metadata: ListMeta
    items: list[DynamicObject]

    @staticmethod
    def load(manifest: Mapping[str, Any]) -> "ObjectList":
        return ObjectList(
            metadata=deser(manifest.get("metadata") or {}, ListMeta),
            items=[DynamicObject.load(item) for item in manifest.get("items") or []],
        )

    def __iter__(self) -> Iterator[DynamicObject]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
