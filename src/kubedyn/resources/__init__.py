"""
This package contains the interface shared by compiled-in (typed) resources and dynamic resources, which lets
request building be written once for both.
"""

from abc import ABC, abstractmethod
from copy import deepcopy
from dataclasses import dataclass, field, replace
from typing import Annotated, Any, ClassVar, Generic, NewType, TypeVar, cast

from databind.core import Alias, ExtraKeys, SerializeDefaults
from databind.json import dump as ser, load as deser
from typing_extensions import Self

from kubedyn.api.operations import Scope
from kubedyn.api.request import build_path
from kubedyn.api.resource import ApiResource, join_group_version, split_group_version, to_plural

DynamicType = TypeVar("DynamicType")

Manifest = NewType("Manifest", dict[str, Any])
""" A Kubernetes object as decoded from JSON or YAML. """

_METADATA_KEYS = frozenset(
    {
        "name",
        "generateName",
        "namespace",
        "selfLink",
        "uid",
        "resourceVersion",
        "generation",
        "creationTimestamp",
        "deletionTimestamp",
        "deletionGracePeriodSeconds",
        "labels",
        "annotations",
        "ownerReferences",
        "finalizers",
        "managedFields",
    }
)


@ExtraKeys()
@dataclass
class ObjectMeta:
    """
    Kubernetes object metadata. Fields that are not set are not serialized, unless they were loaded with an explicit
    `null`. Keys that this version of kubedyn does not know about are kept in #extra when loading with #load(), and
    are written back by #dump().
    """

    name: str | None = None
    generate_name: Annotated[str | None, Alias("generateName")] = None
    namespace: str | None = None
    self_link: Annotated[str | None, Alias("selfLink")] = None
    uid: str | None = None
    resource_version: Annotated[str | None, Alias("resourceVersion")] = None
    generation: int | None = None
    creation_timestamp: Annotated[str | None, Alias("creationTimestamp")] = None
    deletion_timestamp: Annotated[str | None, Alias("deletionTimestamp")] = None
    deletion_grace_period_seconds: Annotated[int | None, Alias("deletionGracePeriodSeconds")] = None
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None
    owner_references: Annotated[list[dict[str, Any]] | None, Alias("ownerReferences")] = None
    finalizers: list[str] | None = None
    managed_fields: Annotated[list[dict[str, Any]] | None, Alias("managedFields")] = None

    extra: dict[str, Any] = field(default_factory=dict)
    """
    Metadata keys that are not known to kubedyn.
    """

    null_keys: list[str] = field(default_factory=list)
    """
    Known keys that were loaded with an explicit `null` value, e.g. `creationTimestamp` in many manifests. They are
    written back as `null` by #dump() unless the field was set in the meantime.
    """

    @staticmethod
    def load(data: dict[str, Any]) -> "ObjectMeta":
        known = {key: value for key, value in data.items() if key in _METADATA_KEYS}
        meta = deser(known, ObjectMeta)
        meta.extra = {key: deepcopy(value) for key, value in data.items() if key not in _METADATA_KEYS}
        meta.null_keys = [key for key, value in known.items() if value is None]
        return meta

    def dump(self) -> dict[str, Any]:
        data = cast(
            dict[str, Any],
            ser(replace(self, extra={}, null_keys=[]), Annotated[ObjectMeta, SerializeDefaults(False)]),
        )
        data.pop("extra", None)
        data.pop("null_keys", None)
        for key in self.null_keys:
            data.setdefault(key, None)
        data.update(deepcopy(self.extra))
        return data


class Resource(ABC, Generic[DynamicType]):
    """
    The interface that every Kubernetes object type implements, whether it is known when the code is written or
    only discovered at runtime.

    The type information is not read from the object itself but from a *dynamic type* value that is passed to the
    class methods. For compiled-in resources this is the #StaticType marker, which carries no information because
    the class knows everything already. For dynamic resources it is the #ApiResource that describes the type.
    """

    @classmethod
    @abstractmethod
    def group(cls, dyntype: DynamicType) -> str: ...

    @classmethod
    @abstractmethod
    def version(cls, dyntype: DynamicType) -> str: ...

    @classmethod
    @abstractmethod
    def kind(cls, dyntype: DynamicType) -> str: ...

    @classmethod
    @abstractmethod
    def plural(cls, dyntype: DynamicType) -> str: ...

    @classmethod
    @abstractmethod
    def scope(cls, dyntype: DynamicType) -> Scope: ...

    @classmethod
    def api_version(cls, dyntype: DynamicType) -> str:
        return join_group_version(cls.group(dyntype), cls.version(dyntype))

    @classmethod
    def api_resource(cls, dyntype: DynamicType) -> ApiResource:
        """
        Returns the #ApiResource that requests for this type are built from.
        """

        return ApiResource(
            group=cls.group(dyntype),
            version=cls.version(dyntype),
            kind=cls.kind(dyntype),
            plural_name=cls.plural(dyntype),
            scope=cls.scope(dyntype),
        )

    @classmethod
    def url_path(cls, dyntype: DynamicType, namespace: str | None = None) -> str:
        """
        The path of the collection of objects of this type, optionally restricted to a *namespace*.
        """

        return build_path(cls.api_resource(dyntype), namespace=namespace)

    @property
    @abstractmethod
    def meta(self) -> ObjectMeta:
        """
        The metadata of the object. Modifications to the returned object are reflected in the resource.
        """

    @property
    def name(self) -> str | None:
        return self.meta.name

    @property
    def namespace(self) -> str | None:
        return self.meta.namespace


@dataclass(frozen=True)
class StaticType:
    """
    The dynamic type of compiled-in resources. It carries no information.
    """


STATIC = StaticType()


class TypedResource(Resource[StaticType]):
    """
    Base class for resources whose type is known when the code is written. Subclasses are dataclasses with a
    `metadata` field and declare their type through class keyword arguments:

    ```py
    @dataclass
    class ConfigMap(TypedResource, api_version="v1", kind="ConfigMap"):
        metadata: ObjectMeta
        data: dict[str, str] | None = None
    ```
    """

    API_VERSION: ClassVar[str]
    KIND: ClassVar[str]
    """
    The kind identifier of the resource. If not set, this will default to the class name.
    """

    PLURAL: ClassVar[str]
    """
    The plural name of the resource. If not set, it is derived from the kind, see #to_plural().
    """

    SCOPE: ClassVar[Scope]

    metadata: ObjectMeta

    def __init_subclass__(
        cls,
        api_version: str,
        kind: str | None = None,
        plural: str | None = None,
        namespaced: bool = True,
    ) -> None:
        split_group_version(api_version)
        cls.API_VERSION = api_version
        if kind is not None or "KIND" not in vars(cls):
            cls.KIND = kind or cls.__name__
        cls.PLURAL = plural or to_plural(cls.KIND.lower())
        cls.SCOPE = Scope.from_namespaced(namespaced)

    @classmethod
    def group(cls, dyntype: StaticType = STATIC) -> str:
        return split_group_version(cls.API_VERSION)[0]

    @classmethod
    def version(cls, dyntype: StaticType = STATIC) -> str:
        return split_group_version(cls.API_VERSION)[1]

    @classmethod
    def kind(cls, dyntype: StaticType = STATIC) -> str:
        return cls.KIND

    @classmethod
    def plural(cls, dyntype: StaticType = STATIC) -> str:
        return cls.PLURAL

    @classmethod
    def scope(cls, dyntype: StaticType = STATIC) -> Scope:
        return cls.SCOPE

    @property
    def meta(self) -> ObjectMeta:
        return self.metadata

    @classmethod
    def load(cls, manifest: Manifest | dict[str, Any]) -> Self:
        """
        Load the resource from a manifest.

        Raises:
            ValueError: If the `apiVersion` or `kind` of the manifest does not match the class.
        """

        if manifest.get("apiVersion") != cls.API_VERSION:
            raise ValueError(f"Expected apiVersion {cls.API_VERSION!r}, got {manifest.get('apiVersion')!r}")
        if manifest.get("kind") != cls.KIND:
            raise ValueError(f"Expected kind {cls.KIND!r}, got {manifest.get('kind')!r}")

        manifest = Manifest(dict(manifest))
        manifest.pop("apiVersion")
        manifest.pop("kind")
        resource = cast(Self, deser(manifest, cls))
        if isinstance(manifest.get("metadata"), dict):
            resource.metadata = ObjectMeta.load(manifest["metadata"])
        return resource

    def dump(self) -> Manifest:
        """
        Dump the resource to a manifest.
        """

        data = cast(dict[str, Any], ser(self, Annotated[type(self), SerializeDefaults(False)]))
        data["metadata"] = self.metadata.dump()
        return Manifest({"apiVersion": self.API_VERSION, "kind": self.KIND, **data})
