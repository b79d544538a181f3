from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum


class Scope(str, Enum):
    """
    Whether objects of a resource live in a namespace or are global to the cluster.
    """

    CLUSTER = "Cluster"
    NAMESPACED = "Namespaced"

    @staticmethod
    def from_namespaced(namespaced: bool) -> "Scope":
        return Scope.NAMESPACED if namespaced else Scope.CLUSTER


class Verb(str, Enum):
    """
    The verbs known to kubedyn, spelled the way the API server reports them in discovery.
    """

    CREATE = "create"
    GET = "get"
    LIST = "list"
    WATCH = "watch"
    DELETE = "delete"
    DELETE_COLLECTION = "deletecollection"
    UPDATE = "update"
    PATCH = "patch"

    @property
    def attr(self) -> str:
        """
        The name of the flag on #Operations that corresponds to this verb.
        """

        return "delete_collection" if self is Verb.DELETE_COLLECTION else self.value


_VERBS_BY_NAME = {verb.value: verb for verb in Verb}


@dataclass(frozen=True)
class Operations:
    """
    The set of operations supported by a resource. Verbs that are unknown to kubedyn are kept in #other, in the
    order the server reported them, so that no information from discovery is lost.
    """

    create: bool = False
    get: bool = False
    list: bool = False
    watch: bool = False
    delete: bool = False
    delete_collection: bool = False
    update: bool = False
    patch: bool = False
    other: tuple[str, ...] = field(default_factory=tuple)

    @staticmethod
    def empty() -> "Operations":
        """
        Returns an #Operations object where no verb is supported.
        """

        return Operations()

    @staticmethod
    def all() -> "Operations":
        """
        Returns an #Operations object where every known verb is supported.
        """

        return Operations(**{verb.attr: True for verb in Verb})

    @staticmethod
    def from_verbs(verbs: Iterable[str]) -> "Operations":
        """
        Fold a list of verbs, as reported by the API server, into an #Operations object. Matching is case-sensitive.
        Every verb that is not known ends up in #other.
        """

        flags: dict[str, bool] = {}
        other: list[str] = []
        for value in verbs:
            verb = _VERBS_BY_NAME.get(value)
            if verb is None:
                other.append(value)
            else:
                flags[verb.attr] = True
        return Operations(**flags, other=tuple(other))

    def supports(self, verb: Verb | str) -> bool:
        """
        Check if the given verb is supported. Raw strings that don't name a known verb are looked up in #other.
        """

        if not isinstance(verb, Verb):
            if verb not in _VERBS_BY_NAME:
                return verb in self.other
            verb = _VERBS_BY_NAME[verb]
        return bool(getattr(self, verb.attr))

    def verbs(self) -> list[str]:
        """
        Returns the verbs in this set as strings; known verbs first, then the #other verbs.
        """

        return [verb.value for verb in Verb if getattr(self, verb.attr)] + list(self.other)
