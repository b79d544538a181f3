import pytest

from kubedyn.api.operations import Operations, Scope, Verb

ALL_VERBS = ["get", "list", "watch", "create", "update", "patch", "delete", "deletecollection"]


def test__Operations__empty() -> None:
    ops = Operations.empty()
    assert not any(ops.supports(verb) for verb in Verb)
    assert ops.other == ()
    assert ops.verbs() == []


def test__Operations__from_verbs__all_known_verbs() -> None:
    ops = Operations.from_verbs(ALL_VERBS)
    assert ops == Operations.all()
    assert ops.delete_collection
    assert ops.other == ()


def test__Operations__from_verbs__keeps_unknown_verbs_in_order() -> None:
    ops = Operations.from_verbs(["proxy", "get", "impersonate", "Get", "delete-collection", "proxy"])
    assert ops.get
    assert not ops.delete_collection
    assert ops.other == ("proxy", "impersonate", "Get", "delete-collection", "proxy")


@pytest.mark.parametrize(
    "verbs",
    [
        [],
        ["list"],
        ["watch", "get", "escalate"],
        list(reversed(ALL_VERBS)) + ["bind", "use"],
    ],
)
def test__Operations__from_verbs__no_verb_is_counted_twice(verbs: list[str]) -> None:
    ops = Operations.from_verbs(verbs)
    known = {verb.value for verb in Verb}
    for verb in Verb:
        assert ops.supports(verb) == (verb.value in verbs)
    assert list(ops.other) == [verb for verb in verbs if verb not in known]
    assert not set(ops.other) & known


def test__Operations__supports__raw_strings() -> None:
    ops = Operations.from_verbs(["get", "proxy"])
    assert ops.supports("get")
    assert ops.supports("proxy")
    assert not ops.supports("list")
    assert not ops.supports("bind")


def test__Operations__verbs() -> None:
    ops = Operations.from_verbs(["watch", "proxy", "deletecollection", "get"])
    assert ops.verbs() == ["get", "watch", "deletecollection", "proxy"]


def test__Scope__from_namespaced() -> None:
    assert Scope.from_namespaced(True) == Scope.NAMESPACED
    assert Scope.from_namespaced(False) == Scope.CLUSTER
    assert Scope.NAMESPACED.value == "Namespaced"
