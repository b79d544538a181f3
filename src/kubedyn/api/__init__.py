"""
Resource descriptors, their supported operations, and the construction of requests for them.
"""

from kubedyn.api.operations import Operations, Scope, Verb
from kubedyn.api.params import (
    ApplyPatch,
    DeleteParams,
    JsonPatch,
    ListParams,
    MergePatch,
    Patch,
    PatchParams,
    PostParams,
    Preconditions,
    PropagationPolicy,
    StrategicPatch,
)
from kubedyn.api.request import HttpRequest, Request, build_path
from kubedyn.api.resource import ApiResource, GroupVersionKind, join_group_version, split_group_version, to_plural

__all__ = [
    "ApiResource",
    "ApplyPatch",
    "DeleteParams",
    "GroupVersionKind",
    "HttpRequest",
    "JsonPatch",
    "ListParams",
    "MergePatch",
    "Operations",
    "Patch",
    "PatchParams",
    "PostParams",
    "Preconditions",
    "PropagationPolicy",
    "Request",
    "Scope",
    "StrategicPatch",
    "Verb",
    "build_path",
    "join_group_version",
    "split_group_version",
    "to_plural",
]
