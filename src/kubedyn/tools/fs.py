from collections.abc import Sequence
from pathlib import Path
from typing import Any, Literal, overload

import yaml


@overload
def find_config_file(
    filenames: Sequence[str], cwd: Path | None = None, required: Literal[False] = False
) -> Path | None: ...


@overload
def find_config_file(filenames: Sequence[str], cwd: Path | None = None, required: Literal[True] = True) -> Path: ...


def find_config_file(filenames: Sequence[str], cwd: Path | None = None, required: bool = True) -> Path | None:
    """
    Find a file named like one of *filenames* in *cwd* or the closest of its parent directories. Within a directory,
    earlier names take precedence.
    """

    if cwd is None:
        cwd = Path.cwd()

    for directory in [cwd, *cwd.parents]:
        for filename in filenames:
            file = directory / filename
            if file.is_file():
                return file

    if required:
        raise FileNotFoundError(
            f"Could not find any of {', '.join(filenames)} in '{cwd}' or any of its parent directories."
        )

    return None


def read_documents(file: Path) -> list[Any]:
    """
    Read all documents from a YAML file. JSON is accepted as well, being a subset of YAML. Empty documents are
    skipped.
    """

    with file.open() as fp:
        return [doc for doc in yaml.safe_load_all(fp) if doc is not None]
