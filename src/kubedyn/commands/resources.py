from pathlib import Path
from typing import Optional

from loguru import logger
from rich.console import Console
from rich.table import Table
from typer import Exit, Option

from kubedyn.catalog import CatalogConfig
from . import INPUT_ERRORS, app


@app.command()
def resources(
    group_version: Optional[str] = Option(None, "--group-version", "-g", help="Only show this group-version."),
    catalog: Optional[Path] = Option(
        None,
        help=f"Path to the catalog file. If not set, `{CatalogConfig.FILENAMES[0]}` is searched in the current directory "
        "and its parents.",
    ),
) -> None:
    """
    List the resources in the catalog with their scope, verbs and subresources.
    """

    try:
        config = CatalogConfig.load(catalog)
    except INPUT_ERRORS as exc:
        logger.error("Could not read the catalog: {}", exc)
        raise Exit(1)

    table = Table()
    table.add_column("Name", style="cyan")
    table.add_column("API Version")
    table.add_column("Kind")
    table.add_column("Namespaced")
    table.add_column("Verbs")
    table.add_column("Subresources")

    for resource, extras in config.catalog.resources(group_version):
        table.add_row(
            resource.plural_name,
            resource.api_version,
            resource.kind,
            "true" if resource.namespaced else "false",
            ",".join(extras.operations.verbs()),
            ",".join(resource.subresources),
        )

    Console().print(table)
