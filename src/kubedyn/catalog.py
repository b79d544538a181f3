from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated

from databind.core import Alias
from databind.json import load as deser
from loguru import logger

from kubedyn.api.resource import ApiResource, GroupVersionKind
from kubedyn.discovery.extras import ApiResourceExtras
from kubedyn.discovery.group import top_level_resources
from kubedyn.discovery.types import ApiResourceList
from kubedyn.tools.fs import find_config_file, read_documents


@dataclass
class Catalog:
    """
    A saved snapshot of discovery data, used to resolve kinds to resources without asking the API server.
    """

    resource_lists: Annotated[list[ApiResourceList], Alias("resourceLists")] = field(default_factory=list)

    def resources(self, group_version: str | None = None) -> list[tuple[ApiResource, ApiResourceExtras]]:
        """
        Returns all top-level resources in the catalog, optionally only those of one *group_version*.
        """

        result = []
        for resource_list in self.resource_lists:
            if group_version is None or resource_list.group_version == group_version:
                result.extend(top_level_resources(resource_list))
        return result

    def find(self, gvk: GroupVersionKind) -> ApiResource | None:
        for resource, _ in self.resources(gvk.api_version):
            if resource.kind == gvk.kind:
                return resource
        return None

    def resolve(self, gvk: GroupVersionKind) -> ApiResource:
        """
        Find the resource for *gvk* in the catalog, or fall back to guessing it with #ApiResource.from_gvk().
        """

        resource = self.find(gvk)
        if resource is None:
            logger.warning("{} is not in the catalog; guessing its plural name and scope", gvk)
            resource = ApiResource.from_gvk(gvk)
        return resource


@dataclass
class CatalogConfig:
    """
    Wrapper for the catalog file.
    """

    FILENAMES = ("kubedyn-catalog.yaml", "kubedyn-catalog.yml", "kubedyn-catalog.json")

    file: Path | None
    catalog: Catalog

    @staticmethod
    def load(file: Path | None = None, /) -> "CatalogConfig":
        """
        Load the catalog from the given file, or from the closest `kubedyn-catalog.yaml` (or `.yml`, `.json`) in the
        current directory or any of its parents. If no file exists, an empty catalog is returned.

        The file may contain a `resourceLists` key, or one `APIResourceList` per YAML document, as returned by
        `kubectl get --raw /apis/<group>/<version>`.
        """

        if file is None:
            file = find_config_file(CatalogConfig.FILENAMES, required=False)
        if file is None:
            return CatalogConfig(None, Catalog())

        logger.debug("Loading catalog from '{}'", file)
        catalog = Catalog()
        for document in read_documents(file):
            if "resourceLists" in document:
                catalog.resource_lists.extend(deser(document, Catalog, filename=str(file)).resource_lists)
            else:
                catalog.resource_lists.append(ApiResourceList.load(document, filename=str(file)))

        return CatalogConfig(file, catalog)
