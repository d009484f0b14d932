""" CustomResourceDefinition to package document converter. """

# pylint: disable=line-too-long

import json
import logging
import os
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import requests
import yaml

from crdtotypes.common import group_prefix
from crdtotypes.constants import DEFAULT_NAME, PYTHON_REQUIRES
from crdtotypes.packagebuilder import build_package
from crdtotypes.resources import CRD_KIND, CustomResource, add_resource_types
from crdtotypes.typeregistry import TypeRegistry

logger = logging.getLogger(__name__)

TIMESTAMP_TAG = 'tag:yaml.org,2002:timestamp'


class ManifestLoader(yaml.SafeLoader):  # pylint: disable=too-many-ancestors
    """SafeLoader that reads timestamps as plain strings, the way they decode from JSON."""


ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class PackageGenerator:
    """
    Generates the package document for a set of custom resources.

    Attributes:
        resources: The custom resources of the package.
        name: The package name.
        version: The package version, passed through verbatim.
        include_object_meta_type: Flag to add a placeholder ObjectMeta type to the package.
        content_cache: A dictionary for caching fetched URLs.
    """

    def __init__(self, resources: Optional[List[CustomResource]] = None) -> None:
        self.resources: List[CustomResource] = resources or []
        self.name = DEFAULT_NAME
        self.version: Optional[str] = None
        self.include_object_meta_type = True
        self.content_cache: Dict[str, str] = {}

    def fetch_content(self, url: str) -> str:
        """
        Fetch content from a URL or file path.

        Raises:
            requests.RequestException: If there is an error fetching from HTTP/HTTPS.
            FileNotFoundError: If the file does not exist.
            ValueError: If the URL scheme is not supported.
        """
        if url in self.content_cache:
            return self.content_cache[url]

        parsed_url = urlparse(url)
        if parsed_url.scheme in ['http', 'https']:
            response = requests.get(url, timeout=30)
            response.raise_for_status()
            content = response.text
        elif parsed_url.scheme == 'file' or not parsed_url.scheme:
            file_path = parsed_url.path if parsed_url.scheme == 'file' else url
            if os.name == 'nt' and file_path.startswith('/'):
                file_path = file_path[1:]
            with open(file_path, 'r', encoding='utf-8') as f:
                content = f.read()
        else:
            raise ValueError(f'Unsupported URL scheme: {parsed_url.scheme}')
        self.content_cache[url] = content
        return content

    def add_manifest(self, manifest: Dict[str, Any]) -> CustomResource:
        """Add the custom resource declared by a decoded CRD document."""
        resource = CustomResource.from_manifest(manifest)
        self.resources.append(resource)
        return resource

    def add_manifests_from(self, url: str) -> List[CustomResource]:
        """
        Add the custom resources declared in a YAML or JSON file or URL.

        YAML files may hold several documents and List documents are
        unpacked; documents that are not CustomResourceDefinitions are
        skipped.
        """
        content = self.fetch_content(url)
        try:
            documents = list(yaml.load_all(content, Loader=ManifestLoader))
        except yaml.YAMLError as e:
            raise ValueError(f'Failed to parse {url} as JSON or YAML: {e}') from e

        added: List[CustomResource] = []
        while documents:
            document = documents.pop(0)
            if not isinstance(document, dict):
                continue
            if str(document.get('kind', '')).endswith('List') and isinstance(document.get('items'), list):
                documents[0:0] = document['items']
                continue
            if document.get('kind') != CRD_KIND:
                logger.info("Skipping %s document in %s", document.get('kind'), url)
                continue
            added.append(self.add_manifest(document))
        if not added:
            logger.warning("No CustomResourceDefinitions found in %s", url)
        return added

    def module_to_package(self) -> Dict[str, str]:
        """Map each resource module `<group>/<version>` to the package path `<group prefix>/<version>`."""
        module_to_package: Dict[str, str] = {}
        for resource in self.resources:
            for version in resource.versions:
                module_to_package[f'{resource.group}/{version}'] = f'{group_prefix(resource.group)}/{version}'
        return module_to_package

    def python_language(self) -> Dict[str, Any]:
        """Return the language settings the Python SDK generator expects."""
        return {
            'python': {
                'compatibility': 'kubernetes20',
                'moduleNameOverrides': self.module_to_package(),
                'requires': dict(PYTHON_REQUIRES),
                'ignorePyNamePanic': True,
            }
        }

    def schema_package(self, language: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Translate all resources and return the validated package document."""
        registry = TypeRegistry()
        resource_tokens = add_resource_types(self.resources, registry)
        return build_package(registry, resource_tokens, self.include_object_meta_type,
                             name=self.name, version=self.version, language=language)


def convert_crd_to_package(crd_file_paths: List[str], package_file_path: str = '', name: str = DEFAULT_NAME,
                           package_version: str = '', python_language: bool = False) -> Dict[str, Any]:
    """Convert CustomResourceDefinition files or URLs to a package document file."""
    if not crd_file_paths:
        raise ValueError('At least one CRD file path is required')

    generator = PackageGenerator()
    generator.name = name or DEFAULT_NAME
    generator.version = package_version or None
    for crd_file_path in crd_file_paths:
        generator.add_manifests_from(crd_file_path)

    language = generator.python_language() if python_language else None
    package = generator.schema_package(language)

    if package_file_path:
        # nothing is written unless the whole document serializes
        content = json.dumps(package, indent=2)
        directory = os.path.dirname(package_file_path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory, exist_ok=True)
        with open(package_file_path, 'w', encoding='utf-8') as f:
            f.write(content)
    return package
