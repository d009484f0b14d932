"""
Assembly of the package document handed to the SDK generators.

The package document has the layout the generators consume:

    {
        "name": "crds",
        "version": "1.0.0",
        "types": {<token>: <object type>, ...},
        "resources": {<token>: <object type> + "inputProperties", ...},
        "allowedPackageNames": ["crds", "kubernetes", ...],
        "language": {...}
    }
"""

# pylint: disable=line-too-long

import logging
from typing import Any, Dict, Iterable, List, Optional

from crdtotypes.common import package_of
from crdtotypes.constants import DEFAULT_NAME, KUBERNETES_PACKAGE, OBJECT_META_TOKEN
from crdtotypes.packagevalidator import PackageValidationError, validate_package
from crdtotypes.typeregistry import TypeRegistry
from crdtotypes.typespec import ObjectTypeSpec

logger = logging.getLogger(__name__)


class BuildError(Exception):
    """Raised when the package document cannot be assembled."""


def allowed_package_names(resource_tokens: Iterable[str]) -> List[str]:
    """Return the sorted package names of the resource tokens, plus the default and kubernetes packages."""
    packages = {DEFAULT_NAME, KUBERNETES_PACKAGE}
    for resource_token in resource_tokens:
        packages.add(package_of(resource_token))
    return sorted(packages)


def _resource_spec(object_type: ObjectTypeSpec) -> Dict[str, Any]:
    resource = object_type.to_dict()
    resource['inputProperties'] = object_type.properties_to_dict()
    return resource


def build_package(registry: TypeRegistry, resource_tokens: List[str], include_object_meta_type: bool,
                  name: str = DEFAULT_NAME, version: Optional[str] = None,
                  language: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Build and validate the package document for the registered types and resources.

    If include_object_meta_type is set, a placeholder ObjectMeta type is part
    of the package so that the metadata references of the resources resolve.
    The placeholder only lives in the registry while the package is built.

    Raises:
        BuildError: If a resource token has no registered type or the
            assembled document fails validation.
    """
    displaced: Optional[ObjectTypeSpec] = None
    if include_object_meta_type:
        displaced = registry.remove(OBJECT_META_TOKEN)
        registry.register(OBJECT_META_TOKEN, ObjectTypeSpec())
    try:
        resources: Dict[str, Any] = {}
        for resource_token in resource_tokens:
            object_type = registry.get(resource_token)
            if object_type is None:
                raise BuildError(f'could not assemble package: no type registered for resource {resource_token}')
            resources[resource_token] = _resource_spec(object_type)

        document: Dict[str, Any] = {'name': name}
        if version:
            document['version'] = version
        document['types'] = registry.to_dict()
        document['resources'] = resources
        document['allowedPackageNames'] = allowed_package_names(resource_tokens)
        if language:
            document['language'] = language

        try:
            validate_package(document)
        except PackageValidationError as e:
            raise BuildError(f'could not assemble package: {e}') from e
    finally:
        if include_object_meta_type:
            registry.remove(OBJECT_META_TOKEN)
            if displaced is not None:
                registry.register(OBJECT_META_TOKEN, displaced)

    logger.info("Assembled package %s with %d types and %d resources", name, len(document['types']), len(resources))
    return document
