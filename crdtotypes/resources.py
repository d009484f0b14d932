"""
Custom resources and their registration as object types.

A CustomResource carries the group and kind of a CRD and the root OpenAPI v3
schema of each of its versions. add_resource_types registers one object type
per resource version under its resource token and adds the fields every
Kubernetes object has: apiVersion, kind and metadata.
"""

# pylint: disable=line-too-long

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from crdtotypes.common import nested_bool, nested_field, nested_map, nested_string
from crdtotypes.constants import KUBERNETES_PACKAGE, OBJECT_META_TOKEN, PRESERVE_UNKNOWN_FIELDS_FLAG, STRING
from crdtotypes.typeregistry import TypeRegistry
from crdtotypes.typeresolver import register_type
from crdtotypes.typespec import ObjectTypeSpec, PropertySpec, primitive, reference

logger = logging.getLogger(__name__)

CRD_API_GROUP = 'apiextensions.k8s.io'
CRD_KIND = 'CustomResourceDefinition'


class CrdError(Exception):
    """Raised when a document is not a usable CustomResourceDefinition."""


def get_token(group: str, version: str, kind: str) -> str:
    """Return the resource token for the given group, version and kind."""
    return f'{KUBERNETES_PACKAGE}:{group}/{version}:{kind}'


@dataclass
class CustomResource:
    """
    A custom resource kind and the root schema of each of its versions.

    Attributes:
        group: The API group, e.g. 'stable.example.com'.
        kind: The resource kind, e.g. 'CronTab'.
        schemas: Version name to root OpenAPI v3 schema, in declaration order.
    """
    group: str
    kind: str
    schemas: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def versions(self) -> List[str]:
        return list(self.schemas)

    def token(self, version: str) -> str:
        return get_token(self.group, version, self.kind)

    @classmethod
    def from_manifest(cls, manifest: Dict[str, Any]) -> 'CustomResource':
        """
        Read a decoded CustomResourceDefinition document.

        Supports apiextensions.k8s.io/v1 (schemas per version) and v1beta1
        (schemas per version or one top-level validation schema shared by
        all versions).
        """
        api_version, _ = nested_string(manifest, 'apiVersion')
        kind, _ = nested_string(manifest, 'kind')
        if kind != CRD_KIND or not api_version.startswith(CRD_API_GROUP + '/'):
            raise CrdError(f'Expected a {CRD_KIND} document, got kind "{kind}" with apiVersion "{api_version}"')

        group, found_group = nested_string(manifest, 'spec', 'group')
        resource_kind, found_kind = nested_string(manifest, 'spec', 'names', 'kind')
        if not found_group or not found_kind:
            raise CrdError('CustomResourceDefinition is missing spec.group or spec.names.kind')

        shared_schema, _ = nested_map(manifest, 'spec', 'validation', 'openAPIV3Schema')
        schemas: Dict[str, Dict[str, Any]] = {}
        versions, found_versions = nested_field(manifest, 'spec', 'versions')
        if found_versions and isinstance(versions, list):
            for version in versions:
                version_name, found_name = nested_string(version, 'name')
                if not found_name:
                    continue
                schema, found_schema = nested_map(version, 'schema', 'openAPIV3Schema')
                schemas[version_name] = schema if found_schema else shared_schema
        else:
            version_name, found_version = nested_string(manifest, 'spec', 'version')
            if found_version:
                schemas[version_name] = shared_schema
        if not schemas:
            raise CrdError(f'CustomResourceDefinition {resource_kind}.{group} declares no versions')
        return cls(group=group, kind=resource_kind, schemas=schemas)


def add_resource_types(resources: Iterable[CustomResource], registry: TypeRegistry) -> List[str]:
    """
    Register the root object type of every resource version and return their tokens.

    A version whose root schema sets x-kubernetes-preserve-unknown-fields
    gets an empty object type; properties declared next to the flag are
    ignored. A version with properties gets its schema registered. Versions
    with neither are skipped and produce no token.
    """
    resource_tokens: List[str] = []
    for resource in resources:
        for version, schema in resource.schemas.items():
            resource_token = resource.token(version)
            preserve_unknown_fields, _ = nested_bool(schema, PRESERVE_UNKNOWN_FIELDS_FLAG)
            _, found_properties = nested_map(schema, 'properties')
            if preserve_unknown_fields:
                object_type = ObjectTypeSpec()
                registry.register(resource_token, object_type)
            elif found_properties:
                object_type = register_type(schema, resource_token, registry)
            else:
                logger.info("Skipping %s: schema has no properties", resource_token)
                continue

            object_type.properties['apiVersion'] = PropertySpec(
                type_spec=primitive(STRING),
                const=f'{resource.group}/{version}')
            object_type.properties['kind'] = PropertySpec(
                type_spec=primitive(STRING),
                const=resource.kind)
            object_type.properties['metadata'] = PropertySpec(
                type_spec=reference(OBJECT_META_TOKEN))
            resource_tokens.append(resource_token)
            logger.info("Added resource type %s", resource_token)
    return resource_tokens
