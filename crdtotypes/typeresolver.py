"""
OpenAPI v3 schema to type model resolution.

resolve_type turns a schema node into a TypeSpec and registers every object
type it discovers along the way. The checks in resolve_type run in a fixed
order and the first match wins; combinators and the Kubernetes extension
flags can overlap, so the order decides the result.
"""

# pylint: disable=too-many-return-statements, line-too-long

import logging
from typing import Any, Dict, List

from crdtotypes.combineschemas import combine_schemas
from crdtotypes.common import json_key, nested_bool, nested_field, nested_map, nested_map_slice, nested_string, nested_string_slice, title
from crdtotypes.constants import ARRAY, INT_OR_STRING_FLAG, OBJECT, PRESERVE_UNKNOWN_FIELDS_FLAG, PRIMITIVE_TYPES
from crdtotypes.typeregistry import TypeRegistry
from crdtotypes.typespec import (ObjectTypeSpec, PropertySpec, TypeSpec, any_type, arbitrary_json, array_of,
                                 int_or_string, map_of, primitive, reference, union)

logger = logging.getLogger(__name__)


def register_type(schema: Dict[str, Any], name: str, registry: TypeRegistry) -> ObjectTypeSpec:
    """
    Convert the given schema to an ObjectTypeSpec and register it under `name`.

    Every property schema is resolved recursively under the name
    `<name><Property>`, which registers nested object types as well.
    Descriptions and defaults are copied verbatim.
    """
    properties, found_properties = nested_map(schema, 'properties')
    description, _ = nested_string(schema, 'description')
    schema_type, _ = nested_string(schema, 'type')
    required, _ = nested_string_slice(schema, 'required')

    property_specs: Dict[str, PropertySpec] = {}
    for key in properties:
        property_name = json_key(key)
        property_schema, _ = nested_map(properties, key)
        property_description, _ = nested_string(property_schema, 'description')
        property_spec = PropertySpec(
            type_spec=resolve_type(property_schema, name + title(property_name), registry),
            description=property_description)
        default_value, found_default = nested_field(property_schema, 'default')
        if found_default:
            property_spec.default = default_value
        property_specs[property_name] = property_spec

    # CRDs frequently leave out `type: object` when properties are given
    if found_properties and not schema_type:
        schema_type = OBJECT

    object_type = ObjectTypeSpec(
        type=schema_type,
        properties=property_specs,
        required=list(dict.fromkeys(required)),
        description=description)
    registry.register(name, object_type)
    return object_type


def resolve_type(schema: Dict[str, Any], name: str, registry: TypeRegistry) -> TypeSpec:
    """
    Return the TypeSpec for an OpenAPI v3 schema node.

    Arrays, maps and combined schemas (oneOf, allOf, anyOf) are resolved
    recursively. Object schemas with properties are registered in the
    registry under `name` and returned as a reference. Anything that cannot
    be represented resolves to the any type.
    """
    if not schema or not isinstance(schema, dict):
        return any_type()

    int_or_str, found_int_or_str = nested_bool(schema, INT_OR_STRING_FLAG)
    if found_int_or_str and int_or_str:
        return int_or_string()

    # oneOf: a union of the alternatives, unless one of them is imprecise
    one_of, found_one_of = nested_map_slice(schema, 'oneOf')
    if found_one_of:
        members: List[TypeSpec] = []
        for i, one_of_schema in enumerate(one_of):
            member = resolve_type(one_of_schema, f'{name}OneOf{i}', registry)
            if member.is_any:
                logger.debug("Alternative %d of %s cannot be represented, using any", i, name)
                return any_type()
            members.append(member)
        return union(members)

    # allOf: all properties, all required fields
    all_of, found_all_of = nested_map_slice(schema, 'allOf')
    if found_all_of:
        return resolve_type(combine_schemas(True, *all_of), name, registry)

    # anyOf: all properties, every one of them optional
    any_of, found_any_of = nested_map_slice(schema, 'anyOf')
    if found_any_of:
        return resolve_type(combine_schemas(False, *any_of), name, registry)

    preserve_unknown_fields, found_preserve_unknown_fields = nested_bool(schema, PRESERVE_UNKNOWN_FIELDS_FLAG)
    if found_preserve_unknown_fields and preserve_unknown_fields:
        return arbitrary_json()

    schema_type, found_schema_type = nested_string(schema, 'type')
    if not found_schema_type:
        logger.debug("Schema for %s has no type, using any", name)
        return any_type()

    if schema_type == ARRAY:
        items, _ = nested_map(schema, 'items')
        return array_of(resolve_type(items, name, registry))

    if schema_type == OBJECT:
        register_type(schema, name, registry)
        additional_properties, found_additional_properties = nested_map(schema, 'additionalProperties')
        if found_additional_properties:
            return map_of(resolve_type(additional_properties, name, registry))
        # `additionalProperties: true` is the same as `additionalProperties: {}`
        additional_properties_is_true, found_additional_properties_is_true = nested_bool(schema, 'additionalProperties')
        if found_additional_properties_is_true and additional_properties_is_true:
            return arbitrary_json()
        _, found_properties = nested_map(schema, 'properties')
        if not found_properties:
            return arbitrary_json()
        return reference(name)

    if schema_type in PRIMITIVE_TYPES:
        return primitive(schema_type)

    logger.debug("Unsupported type %s for %s, using any", schema_type, name)
    return any_type()
