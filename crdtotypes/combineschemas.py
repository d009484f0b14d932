""" Flattening of allOf/anyOf sub-schemas into a single object schema. """

from typing import Any, Dict, List, Optional

from crdtotypes.common import json_key, nested_map, nested_string_slice
from crdtotypes.constants import OBJECT


def combine_schemas(combine_required: bool, *schemas: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Combine the `properties` of the given sub-schemas into a single object schema.

    Returns None if no schemas are given and the schema itself if only one is
    given. On a property name collision the later schema wins. If
    combine_required is set, the `required` lists of all sub-schemas are
    concatenated into the combined schema as well.
    """
    if len(schemas) == 0:
        return None
    if len(schemas) == 1:
        return schemas[0]

    combined_properties: Dict[str, Any] = {}
    combined_required: List[str] = []

    for schema in schemas:
        properties, _ = nested_map(schema, 'properties')
        for key in properties:
            property_schema, _ = nested_map(properties, key)
            combined_properties[json_key(key)] = property_schema
        if combine_required:
            required, found_required = nested_string_slice(schema, 'required')
            if found_required:
                combined_required.extend(required)

    combined_schema: Dict[str, Any] = {
        'type': OBJECT,
        'properties': combined_properties,
    }
    if combine_required:
        combined_schema['required'] = combined_required
    return combined_schema
