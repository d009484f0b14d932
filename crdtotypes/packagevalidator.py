"""Structural validation of package documents.

Checks the document layout against a JSON schema and makes sure every type
reference resolves, so that a package handed to the SDK generators has no
dangling references.
"""

import json
from typing import Any, Dict, Iterator, List, Tuple

from jsonpointer import JsonPointer
from jsonschema import Draft202012Validator

from crdtotypes.common import package_of
from crdtotypes.constants import ANY_TYPE_REF, TYPE_REF_PREFIX

TYPE_KINDS = ['boolean', 'integer', 'number', 'string', 'array', 'object']

PACKAGE_SCHEMA: Dict[str, Any] = {
    '$schema': 'https://json-schema.org/draft/2020-12/schema',
    'type': 'object',
    'required': ['name', 'types', 'resources'],
    'properties': {
        'name': {'type': 'string', 'minLength': 1},
        'version': {'type': 'string'},
        'types': {
            'type': 'object',
            'additionalProperties': {'$ref': '#/$defs/objectType'},
        },
        'resources': {
            'type': 'object',
            'additionalProperties': {'$ref': '#/$defs/resource'},
        },
        'allowedPackageNames': {
            'type': 'array',
            'items': {'type': 'string'},
            'uniqueItems': True,
        },
        'language': {'type': 'object'},
    },
    '$defs': {
        'typeSpec': {
            'type': 'object',
            'properties': {
                'type': {'enum': TYPE_KINDS},
                '$ref': {'type': 'string', 'minLength': 1},
                'items': {'$ref': '#/$defs/typeSpec'},
                'additionalProperties': {'$ref': '#/$defs/typeSpec'},
                'oneOf': {'type': 'array', 'items': {'$ref': '#/$defs/typeSpec'}},
            },
            'anyOf': [
                {'required': ['type']},
                {'required': ['$ref']},
                {'required': ['oneOf']},
            ],
        },
        'property': {
            '$ref': '#/$defs/typeSpec',
            'properties': {
                'description': {'type': 'string'},
            },
        },
        'properties': {
            'type': 'object',
            'additionalProperties': {'$ref': '#/$defs/property'},
        },
        'objectType': {
            'type': 'object',
            'properties': {
                'type': {'type': 'string'},
                'properties': {'$ref': '#/$defs/properties'},
                'required': {'type': 'array', 'items': {'type': 'string'}},
                'description': {'type': 'string'},
            },
        },
        'resource': {
            '$ref': '#/$defs/objectType',
            'properties': {
                'inputProperties': {'$ref': '#/$defs/properties'},
            },
        },
    },
}


class PackageValidationError(Exception):
    """
    Raised when a package document fails validation.

    Attributes:
        errors: The individual validation messages.
    """

    def __init__(self, errors: List[str]) -> None:
        self.errors = errors
        super().__init__('; '.join(errors))


def _iter_type_refs(type_spec: Dict[str, Any], path: str) -> Iterator[Tuple[str, str]]:
    """Yield (path, ref) for the type spec and every type spec nested in it."""
    if isinstance(type_spec.get('$ref'), str):
        yield path, type_spec['$ref']
    for key in ('items', 'additionalProperties'):
        if isinstance(type_spec.get(key), dict):
            yield from _iter_type_refs(type_spec[key], f'{path}/{key}')
    for i, member in enumerate(type_spec.get('oneOf', [])):
        yield from _iter_type_refs(member, f'{path}/oneOf/{i}')


def _iter_refs(object_types: Dict[str, Any], path: str) -> Iterator[Tuple[str, str]]:
    """Yield (path, ref) for every reference made by the properties of the object types."""
    for token, object_type in object_types.items():
        for section in ('properties', 'inputProperties'):
            for property_name, property_spec in object_type.get(section, {}).items():
                yield from _iter_type_refs(property_spec, f'{path}/{token}/{section}/{property_name}')


def check_schema(document: Dict[str, Any]) -> List[str]:
    """Return the layout errors of the document."""
    validator = Draft202012Validator(PACKAGE_SCHEMA)
    errors = sorted(validator.iter_errors(document), key=lambda e: [str(p) for p in e.absolute_path])
    return [f"/{'/'.join(str(p) for p in error.absolute_path)}: {error.message}" for error in errors]


def check_references(document: Dict[str, Any]) -> List[str]:
    """Return an error for every reference that does not resolve to a type of the document."""
    errors: List[str] = []
    for section in ('types', 'resources'):
        for path, ref in _iter_refs(document.get(section, {}), f'/{section}'):
            if ref == ANY_TYPE_REF:
                continue
            if not ref.startswith(TYPE_REF_PREFIX):
                errors.append(f'{path}: unsupported reference "{ref}"')
                continue
            token = ref[len(TYPE_REF_PREFIX):]
            if JsonPointer.from_parts(['types', token]).resolve(document, None) is None:
                errors.append(f'{path}: type "{token}" is not defined')
    return errors


def check_package_names(document: Dict[str, Any]) -> List[str]:
    """Return an error for every token whose package is not allowed."""
    allowed = set(document.get('allowedPackageNames', [])) | {document.get('name')}
    errors: List[str] = []
    for section in ('types', 'resources'):
        for token in document.get(section, {}):
            if ':' in token and package_of(token) not in allowed:
                errors.append(f'/{section}/{token}: package "{package_of(token)}" is not allowed')
    return errors


def validate_package(document: Dict[str, Any]) -> None:
    """
    Validate a package document.

    Raises:
        PackageValidationError: If the layout is wrong, a reference does not
            resolve or a token belongs to a package that is not allowed.
    """
    errors = check_schema(document)
    if errors:
        raise PackageValidationError(errors)
    errors = check_references(document) + check_package_names(document)
    if errors:
        raise PackageValidationError(errors)


def validate_package_file(package_file_path: str) -> None:
    """Validate a package document file, raising PackageValidationError on failure."""
    with open(package_file_path, 'r', encoding='utf-8') as f:
        document = json.load(f)
    if not isinstance(document, dict):
        raise PackageValidationError([f'{package_file_path}: expected a JSON object'])
    validate_package(document)
    print(f'{package_file_path}: valid')
