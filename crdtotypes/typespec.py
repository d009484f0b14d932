"""
Type model produced by the schema translation.

A TypeSpec is a tagged union: its kind decides which of the other fields is
meaningful. Object types are never inlined; they are registered by name in a
TypeRegistry and referenced from a TypeSpec of kind REFERENCE.
"""

# pylint: disable=line-too-long

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from crdtotypes.constants import ANY_TYPE_REF, ARRAY, INTEGER, OBJECT, PRIMITIVE_TYPES, STRING, TYPE_REF_PREFIX


class TypeKind(Enum):
    """The variants of a TypeSpec."""
    PRIMITIVE = 'primitive'
    ARRAY = 'array'
    REFERENCE = 'reference'
    MAP = 'map'
    UNION = 'union'
    ANY = 'any'
    INT_OR_STRING = 'int-or-string'


@dataclass(frozen=True)
class TypeSpec:
    """
    A reference-or-inline type descriptor.

    Attributes:
        kind: The active variant.
        primitive: The primitive type name for PRIMITIVE.
        element: The item type for ARRAY, the value type for MAP.
        ref: The referenced type name for REFERENCE.
        members: The alternatives for UNION, in source order.
    """
    kind: TypeKind
    primitive: Optional[str] = None
    element: Optional['TypeSpec'] = None
    ref: Optional[str] = None
    members: Tuple['TypeSpec', ...] = ()

    @property
    def is_any(self) -> bool:
        return self.kind is TypeKind.ANY

    def to_dict(self) -> Dict[str, Any]:
        """Render the descriptor in the package document format."""
        if self.kind is TypeKind.PRIMITIVE:
            return {'type': self.primitive}
        if self.kind is TypeKind.ARRAY:
            return {'type': ARRAY, 'items': self.element.to_dict()}
        if self.kind is TypeKind.REFERENCE:
            return {'type': OBJECT, '$ref': TYPE_REF_PREFIX + self.ref}
        if self.kind is TypeKind.MAP:
            return {'type': OBJECT, 'additionalProperties': self.element.to_dict()}
        if self.kind is TypeKind.UNION:
            return {'oneOf': [member.to_dict() for member in self.members]}
        if self.kind is TypeKind.INT_OR_STRING:
            return {'oneOf': [{'type': INTEGER}, {'type': STRING}]}
        if self.kind is TypeKind.ANY:
            return {'$ref': ANY_TYPE_REF}
        raise ValueError(f'Unsupported type kind: {self.kind}')


def any_type() -> TypeSpec:
    return TypeSpec(TypeKind.ANY)


def int_or_string() -> TypeSpec:
    return TypeSpec(TypeKind.INT_OR_STRING)


def primitive(type_name: str) -> TypeSpec:
    if type_name not in PRIMITIVE_TYPES:
        raise ValueError(f'Not a primitive type: {type_name}')
    return TypeSpec(TypeKind.PRIMITIVE, primitive=type_name)


def array_of(items: TypeSpec) -> TypeSpec:
    return TypeSpec(TypeKind.ARRAY, element=items)


def map_of(values: TypeSpec) -> TypeSpec:
    return TypeSpec(TypeKind.MAP, element=values)


def arbitrary_json() -> TypeSpec:
    """A JSON object with arbitrary keys and values."""
    return map_of(any_type())


def reference(name: str) -> TypeSpec:
    return TypeSpec(TypeKind.REFERENCE, ref=name)


def union(members: List[TypeSpec]) -> TypeSpec:
    return TypeSpec(TypeKind.UNION, members=tuple(members))


class _NoValue:
    """Marks an absent default or constant; None is a valid JSON value."""

    def __repr__(self) -> str:
        return '<no value>'

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


_NO_VALUE = _NoValue()


@dataclass
class PropertySpec:
    """A field of an object type. Default and constant values are opaque JSON values."""
    type_spec: TypeSpec
    description: str = ''
    default: Any = _NO_VALUE
    const: Any = _NO_VALUE

    @property
    def has_default(self) -> bool:
        return self.default is not _NO_VALUE

    @property
    def has_const(self) -> bool:
        return self.const is not _NO_VALUE

    def to_dict(self) -> Dict[str, Any]:
        result = self.type_spec.to_dict()
        if self.description:
            result['description'] = self.description
        if self.has_default:
            result['default'] = self.default
        if self.has_const:
            result['const'] = self.const
        return result


@dataclass
class ObjectTypeSpec:
    """A named object type definition owned by a TypeRegistry."""
    type: str = OBJECT
    properties: Dict[str, PropertySpec] = field(default_factory=dict)
    required: List[str] = field(default_factory=list)
    description: str = ''

    def properties_to_dict(self) -> Dict[str, Any]:
        return {name: prop.to_dict() for name, prop in self.properties.items()}

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.type:
            result['type'] = self.type
        if self.properties:
            result['properties'] = self.properties_to_dict()
        if self.required:
            result['required'] = list(self.required)
        if self.description:
            result['description'] = self.description
        return result
