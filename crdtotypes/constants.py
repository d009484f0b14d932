"""Constants for the crdtotypes package."""

# Default value for the generated package name
DEFAULT_NAME = 'crds'

BOOLEAN = 'boolean'
INTEGER = 'integer'
NUMBER = 'number'
STRING = 'string'
ARRAY = 'array'
OBJECT = 'object'

PRIMITIVE_TYPES = (BOOLEAN, INTEGER, NUMBER, STRING)

INT_OR_STRING_FLAG = 'x-kubernetes-int-or-string'
PRESERVE_UNKNOWN_FIELDS_FLAG = 'x-kubernetes-preserve-unknown-fields'

ANY_TYPE_REF = 'pulumi.json#/Any'
TYPE_REF_PREFIX = '#/types/'

KUBERNETES_PACKAGE = 'kubernetes'
OBJECT_META_TOKEN = 'kubernetes:meta/v1:ObjectMeta'

PYTHON_REQUIRES = {
    'pulumi': '>=3.0.0,<4.0.0',
    'pyyaml': '>=5.3',
    'requests': '>=2.21.0,<2.22.0',
}
