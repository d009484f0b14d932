"""
Common utility functions for crdtotypes.

Schema documents are decoded YAML/JSON and may carry any shape. The nested_*
helpers walk a path of keys and return a (value, found) pair; a value of the
wrong type is reported as not found.
"""

# pylint: disable=line-too-long

from typing import Any, Dict, List, Tuple


def nested_field(obj: Any, *fields: str) -> Tuple[Any, bool]:
    """Return the value found at the given path of keys, without copying."""
    val = obj
    for field in fields:
        if not isinstance(val, dict) or field not in val:
            return None, False
        val = val[field]
    return val, True


def nested_map(obj: Any, *fields: str) -> Tuple[Dict[str, Any], bool]:
    """Return the mapping found at the given path of keys."""
    val, found = nested_field(obj, *fields)
    if not found or not isinstance(val, dict):
        return {}, False
    return val, True


def nested_string(obj: Any, *fields: str) -> Tuple[str, bool]:
    """Return the string found at the given path of keys."""
    val, found = nested_field(obj, *fields)
    if not found or not isinstance(val, str):
        return '', False
    return val, True


def nested_bool(obj: Any, *fields: str) -> Tuple[bool, bool]:
    """Return the boolean found at the given path of keys."""
    val, found = nested_field(obj, *fields)
    if not found or not isinstance(val, bool):
        return False, False
    return val, True


def nested_string_slice(obj: Any, *fields: str) -> Tuple[List[str], bool]:
    """Return the list of strings found at the given path of keys. Every item must be a string."""
    val, found = nested_field(obj, *fields)
    if not found or not isinstance(val, list):
        return [], False
    if not all(isinstance(item, str) for item in val):
        return [], False
    return list(val), True


def nested_map_slice(obj: Any, *fields: str) -> Tuple[List[Dict[str, Any]], bool]:
    """Return the list of mappings found at the given path of keys. Every item must be a mapping."""
    val, found = nested_field(obj, *fields)
    if not found or not isinstance(val, list):
        return [], False
    if not all(isinstance(item, dict) for item in val):
        return [], False
    return list(val), True


def json_key(key: Any) -> str:
    """
    Return a mapping key as the string a JSON document would carry.

    YAML 1.1 reads keys such as `on` or `200` as booleans and integers.
    """
    if isinstance(key, bool):
        return 'true' if key else 'false'
    if key is None:
        return 'null'
    return str(key)


def title(string: str) -> str:
    """
    Upper-case the first letter of every word in the string.

    A word starts at the beginning of the string or after any character that
    is neither alphanumeric nor an underscore, so 'fooBar' becomes 'FooBar',
    'foo-bar' becomes 'Foo-Bar' and 'foo_bar' becomes 'Foo_bar'. Letters whose
    title case takes more than one character, such as 'ß', are kept as they are.
    """
    result = []
    prev_is_separator = True
    for char in string:
        if prev_is_separator and char.isalpha():
            titled = char.title()
            result.append(titled if len(titled) == 1 else char)
        else:
            result.append(char)
        prev_is_separator = not (char.isalnum() or char == '_')
    return ''.join(result)


def group_prefix(group: str) -> str:
    """Return the first DNS label of an API group, e.g. 'stable' for 'stable.example.com'."""
    return group.split('.')[0]


def package_of(token: str) -> str:
    """Return the package part of a token, e.g. 'kubernetes' for 'kubernetes:stable.example.com/v1:CronTab'."""
    return token.split(':', 1)[0]
