""" Registry of named object types accumulated during one translation run. """

import logging
from typing import Dict, Iterator, Optional

from crdtotypes.typespec import ObjectTypeSpec

logger = logging.getLogger(__name__)


class TypeRegistry:
    """
    Maps type names (and resource tokens) to object type definitions.

    Each name maps to exactly one definition; registering a name again
    replaces the earlier definition. A registry belongs to a single
    translation run and is not safe for concurrent registration.
    """

    def __init__(self) -> None:
        self._types: Dict[str, ObjectTypeSpec] = {}

    def register(self, name: str, type_spec: ObjectTypeSpec) -> None:
        """Register the definition under the given name, replacing any earlier one."""
        previous = self._types.get(name)
        if previous is not None and previous != type_spec:
            logger.debug("Replacing existing definition of type %s", name)
        self._types[name] = type_spec

    def remove(self, name: str) -> Optional[ObjectTypeSpec]:
        """Remove the definition registered under the given name and return it."""
        return self._types.pop(name, None)

    def get(self, name: str) -> Optional[ObjectTypeSpec]:
        return self._types.get(name)

    def __getitem__(self, name: str) -> ObjectTypeSpec:
        return self._types[name]

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def to_dict(self) -> Dict[str, dict]:
        """Render all definitions in the package document format, sorted by name."""
        return {name: self._types[name].to_dict() for name in sorted(self._types)}
