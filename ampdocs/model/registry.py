"""Child construction for plural and singular sub-record fields."""
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Type, Union

from .errors import MalformedSubRecordError, UnknownEntityKindError
from .leaf import LeafEntity


EntityKind = Union[str, Type[LeafEntity]]


class EntityRegistry:
    """Maps entity kind names to classes and builds children from raw data."""

    def __init__(self):
        self._kinds: Dict[str, Type[LeafEntity]] = {}

    def register(self, name: str, cls: Type[LeafEntity]) -> Type[LeafEntity]:
        """Register an entity class under a kind name.

        Args:
            name: Kind name used by callers (e.g., 'function')
            cls: LeafEntity subclass

        Returns:
            The registered class
        """
        if not (isinstance(cls, type) and issubclass(cls, LeafEntity)):
            raise TypeError(f"Cannot register {cls!r}: not a LeafEntity subclass")
        self._kinds[name] = cls
        return cls

    def resolve(self, kind: EntityKind) -> Type[LeafEntity]:
        """Turn a kind name (or class) into an entity class.

        Raises:
            UnknownEntityKindError: If the name is not registered
        """
        if isinstance(kind, type) and issubclass(kind, LeafEntity):
            return kind
        try:
            return self._kinds[kind]
        except (KeyError, TypeError):
            raise UnknownEntityKindError(
                f"Unknown entity kind {kind!r}. Known kinds: {', '.join(self.kinds())}"
            )

    def kinds(self) -> List[str]:
        return sorted(self._kinds)

    def build_one(self, kind: EntityKind, value: Any, parent: Optional[LeafEntity],
                  field: str = '') -> LeafEntity:
        """Build exactly one child entity from a single sub-record.

        Args:
            kind: Entity class or kind name
            value: Raw sub-record
            parent: Entity that owns the field
            field: Field name, for error messages

        Returns:
            The constructed child

        Raises:
            MalformedSubRecordError: If value is not a mapping
        """
        cls = self.resolve(kind)
        if not isinstance(value, Mapping):
            raise MalformedSubRecordError(
                field or cls.__name__, reason=f"expected a mapping, got {type(value).__name__}"
            )
        return cls(value, parent)

    def build_many(self, kind: EntityKind, values: Any, parent: Optional[LeafEntity],
                   field: str = '') -> Dict[str, LeafEntity]:
        """Build a name-keyed mapping of children from a list of sub-records.

        Children are built in input order. When two sub-records share a name the
        later one replaces the earlier one, while the key keeps its original
        position.

        Args:
            kind: Entity class or kind name
            values: List of raw sub-records (a single mapping counts as one item)
            parent: Entity that owns the field
            field: Field name, for error messages

        Returns:
            Dictionary of child name to child entity

        Raises:
            MalformedSubRecordError: If an item is not a mapping or has no name
        """
        cls = self.resolve(kind)
        field = field or cls.__name__

        if values is None:
            return {}
        if isinstance(values, Mapping):
            values = [values]
        elif not isinstance(values, (list, tuple)):
            raise MalformedSubRecordError(
                field, reason=f"expected a list, got {type(values).__name__}"
            )

        children: Dict[str, LeafEntity] = {}
        for index, item in enumerate(values):
            if not isinstance(item, Mapping):
                raise MalformedSubRecordError(
                    field, index, reason=f"expected a mapping, got {type(item).__name__}"
                )
            name = item.get('name')
            if name is None or name == '':
                raise MalformedSubRecordError(field, index)
            if isinstance(name, bool) or not isinstance(name, (str, int)):
                raise MalformedSubRecordError(
                    field, index, reason=f"'name' must be a string, got {type(name).__name__}"
                )
            children[name] = cls(item, parent)

        return children

    def build_list(self, kind: EntityKind, values: Any, parent: Optional[LeafEntity],
                   field: str = '') -> List[LeafEntity]:
        """Build an ordered list of children, keeping duplicates.

        Used where names legitimately repeat (doc-block tags such as @param).
        """
        cls = self.resolve(kind)
        field = field or cls.__name__

        if values is None:
            return []
        if isinstance(values, Mapping):
            values = [values]
        elif not isinstance(values, (list, tuple)):
            raise MalformedSubRecordError(
                field, reason=f"expected a list, got {type(values).__name__}"
            )

        children = []
        for index, item in enumerate(values):
            if not isinstance(item, Mapping):
                raise MalformedSubRecordError(
                    field, index, reason=f"expected a mapping, got {type(item).__name__}"
                )
            children.append(cls(item, parent))
        return children


# Shared registry populated by ampdocs.model.entities
default_registry = EntityRegistry()
