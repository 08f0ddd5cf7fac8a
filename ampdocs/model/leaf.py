"""Base class for documentation model nodes.

Every node in the documentation graph is a LeafEntity built from a raw record
plus an optional parent. Nothing is resolved up front: a field is only turned
into its final typed form the first time somebody asks for it, and the result
is cached for every later read.

Concrete entities declare which fields they understand (KNOWN_KEYS) and attach
per-field processors with the @processes decorator:

    class Argument(LeafEntity):
        KNOWN_KEYS = ('name', 'default', 'type')

    class Function_(LeafEntity):
        KNOWN_KEYS = ('name', 'line', 'arguments')
        PLURAL_FIELDS = frozenset({'arguments'})

        @processes('line')
        def _process_line(self, value):
            return as_int('line', value)

Declared fields without a processor are passed through unchanged.
"""
import weakref
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional, Tuple, Type, Union

from .errors import FieldCoercionError, UnknownFieldError
from .record import RecordView


_TRUE_STRINGS = {'true', '1', 'yes', 'on'}
_FALSE_STRINGS = {'false', '0', 'no', 'off', ''}

# Levels of children to_dict expands unless told otherwise
DEFAULT_DEPTH = 16


def processes(field: str) -> Callable:
    """Mark a method as the processor for a single known field.

    Args:
        field: Name of the field the decorated method materializes

    Returns:
        Decorator that tags the method and returns it unchanged
    """
    def decorator(func: Callable) -> Callable:
        func._processes_field = field
        return func
    return decorator


def as_int(field: str, value: Any) -> Optional[int]:
    """Coerce a scalar field (line numbers mostly) to int."""
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise FieldCoercionError(field, value, 'int')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise FieldCoercionError(field, value, 'int')


def as_bool(field: str, value: Any) -> Optional[bool]:
    """Coerce a flag field to bool."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise FieldCoercionError(field, value, 'bool')


def as_str(field: str, value: Any) -> Optional[str]:
    """Coerce a scalar field to str, leaving None alone."""
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise FieldCoercionError(field, value, 'str')
    return str(value)


class LeafEntity:
    """A node in the documentation object graph."""

    KNOWN_KEYS: Tuple[str, ...] = ()
    # Absent plural fields resolve to {} and absent list fields to [];
    # everything else resolves to None.
    PLURAL_FIELDS: FrozenSet[str] = frozenset()
    LIST_FIELDS: FrozenSet[str] = frozenset()

    _processors: Dict[str, Callable] = {}
    _known: FrozenSet[str] = frozenset()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        processors: Dict[str, Callable] = {}
        # Walk base classes first so subclasses can override a processor
        for klass in reversed(cls.__mro__):
            for attr in vars(klass).values():
                field = getattr(attr, '_processes_field', None)
                if field is not None:
                    processors[field] = attr

        known = frozenset(cls.KNOWN_KEYS)
        stray = (set(processors) | cls.PLURAL_FIELDS | cls.LIST_FIELDS) - known
        if stray:
            raise TypeError(
                f"{cls.__name__} declares processors or defaults for unknown fields: "
                f"{', '.join(sorted(stray))}"
            )

        cls._processors = processors
        cls._known = known

    def __init__(self, raw: Mapping[str, Any], parent: Optional['LeafEntity'] = None):
        """Initialize the entity without resolving any field.

        Args:
            raw: Raw record this entity is built from
            parent: Enclosing entity, or None for a root
        """
        self._raw = RecordView(raw, self.KNOWN_KEYS)
        self._resolved: Dict[str, Any] = {}
        self._parent_ref = weakref.ref(parent) if parent is not None else None

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def raw_fields(self) -> RecordView:
        """Raw input restricted to the known keys."""
        return self._raw

    @property
    def resolved_fields(self) -> Mapping[str, Any]:
        """Read-only snapshot of the fields materialized so far."""
        return MappingProxyType(self._resolved)

    @property
    def parent(self) -> Optional['LeafEntity']:
        """Enclosing entity (non-owning), or None for a root."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def has(self, field: str) -> bool:
        """Check whether field is one of this entity's known keys."""
        return field in self._known

    def is_resolved(self, field: str) -> bool:
        return field in self._resolved

    def get(self, field: str) -> Any:
        """Return the materialized value of a known field.

        The first read runs the field's processor (or the empty default when
        the raw record lacks the field); every later read returns the cached
        value.

        Args:
            field: Known field name

        Returns:
            Resolved field value

        Raises:
            UnknownFieldError: If field is not in KNOWN_KEYS
        """
        if field not in self._known:
            raise UnknownFieldError(self.kind, field)

        if field in self._resolved:
            return self._resolved[field]

        if not self._raw.has(field):
            value = self._default_for(field)
        else:
            raw_value = self._raw[field]
            processor = self._processors.get(field)
            value = processor(self, raw_value) if processor is not None else raw_value

        self._resolved[field] = value
        return value

    def _default_for(self, field: str) -> Any:
        if field in self.PLURAL_FIELDS:
            return {}
        if field in self.LIST_FIELDS:
            return []
        return None

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal attribute lookup fails
        if name.startswith('_'):
            raise AttributeError(name)
        return self.get(name)

    def ancestor(self, kind: Union[Type['LeafEntity'], Tuple[type, ...]]) -> Optional['LeafEntity']:
        """Find the nearest enclosing entity of the given type.

        Args:
            kind: LeafEntity subclass (or tuple of subclasses) to look for

        Returns:
            Closest matching ancestor, or None
        """
        current = self.parent
        while current is not None:
            if isinstance(current, kind):
                return current
            current = current.parent
        return None

    def root_entity(self) -> 'LeafEntity':
        """Return the top-most entity reachable through parent links."""
        current = self
        while current.parent is not None:
            current = current.parent
        return current

    def label(self) -> Optional[str]:
        """Short display name: the raw name when the entity has one."""
        if 'name' in self._known:
            return self._raw.get('name')
        return None

    def to_dict(self, depth: Optional[int] = DEFAULT_DEPTH) -> Dict[str, Any]:
        """Resolve every known field and return plain data.

        Args:
            depth: How many levels of child entities to expand. Children past
                the limit are rendered as their label. None expands everything,
                which never terminates on a self-referential record.

        Returns:
            Dictionary of field name to plain value
        """
        return {field: _to_plain(self.get(field), depth) for field in self.KNOWN_KEYS}

    def __repr__(self):
        label = self.label()
        if label is None:
            return f"{self.kind}()"
        return f"{self.kind}(name={label!r})"


def _to_plain(value: Any, depth: Optional[int]) -> Any:
    if isinstance(value, LeafEntity):
        if depth is not None and depth <= 0:
            return value.label()
        return value.to_dict(None if depth is None else depth - 1)
    if isinstance(value, dict):
        return {key: _to_plain(item, depth) for key, item in value.items()}
    if isinstance(value, list):
        return [_to_plain(item, depth) for item in value]
    return value
