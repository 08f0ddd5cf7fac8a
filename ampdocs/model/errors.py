"""Error taxonomy for the documentation model."""


class AmpdocsError(Exception):
    """Base class for all documentation model errors."""


class UnknownFieldError(AmpdocsError, KeyError, AttributeError):
    """Raised when a field outside an entity's known keys is requested."""

    def __init__(self, kind: str, field: str):
        self.kind = kind
        self.field = field
        super().__init__(f"{kind} has no field '{field}'")

    def __str__(self):
        # KeyError.__str__ would wrap the message in quotes
        return self.args[0]


class MalformedSubRecordError(AmpdocsError, ValueError):
    """Raised when a child sub-record cannot be built or keyed."""

    def __init__(self, field: str, index: int = None, reason: str = "missing 'name'"):
        self.field = field
        self.index = index
        location = f"{field}[{index}]" if index is not None else field
        super().__init__(f"Malformed sub-record at {location}: {reason}")


class MalformedRecordError(AmpdocsError, TypeError):
    """Raised when a raw record is not a mapping."""


class FieldCoercionError(AmpdocsError, ValueError):
    """Raised when a scalar field cannot be coerced to its declared type."""

    def __init__(self, field: str, value, target: str):
        self.field = field
        self.value = value
        super().__init__(f"Cannot coerce {field}={value!r} to {target}")


class UnknownEntityKindError(AmpdocsError, LookupError):
    """Raised when a root kind name is not registered."""


class ExportFormatError(AmpdocsError, ValueError):
    """Raised when an export file does not have the expected shape."""
