"""Concrete documentation entities.

Field names follow the JSON export of the documentation extractor: a file
record holds functions, classes, hooks and includes; functions and methods
hold arguments, a doc-block, hooks and usages.
"""
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from .leaf import LeafEntity, as_bool, as_int, as_str, processes
from .registry import default_registry


_GLOBAL_NAMESPACES = {'', 'global', '\\'}


def _qualify(namespace: Optional[str], name: Optional[str]) -> Optional[str]:
    if name is None:
        return None
    if namespace is None or namespace in _GLOBAL_NAMESPACES:
        return name
    return f"{namespace.strip(chr(92))}\\{name}"


class _LineSpan:
    """Line coercion shared by every entity that records where it lives."""

    @processes('line')
    def _process_line(self, value):
        return as_int('line', value)

    @processes('end_line')
    def _process_end_line(self, value):
        return as_int('end_line', value)


class Alias_(_LineSpan, LeafEntity):
    """An alias under which a function is also reachable."""

    KNOWN_KEYS = ('name', 'line', 'end_line')


class Argument(LeafEntity):
    """A parameter of a function, method or hook."""

    KNOWN_KEYS = ('name', 'default', 'type')

    def owner(self) -> Optional[LeafEntity]:
        """Return the function, method or hook this argument belongs to."""
        return self.ancestor((Function_, Hook))


class Tag(LeafEntity):
    KNOWN_KEYS = ('name', 'content', 'types', 'variable')
    LIST_FIELDS = frozenset({'types'})

    @processes('types')
    def _process_types(self, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [part for part in value.split('|') if part]
        return [as_str('types', item) for item in value]


class DocBlock(LeafEntity):
    """A parsed doc-comment: summary, long description and tags."""

    KNOWN_KEYS = ('description', 'long_description', 'tags')
    LIST_FIELDS = frozenset({'tags'})

    @processes('tags')
    def _process_tags(self, value):
        # Tags repeat (one @param per argument), so keep them as a list
        return default_registry.build_list(Tag, value, self, field='tags')

    def tags_named(self, name: str) -> List[Tag]:
        """Return every tag with the given name, with or without a leading '@'."""
        name = name.lstrip('@')
        return [tag for tag in self.get('tags') if (tag.get('name') or '').lstrip('@') == name]

    def has_tag(self, name: str) -> bool:
        return bool(self.tags_named(name))

    def is_deprecated(self) -> bool:
        return self.has_tag('deprecated')

    def since(self) -> Optional[str]:
        """Content of the first @since tag, if any."""
        tags = self.tags_named('since')
        return tags[0].get('content') if tags else None


class Hook(_LineSpan, LeafEntity):
    """An action or filter fired from inside a function."""

    KNOWN_KEYS = ('name', 'line', 'end_line', 'type', 'arguments', 'doc')
    LIST_FIELDS = frozenset({'arguments'})

    @processes('arguments')
    def _process_arguments(self, value):
        # Hook arguments are the raw PHP expressions passed to do_action()
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return [as_str('arguments', item) for item in value]

    @processes('doc')
    def _process_doc(self, value):
        return default_registry.build_one(DocBlock, value, self, field='doc')


class Include_(LeafEntity):
    KNOWN_KEYS = ('name', 'line', 'type')

    @processes('line')
    def _process_line(self, value):
        return as_int('line', value)


class Constant(LeafEntity):
    KNOWN_KEYS = ('name', 'line', 'value')

    @processes('line')
    def _process_line(self, value):
        return as_int('line', value)


class Usage(LeafEntity):
    """Functions and methods invoked from inside a symbol's body."""

    KNOWN_KEYS = ('functions', 'methods')
    PLURAL_FIELDS = frozenset({'functions', 'methods'})

    @processes('functions')
    def _process_functions(self, value):
        return default_registry.build_many(Function_, value, self, field='functions')

    @processes('methods')
    def _process_methods(self, value):
        return default_registry.build_many(Method, value, self, field='methods')

    def user(self) -> Optional[LeafEntity]:
        """Return the function, method or file whose body holds these calls."""
        return self.ancestor((Function_, File))


def _build_uses(entity: LeafEntity, value: Any):
    # A single mapping describes one usage block; a list is keyed by name
    if value is None:
        return None
    if isinstance(value, Mapping):
        return default_registry.build_one(Usage, value, entity, field='uses')
    return default_registry.build_many(Usage, value, entity, field='uses')


class Function_(_LineSpan, LeafEntity):
    """A documented function."""

    KNOWN_KEYS = (
        'name',
        'namespace',
        'aliases',
        'line',
        'end_line',
        'arguments',
        'doc',
        'hooks',
        'uses',
    )
    PLURAL_FIELDS = frozenset({'aliases', 'arguments', 'hooks'})

    @processes('aliases')
    def _process_aliases(self, value):
        return default_registry.build_many(Alias_, value, self, field='aliases')

    @processes('arguments')
    def _process_arguments(self, value):
        return default_registry.build_many(Argument, value, self, field='arguments')

    @processes('doc')
    def _process_doc(self, value):
        return default_registry.build_one(DocBlock, value, self, field='doc')

    @processes('hooks')
    def _process_hooks(self, value):
        return default_registry.build_many(Hook, value, self, field='hooks')

    @processes('uses')
    def _process_uses(self, value):
        return _build_uses(self, value)

    def qualified_name(self) -> Optional[str]:
        return _qualify(self.get('namespace'), self.get('name'))

    def signature(self) -> str:
        """Render a PHP-style signature such as ``foo( $x, $y = null )``."""
        parts = []
        for argument in self.get('arguments').values():
            part = argument.get('name') or ''
            if argument.get('type'):
                part = f"{argument.get('type')} {part}"
            if argument.get('default') is not None:
                part = f"{part} = {argument.get('default')}"
            parts.append(part)
        inner = f" {', '.join(parts)} " if parts else ''
        return f"{self.qualified_name()}({inner})"

    def usages(self) -> Dict[str, LeafEntity]:
        """Flatten uses into one name-keyed mapping of called functions and methods."""
        uses = self.get('uses')
        if uses is None:
            return {}
        blocks = [uses] if isinstance(uses, Usage) else list(uses.values())
        called: Dict[str, LeafEntity] = {}
        for block in blocks:
            for function in block.get('functions').values():
                called[function.qualified_name()] = function
            for method in block.get('methods').values():
                called[method.qualified_name()] = method
        return called


class Method(Function_):
    """A class method, or a method call recorded in a usage block."""

    KNOWN_KEYS = Function_.KNOWN_KEYS + ('class', 'final', 'abstract', 'static', 'visibility')

    @processes('final')
    def _process_final(self, value):
        return as_bool('final', value)

    @processes('abstract')
    def _process_abstract(self, value):
        return as_bool('abstract', value)

    @processes('static')
    def _process_static(self, value):
        return as_bool('static', value)

    def qualified_name(self) -> Optional[str]:
        # Methods recorded in a usage block name their class; declared
        # methods take it from the enclosing class
        owner = self.get('class')
        if owner:
            owner = owner.lstrip('\\')
        elif isinstance(self.parent, Class_):
            owner = self.parent.qualified_name()
        name = self.get('name')
        if not owner:
            return name
        return f"{owner}::{name}"


class Property(_LineSpan, LeafEntity):
    KNOWN_KEYS = ('name', 'line', 'end_line', 'default', 'static', 'visibility', 'doc')

    @processes('static')
    def _process_static(self, value):
        return as_bool('static', value)

    @processes('doc')
    def _process_doc(self, value):
        return default_registry.build_one(DocBlock, value, self, field='doc')


class Class_(_LineSpan, LeafEntity):
    """A documented class with its properties and methods."""

    KNOWN_KEYS = (
        'name',
        'namespace',
        'line',
        'end_line',
        'final',
        'abstract',
        'extends',
        'implements',
        'properties',
        'methods',
        'doc',
    )
    PLURAL_FIELDS = frozenset({'properties', 'methods'})
    LIST_FIELDS = frozenset({'implements'})

    @processes('final')
    def _process_final(self, value):
        return as_bool('final', value)

    @processes('abstract')
    def _process_abstract(self, value):
        return as_bool('abstract', value)

    @processes('implements')
    def _process_implements(self, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return [as_str('implements', item) for item in value]

    @processes('properties')
    def _process_properties(self, value):
        return default_registry.build_many(Property, value, self, field='properties')

    @processes('methods')
    def _process_methods(self, value):
        return default_registry.build_many(Method, value, self, field='methods')

    @processes('doc')
    def _process_doc(self, value):
        return default_registry.build_one(DocBlock, value, self, field='doc')

    def qualified_name(self) -> Optional[str]:
        return _qualify(self.get('namespace'), self.get('name'))


class File(LeafEntity):
    """One source file of the export, the usual root of a document graph."""

    KNOWN_KEYS = (
        'file',
        'path',
        'root',
        'includes',
        'constants',
        'functions',
        'classes',
        'hooks',
        'uses',
    )
    PLURAL_FIELDS = frozenset({'includes', 'constants', 'functions', 'classes', 'hooks'})

    @processes('file')
    def _process_file(self, value):
        return default_registry.build_one(DocBlock, value, self, field='file')

    @processes('includes')
    def _process_includes(self, value):
        return default_registry.build_many(Include_, value, self, field='includes')

    @processes('constants')
    def _process_constants(self, value):
        return default_registry.build_many(Constant, value, self, field='constants')

    @processes('functions')
    def _process_functions(self, value):
        return default_registry.build_many(Function_, value, self, field='functions')

    @processes('classes')
    def _process_classes(self, value):
        return default_registry.build_many(Class_, value, self, field='classes')

    @processes('hooks')
    def _process_hooks(self, value):
        return default_registry.build_many(Hook, value, self, field='hooks')

    @processes('uses')
    def _process_uses(self, value):
        return _build_uses(self, value)

    def label(self) -> Optional[str]:
        return self.raw_fields.get('path')


default_registry.register('file', File)
default_registry.register('class', Class_)
default_registry.register('function', Function_)
default_registry.register('method', Method)
default_registry.register('property', Property)
default_registry.register('argument', Argument)
default_registry.register('doc', DocBlock)
default_registry.register('tag', Tag)
default_registry.register('hook', Hook)
default_registry.register('usage', Usage)
default_registry.register('alias', Alias_)
default_registry.register('include', Include_)
default_registry.register('constant', Constant)
