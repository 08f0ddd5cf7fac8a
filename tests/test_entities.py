"""Tests for the concrete documentation entities."""

import pytest
from ampdocs.model.entities import (
    Alias_,
    Argument,
    Class_,
    DocBlock,
    File,
    Function_,
    Hook,
    Method,
    Tag,
    Usage,
)
from ampdocs.model.errors import FieldCoercionError, MalformedSubRecordError, UnknownFieldError


@pytest.fixture
def function_record():
    return {
        'name': 'foo',
        'namespace': 'Bar',
        'line': 10,
        'end_line': 20,
        'arguments': [{'name': 'x'}, {'name': 'y'}],
        'hooks': [{'name': 'init'}],
        'doc': {'description': 'desc'},
    }


class TestFunction:
    """Function_ construction and resolution."""

    def test_end_to_end(self, function_record):
        function = Function_(function_record)

        assert function.get('name') == 'foo'

        arguments = function.get('arguments')
        assert list(arguments) == ['x', 'y']
        assert all(isinstance(argument, Argument) for argument in arguments.values())

        hooks = function.get('hooks')
        assert list(hooks) == ['init']
        assert isinstance(hooks['init'], Hook)

        doc = function.get('doc')
        assert isinstance(doc, DocBlock)
        assert doc.get('description') == 'desc'

    def test_missing_arguments_default_to_empty_mapping(self):
        function = Function_({'name': 'foo'})
        assert function.get('arguments') == {}
        assert function.get('hooks') == {}
        assert function.get('aliases') == {}
        assert function.get('doc') is None
        assert function.get('uses') is None

    def test_argument_parent_is_the_function(self, function_record):
        function = Function_(function_record)
        argument = function.get('arguments')['x']
        assert argument.parent is function
        assert argument.owner() is function

    def test_doc_parent_is_the_function(self, function_record):
        function = Function_(function_record)
        assert function.get('doc').parent is function

    def test_arguments_resolved_once(self, function_record):
        function = Function_(function_record)
        assert function.get('arguments') is function.get('arguments')

    def test_argument_without_name_rejected(self):
        function = Function_({'name': 'foo', 'arguments': [{'name': 'x'}, {'type': 'int'}]})
        with pytest.raises(MalformedSubRecordError):
            function.get('arguments')
        # The failing field stays unresolved; other fields still work
        assert not function.is_resolved('arguments')
        assert function.get('name') == 'foo'

    def test_line_numbers_coerced(self):
        function = Function_({'name': 'foo', 'line': '12', 'end_line': '30'})
        assert function.get('line') == 12
        assert function.get('end_line') == 30

    def test_bad_line_number_rejected(self):
        function = Function_({'name': 'foo', 'line': 'twelve'})
        with pytest.raises(FieldCoercionError):
            function.get('line')

    def test_unknown_field_rejected(self, function_record):
        function = Function_(function_record)
        with pytest.raises(UnknownFieldError):
            function.get('visibility')

    def test_aliases(self):
        function = Function_({'name': 'foo', 'aliases': [{'name': 'foo_alias', 'line': '3'}]})
        alias = function.get('aliases')['foo_alias']
        assert isinstance(alias, Alias_)
        assert alias.get('line') == 3

    def test_qualified_name(self, function_record):
        assert Function_(function_record).qualified_name() == 'Bar\\foo'
        assert Function_({'name': 'foo', 'namespace': 'global'}).qualified_name() == 'foo'
        assert Function_({'name': 'foo'}).qualified_name() == 'foo'

    def test_signature(self):
        function = Function_({
            'name': 'amp_get_permalink',
            'arguments': [
                {'name': '$post_id', 'type': 'int'},
                {'name': '$args', 'default': 'array()'},
            ],
        })
        assert function.signature() == 'amp_get_permalink( int $post_id, $args = array() )'
        assert Function_({'name': 'noop'}).signature() == 'noop()'


class TestUsage:
    """Usage blocks and the uses field."""

    def test_each_child_built_from_its_own_record(self):
        usage = Usage({
            'functions': [{'name': 'a', 'line': 1}, {'name': 'b', 'line': 2}],
            'methods': [{'name': 'm', 'class': 'Foo'}],
        })

        functions = usage.get('functions')
        assert functions['a'].get('line') == 1
        assert functions['b'].get('line') == 2
        assert functions['a'].get('name') == 'a'

        method = usage.get('methods')['m']
        assert isinstance(method, Method)
        assert method.get('name') == 'm'
        assert method.parent is usage

    def test_empty_usage(self):
        usage = Usage({})
        assert usage.get('functions') == {}
        assert usage.get('methods') == {}

    def test_uses_mapping_is_single_usage(self):
        function = Function_({'name': 'foo', 'uses': {'functions': [{'name': 'bar'}]}})
        uses = function.get('uses')
        assert isinstance(uses, Usage)
        assert uses.parent is function
        assert uses.user() is function

    def test_uses_list_is_keyed_by_name(self):
        function = Function_({'name': 'foo', 'uses': [{'name': 'first'}, {'name': 'second'}]})
        uses = function.get('uses')
        assert list(uses) == ['first', 'second']
        assert all(isinstance(usage, Usage) for usage in uses.values())

    def test_usages_flattened(self):
        function = Function_({
            'name': 'foo',
            'uses': {
                'functions': [{'name': 'bar'}],
                'methods': [{'name': 'baz', 'class': '\\Qux', 'static': True}],
            },
        })
        assert list(function.usages()) == ['bar', 'Qux::baz']

    def test_nested_function_usage(self):
        """A called function may carry its own usages."""
        usage = Usage({'functions': [{'name': 'outer', 'uses': {'functions': [{'name': 'inner'}]}}]})
        outer = usage.get('functions')['outer']
        inner = outer.get('uses').get('functions')['inner']
        assert inner.ancestor(Function_) is outer


class TestMethodAndClass:
    """Classes, methods and properties."""

    @pytest.fixture
    def klass(self):
        return Class_({
            'name': 'Options_Manager',
            'namespace': 'AmpProject\\AmpWP',
            'final': 'true',
            'implements': 'Service',
            'properties': [{'name': '$defaults', 'static': 1}],
            'methods': [
                {'name': 'get_option', 'static': True, 'visibility': 'public',
                 'arguments': [{'name': '$option'}]},
            ],
        })

    def test_flags_coerced(self, klass):
        assert klass.get('final') is True
        assert klass.get('abstract') is None
        assert klass.get('implements') == ['Service']
        assert klass.get('properties')['$defaults'].get('static') is True

    def test_method_inherits_function_fields(self, klass):
        method = klass.get('methods')['get_option']
        assert method.get('static') is True
        assert list(method.get('arguments')) == ['$option']
        assert method.get('arguments')['$option'].owner() is method

    def test_method_qualified_name(self, klass):
        method = klass.get('methods')['get_option']
        assert method.qualified_name() == 'AmpProject\\AmpWP\\Options_Manager::get_option'

    def test_method_without_class(self):
        assert Method({'name': 'orphan'}).qualified_name() == 'orphan'

    def test_missing_implements_is_empty_list(self):
        assert Class_({'name': 'Foo'}).get('implements') == []


class TestDocBlock:
    """Doc-block tags."""

    @pytest.fixture
    def doc(self):
        return DocBlock({
            'description': 'Summary.',
            'tags': [
                {'name': 'since', 'content': '1.6.0'},
                {'name': 'param', 'content': 'First.', 'types': ['int'], 'variable': '$a'},
                {'name': 'param', 'content': 'Second.', 'types': 'string|null', 'variable': '$b'},
            ],
        })

    def test_tags_keep_duplicates(self, doc):
        tags = doc.get('tags')
        assert len(tags) == 3
        assert all(isinstance(tag, Tag) for tag in tags)
        assert [tag.get('variable') for tag in doc.tags_named('@param')] == ['$a', '$b']

    def test_tag_types(self, doc):
        assert doc.tags_named('param')[1].get('types') == ['string', 'null']
        assert doc.tags_named('since')[0].get('types') == []

    def test_helpers(self, doc):
        assert doc.since() == '1.6.0'
        assert not doc.is_deprecated()
        assert DocBlock({}).since() is None
        assert DocBlock({}).get('tags') == []


class TestHookAndFile:
    """Hooks and file roots."""

    def test_hook_arguments_are_strings(self):
        hook = Hook({'name': 'amp_loaded', 'type': 'action', 'arguments': ['$post', 1], 'line': '7'})
        assert hook.get('arguments') == ['$post', '1']
        assert hook.get('line') == 7

    def test_hook_doc(self):
        hook = Hook({'name': 'init', 'doc': {'description': 'Fires.'}})
        assert hook.get('doc').get('description') == 'Fires.'
        assert hook.get('doc').parent is hook

    def test_file_children(self):
        file = File({
            'path': 'amp.php',
            'file': {'description': 'Plugin bootstrap.'},
            'functions': [{'name': 'amp_init'}],
            'classes': [{'name': 'AMP'}],
            'includes': [{'name': 'helpers.php', 'line': '4'}],
            'constants': [{'name': 'AMP__VERSION', 'value': "'2.0'"}],
        })
        assert file.get('file').get('description') == 'Plugin bootstrap.'
        assert file.get('functions')['amp_init'].parent is file
        assert file.get('classes')['AMP'].root_entity() is file
        assert file.get('includes')['helpers.php'].get('line') == 4
        assert file.get('constants')['AMP__VERSION'].get('value') == "'2.0'"
        assert file.get('hooks') == {}
        assert repr(file) == "File(name='amp.php')"
