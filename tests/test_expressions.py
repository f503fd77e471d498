"""Expression builder."""

import pytest

from rivergen import expressions
from rivergen.errors import ConstantCondition
from rivergen.expressions import Expression


class TestRendering:

    def test_str_wraps_body(self):
        assert str(Expression("github.sha")) == "${{github.sha}}"

    def test_contexts(self):
        assert expressions.inputs("tag").body == "inputs.tag"
        assert expressions.secrets("TOKEN").body == "secrets.TOKEN"
        assert expressions.step_output("ver", "value").body == "steps.ver.outputs.value"

    def test_combinators_always_parenthesize(self):
        a, b, c = Expression("a"), Expression("b"), Expression("c")
        assert a.or_(b).and_(c).body == "( ( a || b ) && c )"

    def test_combinator_accepts_plain_string(self):
        assert Expression("a").or_("b").body == "( a || b )"


class TestLiterals:

    def test_string_literal_escapes_quotes(self):
        assert expressions.string_literal("it's").body == "'it''s'"

    @pytest.mark.parametrize("value, expected", [(True, "true"), (False, "false")])
    def test_bool_literal(self, value, expected):
        assert expressions.bool_literal(value).body == expected

    def test_int_literal(self):
        assert expressions.int_literal(-12).body == "-12"

    @pytest.mark.parametrize("value, expected", [(1.5, "1.5"), (2.0, "2.0"), (1e16, "10000000000000000")])
    def test_float_literal_uses_fixed_notation(self, value, expected):
        assert expressions.float_literal(value).body == expected


class TestConstantDetection:

    @pytest.mark.parametrize("value", ["", '""', "''", "false", "0", "-0", "null", " false "])
    def test_always_false(self, value):
        assert expressions.is_always_false(value)
        with pytest.raises(ConstantCondition):
            expressions.check_always_false(value)

    def test_quoted_false_is_not_always_false(self):
        assert not expressions.is_always_false("'false'")

    def test_always_true(self):
        assert expressions.is_always_true(expressions.bool_literal(True))
        with pytest.raises(ConstantCondition) as exc_info:
            expressions.check_always_true("true")
        assert exc_info.value.outcome is True

    def test_non_constant_passes(self):
        expressions.check_always_true("github.event_name == 'push'")
        expressions.check_always_false("github.event_name == 'push'")

    @pytest.mark.parametrize("value, outcome", [("${{ true }}", True), ("${{false}}", False), (" ${{ 0 }} ", False)])
    def test_rendered_constants_are_detected(self, value, outcome):
        with pytest.raises(ConstantCondition) as exc_info:
            expressions.check_always_true(value)
            expressions.check_always_false(value)
        assert exc_info.value.outcome is outcome

    def test_rendered_expression_passes(self):
        expressions.check_always_true(str(expressions.inputs("deploy")))
        expressions.check_always_false(str(expressions.inputs("deploy")))
