"""Tests for the trampolined arithmetic evaluator."""
import math

import pytest

from sexpr import (
    OPS,
    Evaluator,
    NonNumericOperand,
    OperatorMustBeString,
    UnknownOperator,
    execute,
    leval,
    parse,
)


class TestEval:
    def test_number_is_itself(self):
        assert leval(5.0) == 5.0
        assert leval(parse("-3.25")) == -3.25

    def test_nested(self):
        assert leval(parse("(+ 1 (* 2 3))")) == 7.0

    def test_variadic_add(self):
        assert execute("(+ 1 2 3 4)") == 10.0

    def test_variadic_mul(self):
        assert execute("(* 2 3 4)") == 24.0

    def test_binary_sub(self):
        assert execute("(- 10 3)") == 7.0

    def test_binary_div(self):
        assert execute("(/ 10 4)") == 2.5

    def test_binary_ignores_extra_operands(self):
        assert execute("(- 10 3 99)") == 7.0
        assert execute("(/ 10 4 0)") == 2.5

    def test_extra_operands_are_not_evaluated(self):
        assert execute("(- 10 3 (foo 1 2))") == 7.0

    def test_nested_subtraction(self):
        assert execute("(+ 1 (- 5 1))") == 5.0
        assert execute("(- (- 10 3) 2)") == 5.0
        assert execute("(/ (- 9 1) 2)") == 4.0

    def test_result_is_float(self):
        assert type(execute("(+ 1 2)")) is float

    def test_evaluator_stack_drains(self):
        e = Evaluator()
        assert e.eval(parse("(* (+ 1 2) (- 5 1) (/ 9 3))")) == 36.0
        assert e.stack == []

    def test_evaluator_reusable_after_error(self):
        e = Evaluator()
        with pytest.raises(NonNumericOperand):
            e.eval(parse("(+ 1 (* 2 x))"))
        assert e.stack == []
        assert e.eval(parse("(- 10 3)")) == 7.0


class TestDivision:
    def test_positive_over_zero(self):
        assert execute("(/ 1 0)") == math.inf

    def test_negative_over_zero(self):
        assert execute("(/ -1 0)") == -math.inf

    def test_over_negative_zero(self):
        assert execute("(/ 1 -0)") == -math.inf

    def test_zero_over_zero(self):
        assert math.isnan(execute("(/ 0 0)"))


class TestEvalErrors:
    def test_string_operand(self):
        with pytest.raises(NonNumericOperand) as info:
            leval("hi")
        assert info.value.value == "hi"
        assert "hi" in str(info.value)

    def test_bool_is_not_a_number(self):
        with pytest.raises(NonNumericOperand) as info:
            execute("(+ 1 T)")
        assert info.value.value is True

    def test_short_list(self):
        with pytest.raises(NonNumericOperand):
            execute("(+ 1)")

    def test_nested_bad_operand(self):
        with pytest.raises(NonNumericOperand) as info:
            execute("(+ 1 (* 2 x))")
        assert info.value.value == "x"

    def test_unknown_operator(self):
        with pytest.raises(UnknownOperator) as info:
            execute("(foo 1 2)")
        assert info.value.operator == "foo"
        assert "foo" in str(info.value)

    def test_operator_must_be_string(self):
        with pytest.raises(OperatorMustBeString) as info:
            execute("(1 2 3)")
        assert info.value.value == 1.0

    def test_list_operator(self):
        with pytest.raises(OperatorMustBeString):
            execute("((+ 1 2) 2 3)")

    def test_wrapped_document(self):
        with pytest.raises(NonNumericOperand):
            execute("(+ 1 2) (+ 3 4)")


class TestOps:
    def test_registry(self):
        assert sorted(OPS) == ["*", "+", "-", "/"]
        assert OPS["+"].seed == 0.0
        assert OPS["*"].seed == 1.0
        assert OPS["-"].arity == 2
        assert OPS["/"].arity == 2


class TestDeepNesting:
    def test_deep_expression(self):
        n = 50000
        v = parse("(+ 1 " * n + "1" + ")" * n)
        assert leval(v) == float(n + 1)

    def test_deep_error(self):
        n = 50000
        with pytest.raises(UnknownOperator):
            execute("(+ 1 " * n + "(nope 1 2)" + ")" * n)
