import pytest

from bigcalc.errors import (
    DoubleNegationError,
    InvalidExpressionError,
    NestingTooDeepError,
    UnclosedParenthesisError,
)
from bigcalc.lexer import RESULT_VARIABLE, tokenize
from bigcalc.nodes import (
    AddOp,
    Assign,
    BareExpr,
    BitwiseOp,
    Call,
    Literal,
    MulOp,
    Negate,
    Parenthesized,
    Variable,
)
from bigcalc.parser import Parser, parse


def parse_text(text):
    return parse(tokenize(text))


def test_parse_precedence_tree():
    tree = parse_text("1+123*(12/234)")
    assert tree == BareExpr(
        AddOp(
            '+',
            Literal(1),
            MulOp('*', Literal(123), Parenthesized(MulOp('/', Literal(12), Literal(234)))),
        )
    )


def test_parse_multiplication_binds_tighter_on_the_left():
    assert parse_text("2*3+4") == BareExpr(
        AddOp('+', MulOp('*', Literal(2), Literal(3)), Literal(4))
    )


def test_parse_bitwise_is_loosest():
    assert parse_text("1+2 << 3") == BareExpr(
        BitwiseOp('<<', AddOp('+', Literal(1), Literal(2)), Literal(3))
    )


@pytest.mark.parametrize("text, op", [
    ("a | b", '|'), ("a & b", '&'), ("a ^ b", '^'), ("a << b", '<<'), ("a >> b", '>>'),
])
def test_parse_each_bitwise_operator(text, op):
    assert parse_text(text) == BareExpr(BitwiseOp(op, Variable('a'), Variable('b')))


def test_parse_assignment():
    assert parse_text("x = 5") == Assign('x', Literal(5))


def test_parse_assignment_requires_identifier_first():
    with pytest.raises(InvalidExpressionError):
        parse_text("5 = x")
    with pytest.raises(InvalidExpressionError):
        parse_text("$ = 1")


def test_parse_assignment_with_empty_right_hand_side():
    with pytest.raises(InvalidExpressionError):
        parse_text("x =")


def test_parse_leading_negation():
    assert parse_text("-x") == BareExpr(Negate(Variable('x')))
    assert parse_text("-2*3") == BareExpr(Negate(MulOp('*', Literal(2), Literal(3))))


def test_parse_negation_then_subtraction():
    assert parse_text("-1-2") == BareExpr(AddOp('-', Negate(Literal(1)), Literal(2)))


def test_parse_negated_shift_amount():
    assert parse_text("1 << -1") == BareExpr(BitwiseOp('<<', Literal(1), Negate(Literal(1))))


def test_parse_double_negation_rejected():
    with pytest.raises(DoubleNegationError):
        parse_text("--3")
    with pytest.raises(DoubleNegationError):
        parse_text("x = - -3")


def test_parse_negation_inside_parentheses():
    assert parse_text("-(-3)") == BareExpr(Negate(Parenthesized(Negate(Literal(3)))))


def test_parse_result_variable():
    assert parse_text("$ + 1") == BareExpr(AddOp('+', Variable(RESULT_VARIABLE), Literal(1)))


def test_parse_function_call_arguments():
    assert parse_text("pow(2, 1+1)") == BareExpr(
        Call('pow', [Literal(2), AddOp('+', Literal(1), Literal(1))])
    )


def test_parse_function_call_nested_commas_belong_to_inner_call():
    assert parse_text("pow(pow(2, 3), 2)") == BareExpr(
        Call('pow', [Call('pow', [Literal(2), Literal(3)]), Literal(2)])
    )


def test_parse_function_call_without_arguments():
    assert parse_text("sqrt()") == BareExpr(Call('sqrt', []))


def test_parse_function_call_empty_argument_rejected():
    with pytest.raises(InvalidExpressionError):
        parse_text("pow(1,,2)")
    with pytest.raises(InvalidExpressionError):
        parse_text("pow(1,)")


def test_parse_unclosed_parenthesis():
    with pytest.raises(UnclosedParenthesisError):
        parse_text("(1+2")
    with pytest.raises(UnclosedParenthesisError):
        parse_text("sqrt(4")


def test_parse_parenthesis_must_span_the_factor():
    with pytest.raises(InvalidExpressionError):
        parse_text("(1)(2)")
    with pytest.raises(InvalidExpressionError):
        parse_text("1)")


def test_parse_empty_input():
    with pytest.raises(InvalidExpressionError):
        parse([])


def test_parse_operator_without_operand():
    with pytest.raises(InvalidExpressionError):
        parse_text("*1")
    with pytest.raises(InvalidExpressionError):
        parse_text("1 +")


def test_parse_stray_comma_at_top_level():
    with pytest.raises(InvalidExpressionError):
        parse_text("1, 2")


def test_parser_class_matches_function():
    tokens = tokenize("a = 1 + 2")
    assert Parser(tokens).parse() == parse(tokens)


# Known boundary: the right-hand side of a split is parsed one level tighter,
# so a second operator of the same level outside parentheses is rejected.

@pytest.mark.parametrize("text", ["1+2+3", "1-2-3", "2*3*4", "8/2/2", "1|2|4", "1<<2<<3"])
def test_parse_same_level_chain_is_rejected(text):
    with pytest.raises(InvalidExpressionError):
        parse_text(text)


def test_parse_same_level_chain_with_parentheses_is_accepted():
    assert parse_text("(1+2)+3") == BareExpr(
        AddOp('+', Parenthesized(AddOp('+', Literal(1), Literal(2))), Literal(3))
    )


def test_parse_multiplication_after_subtraction_rejected():
    # '-' after an operator is scanned as subtraction, not negation
    with pytest.raises(InvalidExpressionError):
        parse_text("2*-3")


def test_parse_bitwise_inside_parentheses_rejected():
    # parenthesized sub-expressions are additive expressions
    with pytest.raises(InvalidExpressionError):
        parse_text("(1 << 2) + 1")


def test_parse_deeply_nested_parentheses():
    with pytest.raises(NestingTooDeepError):
        parse_text("(" * 400 + "1" + ")" * 400)


def test_parse_moderately_nested_parentheses():
    tree = parse_text("(" * 20 + "1" + ")" * 20).expr
    for _ in range(20):
        assert isinstance(tree, Parenthesized)
        tree = tree.expr
    assert tree == Literal(1)
