import pytest

from brno.ast import (
    Assign, Binary, Block, Break, Call, Continue, ExprStmt, For, FunctionDecl,
    FunctionExpr, Get, If, Import, Let, Literal, Postfix, Return, Try, Unary,
    Variable, While,
)
from brno.errors import ParseError
from brno.parser import parse_program


def expr(source):
    stmts = parse_program(source + ' piča')
    assert len(stmts) == 1 and isinstance(stmts[0], ExprStmt)
    return stmts[0].expr


def test_let_with_and_without_initializer():
    assert parse_program('nech x = 1 piča nech y piča') == [
        Let('x', Literal(1.0)),
        Let('y', None),
    ]


def test_statement_lines():
    stmts = parse_program('nech a = 1 piča\n\nvyblij(a) piča')
    assert [s.line for s in stmts] == [1, 3]


def test_precedence():
    assert expr('1 + 2 * 3') == Binary('+', Literal(1.0), Binary('*', Literal(2.0), Literal(3.0)))
    assert expr('a || b && c') == Binary('||', Variable('a'), Binary('&&', Variable('b'), Variable('c')))
    assert expr('a ?? b || c') == Binary('??', Variable('a'), Binary('||', Variable('b'), Variable('c')))
    assert expr('-a ** 2') == Binary('**', Unary('-', Variable('a')), Literal(2.0))
    assert expr('1 < 2 == zhasni') == Binary('==', Binary('<', Literal(1.0), Literal(2.0)), Literal(False))


def test_power_is_right_associative():
    assert expr('2 ** 3 ** 2') == Binary('**', Literal(2.0), Binary('**', Literal(3.0), Literal(2.0)))


def test_minus_is_left_associative():
    assert expr('5 - 2 - 1') == Binary('-', Binary('-', Literal(5.0), Literal(2.0)), Literal(1.0))


def test_assignment_is_right_associative():
    assert expr('a = b = 1') == Assign('a', Assign('b', Literal(1.0)))


def test_compound_assignment_desugars():
    assert expr('x += 2') == Assign('x', Binary('+', Variable('x'), Literal(2.0)))
    assert expr('x %= 2') == Assign('x', Binary('%', Variable('x'), Literal(2.0)))


def test_invalid_assignment_target():
    with pytest.raises(ParseError) as exc:
        parse_program('a.b = 1 piča')
    assert exc.value.lexeme == '='


def test_postfix_chain():
    assert expr('a.b(c).d') == Get(Call(Get(Variable('a'), 'b'), [Variable('c')]), 'd')
    assert expr('i++') == Postfix('i', '++')


def test_postfix_increment_needs_variable():
    with pytest.raises(ParseError):
        parse_program('f()++ piča')


def test_array_literal_becomes_constructor_call():
    assert expr('[1, "a", []]') == Call(Variable('__arr'), [
        Literal(1.0), Literal('a'), Call(Variable('__arr'), []),
    ])


def test_print_sugar():
    assert parse_program('vyblij(1) piča') == [ExprStmt(Call(Variable('vyblij'), [Literal(1.0)]))]


def test_missing_terminator():
    with pytest.raises(ParseError) as exc:
        parse_program('nech x = 1\nnech y = 2 piča')
    assert "expected 'piča'" in str(exc.value)
    assert exc.value.lexeme == 'nech'
    assert exc.value.line == 2


def test_function_declaration_and_expression():
    stmts = parse_program('rob f(a, b) { vrat a piča } nech g = rob (x) { vrat x piča } piča')
    assert stmts[0] == FunctionDecl('f', ['a', 'b'], [Return(Variable('a'))])
    assert stmts[1] == Let('g', FunctionExpr(['x'], [Return(Variable('x'))]))


def test_if_else_and_while():
    stmts = parse_program('esli (a) { b() piča } inak c() piča šalina (zhasni) {}')
    assert stmts[0] == If(
        Variable('a'),
        Block([ExprStmt(Call(Variable('b'), []))]),
        ExprStmt(Call(Variable('c'), [])),
    )
    assert stmts[1] == While(Literal(False), Block([]))


def test_for_loop_is_one_node():
    stmts = parse_program('okruh (nech i = 0 piča i < 3 piča i++) { přeskoč piča vypadni piča }')
    assert stmts == [For(
        Let('i', Literal(0.0)),
        Binary('<', Variable('i'), Literal(3.0)),
        Postfix('i', '++'),
        Block([Continue(), Break()]),
    )]


def test_for_loop_clauses_are_optional():
    assert parse_program('okruh (piča piča) {}') == [For(None, None, None, Block([]))]


def test_import_path_forms():
    assert parse_program('vokno "a.brno" piča') == [Import(Literal('a.brno'))]
    assert parse_program('vokno cesta + ".brno" piča') == [
        Import(Binary('+', Variable('cesta'), Literal('.brno'))),
    ]


def test_try_catch_finally():
    stmts = parse_program('zkus { a() piča } chyť (e) { b() piča } potom { c() piča }')
    assert stmts == [Try(
        [ExprStmt(Call(Variable('a'), []))],
        'e',
        [ExprStmt(Call(Variable('b'), []))],
        [ExprStmt(Call(Variable('c'), []))],
    )]


def test_catch_without_binding():
    stmts = parse_program('zkus {} chyť () {}')
    assert stmts == [Try([], None, [], None)]


def test_unclosed_block():
    with pytest.raises(ParseError) as exc:
        parse_program('rob f() { vrat 1 piča')
    assert "expected '}'" in str(exc.value)
