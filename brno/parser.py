"""Parser for BrnoScript.

A recursive-descent parser with one token of lookahead and no
backtracking. Expressions are parsed by precedence climbing, lowest first:

    assignment  = += -= *= /= %=      (right-associative)
    nullish     ??
    or          ||
    and         &&
    equality    == !=
    comparison  < <= > >=
    term        + -
    factor      * / %
    power       **                     (right-associative)
    unary       ! -                    (prefix)
    postfix     call, .member, ++, --  (chainable)

Simple statements end with the `piča` terminator. Blocks, `esli`,
`šalina`, `okruh` and `zkus` are delimited by their own structure.

`parse_program` is the public entry point and doubles as the compile
capability handed to the interpreter for `vokno` imports.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Assign, Binary, Block, Break, Call, Continue, Expr, ExprStmt, For,
    FunctionDecl, FunctionExpr, Get, If, Import, Let, Literal, Postfix,
    Return, Stmt, Try, Unary, Variable, While,
)
from .errors import ParseError
from .lexer import tokenize
from .tokens import Token, TokenType


ARRAY_CONSTRUCTOR = '__arr'
PRINT_FUNCTION = 'vyblij'

COMPOUND_ASSIGNMENT = {
    TokenType.PLUS_EQUAL: '+',
    TokenType.MINUS_EQUAL: '-',
    TokenType.STAR_EQUAL: '*',
    TokenType.SLASH_EQUAL: '/',
    TokenType.PERCENT_EQUAL: '%',
}


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    # Token helpers

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def check(self, *types: TokenType) -> bool:
        return self.peek().type in types

    def match(self, *types: TokenType) -> bool:
        if self.check(*types):
            self.advance()
            return True
        return False

    def consume(self, type_: TokenType, message: str) -> Token:
        if self.check(type_):
            return self.advance()
        raise self.error(message)

    def error(self, message: str) -> ParseError:
        token = self.peek()
        return ParseError(message, token.lexeme, token.line, token.column)

    def terminator(self, after: str):
        self.consume(TokenType.TERMINATOR, f"expected 'piča' after {after}")

    # Declarations

    def parse_program(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.check(TokenType.EOF):
            statements.append(self.parse_declaration())
        return statements

    def parse_declaration(self) -> Stmt:
        line = self.peek().line
        if self.match(TokenType.LET):
            return self.parse_let(line)
        if self.match(TokenType.FUN):
            return self.parse_function_decl(line)
        return self.parse_statement()

    def parse_let(self, line: int) -> Let:
        name = self.consume(TokenType.IDENTIFIER, "expected variable name").lexeme
        init: Optional[Expr] = None
        if self.match(TokenType.EQUAL):
            init = self.parse_expression()
        self.terminator("variable declaration")
        return Let(name, init, line=line)

    def parse_function_decl(self, line: int) -> FunctionDecl:
        name = self.consume(TokenType.IDENTIFIER, "expected function name").lexeme
        params = self.parse_params()
        self.consume(TokenType.LEFT_BRACE, "expected '{' before function body")
        return FunctionDecl(name, params, self.parse_block_body(), line=line)

    def parse_params(self) -> List[str]:
        self.consume(TokenType.LEFT_PAREN, "expected '('")
        params: List[str] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                params.append(self.consume(TokenType.IDENTIFIER, "expected parameter name").lexeme)
                if not self.match(TokenType.COMMA):
                    break
        self.consume(TokenType.RIGHT_PAREN, "expected ')' after parameters")
        return params

    # Statements

    def parse_statement(self) -> Stmt:
        line = self.peek().line
        if self.match(TokenType.LEFT_BRACE):
            return Block(self.parse_block_body(), line=line)
        if self.match(TokenType.IF):
            return self.parse_if(line)
        if self.match(TokenType.WHILE):
            return self.parse_while(line)
        if self.match(TokenType.FOR):
            return self.parse_for(line)
        if self.match(TokenType.RETURN):
            return self.parse_return(line)
        if self.match(TokenType.PRINT):
            return self.parse_print(line)
        if self.match(TokenType.IMPORT):
            return self.parse_import(line)
        if self.match(TokenType.TRY):
            return self.parse_try(line)
        if self.match(TokenType.BREAK):
            self.terminator("'vypadni'")
            return Break(line=line)
        if self.match(TokenType.CONTINUE):
            self.terminator("'přeskoč'")
            return Continue(line=line)
        expr = self.parse_expression()
        self.terminator("expression")
        return ExprStmt(expr, line=line)

    def parse_block_body(self) -> List[Stmt]:
        """Parse declarations up to the closing brace; '{' is already consumed."""
        statements: List[Stmt] = []
        while not self.check(TokenType.RIGHT_BRACE, TokenType.EOF):
            statements.append(self.parse_declaration())
        self.consume(TokenType.RIGHT_BRACE, "expected '}'")
        return statements

    def parse_condition(self, keyword: str) -> Expr:
        self.consume(TokenType.LEFT_PAREN, f"expected '(' after '{keyword}'")
        condition = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "expected ')' after condition")
        return condition

    def parse_if(self, line: int) -> If:
        condition = self.parse_condition('esli')
        then_branch = self.parse_statement()
        else_branch = None
        if self.match(TokenType.ELSE):
            else_branch = self.parse_statement()
        return If(condition, then_branch, else_branch, line=line)

    def parse_while(self, line: int) -> While:
        condition = self.parse_condition('šalina')
        return While(condition, self.parse_statement(), line=line)

    def parse_for(self, line: int) -> For:
        # okruh (init piča cond piča step) body
        self.consume(TokenType.LEFT_PAREN, "expected '(' after 'okruh'")
        init: Optional[Stmt] = None
        init_line = self.peek().line
        if self.match(TokenType.LET):
            init = self.parse_let(init_line)
        elif self.match(TokenType.TERMINATOR):
            init = None
        else:
            expr = self.parse_expression()
            self.terminator("loop initializer")
            init = ExprStmt(expr, line=init_line)

        condition: Optional[Expr] = None
        if not self.check(TokenType.TERMINATOR):
            condition = self.parse_expression()
        self.terminator("loop condition")

        step: Optional[Expr] = None
        if not self.check(TokenType.RIGHT_PAREN):
            step = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "expected ')' after loop clauses")
        return For(init, condition, step, self.parse_statement(), line=line)

    def parse_return(self, line: int) -> Return:
        value: Optional[Expr] = None
        if not self.check(TokenType.TERMINATOR):
            value = self.parse_expression()
        self.terminator("'vrat'")
        return Return(value, line=line)

    def parse_print(self, line: int) -> ExprStmt:
        self.consume(TokenType.LEFT_PAREN, "expected '(' after 'vyblij'")
        arg = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "expected ')'")
        self.terminator("'vyblij(...)'")
        return ExprStmt(Call(Variable(PRINT_FUNCTION), [arg]), line=line)

    def parse_import(self, line: int) -> Import:
        path = self.parse_expression()
        self.terminator("'vokno'")
        return Import(path, line=line)

    def parse_try(self, line: int) -> Try:
        self.consume(TokenType.LEFT_BRACE, "expected '{' after 'zkus'")
        body = self.parse_block_body()
        name: Optional[str] = None
        handler: Optional[List[Stmt]] = None
        finalizer: Optional[List[Stmt]] = None
        if self.match(TokenType.CATCH):
            self.consume(TokenType.LEFT_PAREN, "expected '(' after 'chyť'")
            if self.match(TokenType.IDENTIFIER):
                name = self.previous().lexeme
            self.consume(TokenType.RIGHT_PAREN, "expected ')'")
            self.consume(TokenType.LEFT_BRACE, "expected '{' after 'chyť(...)'")
            handler = self.parse_block_body()
        if self.match(TokenType.FINALLY):
            self.consume(TokenType.LEFT_BRACE, "expected '{' after 'potom'")
            finalizer = self.parse_block_body()
        return Try(body, name, handler, finalizer, line=line)

    # Expressions

    def parse_expression(self) -> Expr:
        return self.parse_assignment()

    def parse_assignment(self) -> Expr:
        target = self.parse_nullish()
        if self.match(TokenType.EQUAL, *COMPOUND_ASSIGNMENT):
            op = self.previous()
            if not isinstance(target, Variable):
                raise ParseError("invalid assignment target", op.lexeme, op.line, op.column)
            value = self.parse_assignment()
            if op.type in COMPOUND_ASSIGNMENT:
                value = Binary(COMPOUND_ASSIGNMENT[op.type], Variable(target.name), value)
            return Assign(target.name, value)
        return target

    def parse_nullish(self) -> Expr:
        node = self.parse_or()
        while self.match(TokenType.QUESTION_QUESTION):
            node = Binary('??', node, self.parse_or())
        return node

    def parse_or(self) -> Expr:
        node = self.parse_and()
        while self.match(TokenType.OR_OR):
            node = Binary('||', node, self.parse_and())
        return node

    def parse_and(self) -> Expr:
        node = self.parse_equality()
        while self.match(TokenType.AND_AND):
            node = Binary('&&', node, self.parse_equality())
        return node

    def parse_equality(self) -> Expr:
        node = self.parse_comparison()
        while self.match(TokenType.EQUAL_EQUAL, TokenType.BANG_EQUAL):
            op = self.previous().lexeme
            node = Binary(op, node, self.parse_comparison())
        return node

    def parse_comparison(self) -> Expr:
        node = self.parse_term()
        while self.match(TokenType.LESS, TokenType.LESS_EQUAL, TokenType.GREATER, TokenType.GREATER_EQUAL):
            op = self.previous().lexeme
            node = Binary(op, node, self.parse_term())
        return node

    def parse_term(self) -> Expr:
        node = self.parse_factor()
        while self.match(TokenType.PLUS, TokenType.MINUS):
            op = self.previous().lexeme
            node = Binary(op, node, self.parse_factor())
        return node

    def parse_factor(self) -> Expr:
        node = self.parse_power()
        while self.match(TokenType.STAR, TokenType.SLASH, TokenType.PERCENT):
            op = self.previous().lexeme
            node = Binary(op, node, self.parse_power())
        return node

    def parse_power(self) -> Expr:
        node = self.parse_unary()
        if self.match(TokenType.STAR_STAR):
            node = Binary('**', node, self.parse_power())
        return node

    def parse_unary(self) -> Expr:
        if self.match(TokenType.BANG, TokenType.MINUS):
            op = self.previous().lexeme
            return Unary(op, self.parse_unary())
        return self.parse_postfix()

    def parse_postfix(self) -> Expr:
        node = self.parse_primary()
        while True:
            if self.match(TokenType.LEFT_PAREN):
                node = Call(node, self.parse_arguments(TokenType.RIGHT_PAREN, "expected ')' after arguments"))
                continue
            if self.match(TokenType.DOT):
                name = self.consume(TokenType.IDENTIFIER, "expected member name after '.'").lexeme
                node = Get(node, name)
                continue
            if self.match(TokenType.PLUS_PLUS, TokenType.MINUS_MINUS):
                op = self.previous()
                if not isinstance(node, Variable):
                    raise ParseError("'++' and '--' apply only to variables", op.lexeme, op.line, op.column)
                node = Postfix(node.name, op.lexeme)
                continue
            break
        return node

    def parse_arguments(self, closing: TokenType, message: str) -> List[Expr]:
        args: List[Expr] = []
        if not self.check(closing):
            while True:
                args.append(self.parse_expression())
                if not self.match(TokenType.COMMA):
                    break
        self.consume(closing, message)
        return args

    def parse_primary(self) -> Expr:
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.NULL):
            return Literal(None)
        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous().lexeme)
        if self.match(TokenType.LEFT_PAREN):
            expr = self.parse_expression()
            self.consume(TokenType.RIGHT_PAREN, "expected ')'")
            return expr
        if self.match(TokenType.LEFT_BRACKET):
            items = self.parse_arguments(TokenType.RIGHT_BRACKET, "expected ']' after array items")
            return Call(Variable(ARRAY_CONSTRUCTOR), items)
        if self.match(TokenType.FUN):
            params = self.parse_params()
            self.consume(TokenType.LEFT_BRACE, "expected '{' before function body")
            return FunctionExpr(params, self.parse_block_body())
        raise self.error("expected expression")


def parse_program(source: str) -> List[Stmt]:
    """Tokenize and parse BrnoScript source into a list of statements.

    Raises LexerError or ParseError; nothing is executed.
    """
    return Parser(tokenize(source)).parse_program()
