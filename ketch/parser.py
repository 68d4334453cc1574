"""Recursive-descent parser for the Ketch language.

The parser consumes the token list produced by `ketch.lexer` with one
token of lookahead (two to tell `name = expr` from an expression
statement) and never backtracks. Blocks are indentation based: a `:`
followed by a NEWLINE opens an INDENT ... DEDENT region, while a `:`
followed by more tokens on the same line opens a simple suite of one or
more `;`-separated statements.

The `parse_program` function is the public entry point and returns the
root `Block` of the program.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .ast import (
    Node, Block, Let, Print, If, While, For, FunctionDef, Return,
    Assign, Variable, NumberLiteral, StringLiteral, BinaryOp, UnaryOp, Call,
)
from .errors import ParseError
from .lexer import Token, TokenType, KEYWORDS, tokenize


# tokens that end a simple statement without being consumed by it
STATEMENT_FOLLOW = (TokenType.DEDENT, TokenType.EOF, TokenType.ELSE)
# tokens after which a simple suite stops collecting statements
SUITE_END = (TokenType.NEWLINE, TokenType.DEDENT, TokenType.EOF, TokenType.ELSE)
# CPython's default int/str conversion limit
MAX_INT_DIGITS = 4300


def expected_text(type_: TokenType, value: Optional[str] = None) -> str:
    if value is not None:
        return repr(value)
    if type_.value in KEYWORDS or len(type_.value) == 1:
        return repr(type_.value)
    return type_.value


class Parser:
    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].type != TokenType.EOF:
            line = self.tokens[-1].line if self.tokens else 1
            self.tokens.append(Token(TokenType.EOF, '', line, 0))
        self.pos = 0

    def peek(self, offset: int = 0) -> Token:
        i = self.pos + offset
        if i < len(self.tokens):
            return self.tokens[i]
        return self.tokens[-1]

    def previous(self) -> Optional[Token]:
        if self.pos == 0:
            return None
        return self.tokens[self.pos - 1]

    def match(self, type_: TokenType, value: Optional[str] = None) -> bool:
        token = self.peek()
        if token.type != type_:
            return False
        return value is None or token.value == value

    def match_op(self, ops: List[str]) -> bool:
        token = self.peek()
        return token.type == TokenType.OP and token.value in ops

    def consume(self, type_: TokenType, value: Optional[str] = None) -> Token:
        token = self.peek()
        if not self.match(type_, value):
            raise self.error(f"expected {expected_text(type_, value)}", token)
        self.pos += 1
        return token

    def error(self, message: str, token: Token) -> ParseError:
        if token.type == TokenType.EOF:
            return ParseError(f"{message}, got end of input at line {token.line}")
        return ParseError(f"{message}, got {token.describe()} at {token.line}:{token.column}")

    def parse_program(self) -> Block:
        statements: List[Node] = []
        while not self.match(TokenType.EOF):
            if self.match(TokenType.NEWLINE) or self.match(TokenType.SEMICOLON):
                self.pos += 1
                continue
            statements.append(self.parse_statement())
        return Block(tuple(statements))

    # Statements

    def parse_statement(self) -> Node:
        token = self.peek()
        if token.type == TokenType.IF:
            return self.parse_if()
        if token.type == TokenType.WHILE:
            return self.parse_while()
        if token.type == TokenType.FOR:
            return self.parse_for()
        if token.type == TokenType.FUNCTION:
            return self.parse_function()
        if token.type == TokenType.INDENT:
            raise self.error("unexpected indent", token)
        if token.type == TokenType.LET:
            stmt = self.parse_let()
        elif token.type == TokenType.PRINT:
            stmt = self.parse_print()
        elif token.type == TokenType.RETURN:
            stmt = self.parse_return()
        elif token.type == TokenType.IDENT and self.peek(1).type == TokenType.ASSIGN:
            stmt = self.parse_assign_stmt()
        else:
            stmt = self.parse_expression()
        self.end_statement()
        return stmt

    def end_statement(self):
        if self.match(TokenType.SEMICOLON) or self.match(TokenType.NEWLINE):
            self.pos += 1
            return
        if self.peek().type in STATEMENT_FOLLOW:
            return
        raise self.error("expected ';' or end of line", self.peek())

    def parse_block(self) -> Block:
        self.consume(TokenType.COLON)
        if not self.match(TokenType.NEWLINE):
            return self.parse_simple_suite()
        self.consume(TokenType.NEWLINE)
        self.consume(TokenType.INDENT)
        statements: List[Node] = []
        while not self.match(TokenType.DEDENT):
            if self.match(TokenType.EOF):
                raise self.error("unterminated block", self.peek())
            if self.match(TokenType.NEWLINE) or self.match(TokenType.SEMICOLON):
                self.pos += 1
                continue
            statements.append(self.parse_statement())
        self.consume(TokenType.DEDENT)
        return Block(tuple(statements))

    def parse_simple_suite(self) -> Block:
        statements = [self.parse_statement()]
        while self.previous().type == TokenType.SEMICOLON and self.peek().type not in SUITE_END:
            statements.append(self.parse_statement())
        return Block(tuple(statements))

    def parse_let(self) -> Let:
        self.consume(TokenType.LET)
        name_token = self.consume(TokenType.IDENT)
        self.consume(TokenType.ASSIGN)
        expr = self.parse_expression()
        return Let(name_token.value, expr)

    def parse_print(self) -> Print:
        self.consume(TokenType.PRINT)
        self.consume(TokenType.LPAREN)
        expr = self.parse_expression()
        self.consume(TokenType.RPAREN)
        return Print(expr)

    def parse_if(self) -> If:
        self.consume(TokenType.IF)
        self.consume(TokenType.LPAREN)
        condition = self.parse_expression()
        self.consume(TokenType.RPAREN)
        then_block = self.parse_block()
        else_block = None
        if self.match(TokenType.ELSE):
            self.consume(TokenType.ELSE)
            else_block = self.parse_block()
        return If(condition, then_block, else_block)

    def parse_while(self) -> While:
        self.consume(TokenType.WHILE)
        self.consume(TokenType.LPAREN)
        condition = self.parse_expression()
        self.consume(TokenType.RPAREN)
        body = self.parse_block()
        return While(condition, body)

    def parse_for(self) -> For:
        self.consume(TokenType.FOR)
        self.consume(TokenType.LPAREN)
        init: Optional[Node] = None
        if self.match(TokenType.LET):
            init = self.parse_let()
        elif not self.match(TokenType.SEMICOLON):
            init = self.parse_expression()
        self.consume(TokenType.SEMICOLON)
        condition: Optional[Node] = None
        if not self.match(TokenType.SEMICOLON):
            condition = self.parse_expression()
        self.consume(TokenType.SEMICOLON)
        update: Optional[Node] = None
        if not self.match(TokenType.RPAREN):
            update = self.parse_expression()
        self.consume(TokenType.RPAREN)
        body = self.parse_block()
        return For(init, condition, update, body)

    def parse_function(self) -> FunctionDef:
        self.consume(TokenType.FUNCTION)
        name_token = self.consume(TokenType.IDENT)
        self.consume(TokenType.LPAREN)
        params: List[str] = []
        if not self.match(TokenType.RPAREN):
            while True:
                param = self.consume(TokenType.IDENT)
                if param.value in params:
                    raise ParseError(
                        f"duplicate parameter {param.value!r} in function "
                        f"{name_token.value!r} at {param.line}:{param.column}"
                    )
                params.append(param.value)
                if not self.match(TokenType.COMMA):
                    break
                self.consume(TokenType.COMMA)
        self.consume(TokenType.RPAREN)
        body = self.parse_block()
        return FunctionDef(name_token.value, tuple(params), body)

    def parse_return(self) -> Return:
        self.consume(TokenType.RETURN)
        if self.peek().type in (TokenType.NEWLINE, TokenType.SEMICOLON) + STATEMENT_FOLLOW:
            return Return(None)
        return Return(self.parse_expression())

    def parse_assign_stmt(self) -> Assign:
        name_token = self.consume(TokenType.IDENT)
        self.consume(TokenType.ASSIGN)
        value = self.parse_expression()
        return Assign(name_token.value, value)

    # Expressions, lowest precedence first

    def parse_expression(self) -> Node:
        return self.parse_assign()

    # assignment: logic_or ('=' assign)?
    def parse_assign(self) -> Node:
        left = self.parse_logic_or()
        if self.match(TokenType.ASSIGN):
            eq_token = self.consume(TokenType.ASSIGN)
            right = self.parse_assign()
            if not isinstance(left, Variable):
                raise ParseError(f"invalid assignment target at {eq_token.line}:{eq_token.column}")
            return Assign(left.name, right)
        return left

    def parse_binary(self, ops: List[str], operand) -> Node:
        node = operand()
        while self.match_op(ops):
            op_token = self.consume(TokenType.OP)
            right = operand()
            node = BinaryOp(op_token.value, node, right)
        return node

    def parse_logic_or(self) -> Node:
        return self.parse_binary(['||'], self.parse_logic_and)

    def parse_logic_and(self) -> Node:
        return self.parse_binary(['&&'], self.parse_equality)

    def parse_equality(self) -> Node:
        return self.parse_binary(['==', '!='], self.parse_comparison)

    def parse_comparison(self) -> Node:
        return self.parse_binary(['<', '<=', '>', '>='], self.parse_term)

    def parse_term(self) -> Node:
        return self.parse_binary(['+', '-'], self.parse_factor)

    def parse_factor(self) -> Node:
        return self.parse_binary(['*', '/'], self.parse_unary)

    def parse_unary(self) -> Node:
        if self.match_op(['!', '-']):
            op_token = self.consume(TokenType.OP)
            operand = self.parse_unary()
            return UnaryOp(op_token.value, operand)
        return self.parse_primary()

    def parse_primary(self) -> Node:
        token = self.peek()
        if token.type == TokenType.NUMBER:
            self.pos += 1
            if '.' in token.value:
                return NumberLiteral(float(token.value))
            if len(token.value) > MAX_INT_DIGITS:
                raise ParseError(
                    f"integer literal too long ({len(token.value)} digits) at {token.line}:{token.column}"
                )
            return NumberLiteral(int(token.value))
        if token.type == TokenType.STRING:
            self.pos += 1
            return StringLiteral(token.value)
        if token.type == TokenType.IDENT:
            self.pos += 1
            if self.match(TokenType.LPAREN):
                return Call(token.value, self.parse_arguments())
            return Variable(token.value)
        if token.type == TokenType.LPAREN:
            self.consume(TokenType.LPAREN)
            expr = self.parse_expression()
            self.consume(TokenType.RPAREN)
            return expr
        raise self.error("expected expression", token)

    def parse_arguments(self) -> tuple:
        self.consume(TokenType.LPAREN)
        args: List[Node] = []
        if not self.match(TokenType.RPAREN):
            args.append(self.parse_expression())
            while self.match(TokenType.COMMA):
                self.consume(TokenType.COMMA)
                args.append(self.parse_expression())
        self.consume(TokenType.RPAREN)
        return tuple(args)


def parse(tokens: Sequence[Token]) -> Block:
    """Parse a token list into the program's root `Block`."""
    return Parser(tokens).parse_program()


def parse_program(source: str) -> Block:
    """Tokenize and parse Ketch source code into the program's root `Block`."""
    return parse(tokenize(source))
