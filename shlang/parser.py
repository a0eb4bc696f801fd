"""Pratt parser turning source text into syntax tree nodes."""

from __future__ import annotations

from shlang.lang_errors import ParseError, ParseErrorKind
from shlang.nodes import (
    Assignment,
    BinaryNode,
    BinaryOp,
    Bool,
    Branch,
    BreakNode,
    Call,
    Constructor,
    ContinueNode,
    Declaration,
    DoBlock,
    DontResult,
    FieldAccess,
    ForLoop,
    FuncDef,
    Index,
    ListLit,
    Loop,
    Null,
    NodeSpan,
    Precedence,
    ResultNode,
    ReturnNode,
    Str,
    StructDef,
    UnaryNode,
    UnaryOp,
    Variable,
    While,
    binary_op_from,
    precedence_of,
)
from shlang.parser_base import ParserBase
from shlang.spans import Span, Spanned
from shlang.tokens import Token, TokenType

_COMPOUND_OPS = {
    TokenType.PLUS_EQUAL: BinaryOp.ADD,
    TokenType.MINUS_EQUAL: BinaryOp.SUBTRACT,
    TokenType.SLASH_EQUAL: BinaryOp.DIVIDE,
    TokenType.QUESTION_EQUAL: BinaryOp.NULL_COALESCING,
    TokenType.STAR_EQUAL: BinaryOp.MULTIPLY,
}
_ASSIGN_OPS = frozenset(_COMPOUND_OPS) | {TokenType.EQUAL}


class Parser(ParserBase):
    """Parses a whole program or single expressions from source text."""

    # -- entry points ----------------------------------------------------

    def parse(self) -> tuple[list[NodeSpan], dict[str, FuncDef]]:
        """Parse the program; named functions are returned apart from the body."""
        body: list[NodeSpan] = []
        functions: dict[str, FuncDef] = {}
        while self._peek() is not None:
            expr = self.parse_expr(False)
            item = expr.item
            if isinstance(item, Declaration) and isinstance(item.value.item, FuncDef):
                functions[item.var_name] = item.value.item
            else:
                body.append(expr)
        return self._filter_block(body), functions

    def parse_expr(self, in_conditional: bool = False) -> NodeSpan:
        """Parse one expression at the lowest precedence."""
        return self._parse_pratt(Precedence.LOWEST, in_conditional)

    def _parse_only_expr(self, in_conditional: bool) -> NodeSpan:
        return self._expect_expr(self.parse_expr(in_conditional))

    # -- pratt core ------------------------------------------------------

    def _peek_precedence(self) -> Precedence:
        token = self._peek()
        return precedence_of(token.kind) if token is not None else Precedence.LOWEST

    def _parse_pratt(self, precedence: Precedence, in_conditional: bool) -> NodeSpan:
        token = self._expect_next()
        left = self._parse_prefix(token)
        if in_conditional and self._peek_precedence() is Precedence.CONSTRUCTOR:
            return left
        while precedence < self._peek_precedence():
            op_token = self._peek_some()
            if in_conditional and op_token.is_kind(TokenType.LBRACE):
                break
            left = self._parse_infix(left, op_token, in_conditional)
        return left

    def _parse_prefix(self, token: Token) -> NodeSpan:
        span = token.span
        match token.kind:
            case TokenType.STR:
                return Spanned(Str(token.value or ""), span)
            case TokenType.STRUCT:
                return self._parse_struct()
            case TokenType.VAR:
                return self._parse_vardef(token)
            case TokenType.NUMBER:
                return Spanned(self.parse_num(token), span)
            case TokenType.FALSE:
                return Spanned(Bool(False), span)
            case TokenType.TRUE:
                return Spanned(Bool(True), span)
            case TokenType.NULL:
                return Spanned(Null(), span)
            case TokenType.FUNC:
                func = self._parse_funcdef()
                self._next()
                return func
            case TokenType.AT:
                return self._parse_closure()
            case TokenType.LBRACKET:
                items = self._parse_expr_list(token, TokenType.RBRACKET)
                list_span = span + self._peek_some().span
                self._next()
                return Spanned(ListLit(items), list_span)
            case TokenType.LBRACE:
                return self._anon_struct()
            case TokenType.IDENTIFIER:
                return Spanned(Variable(self.text(token)), span)
            case TokenType.WHILE:
                return self._parse_while_loop()
            case TokenType.IF:
                return self._parse_branch()
            case TokenType.DO:
                return self._parse_do()
            case TokenType.LOOP:
                return self._parse_loop()
            case TokenType.FOR:
                return self._parse_for()
            case TokenType.RETURN:
                return self._parse_return(token)
            case TokenType.BREAK:
                return Spanned(BreakNode(), span)
            case TokenType.CONTINUE:
                return Spanned(ContinueNode(), span)
            case TokenType.NOT | TokenType.BANG:
                return self._unary_operator(UnaryOp.NOT)
            case TokenType.MINUS:
                return self._unary_operator(UnaryOp.NEGATIVE)
            case TokenType.LPAREN:
                return self._parse_paren()
            case TokenType.SEMICOLON:
                return Spanned(DontResult(), Span(0, 0))
        raise self._unexpected_token(token)

    def _parse_infix(
        self, left: NodeSpan, op_token: Token, in_conditional: bool
    ) -> NodeSpan:
        kind = op_token.kind
        if kind is TokenType.LPAREN:
            self._next()
            return self._parse_call(left)
        if kind is TokenType.LBRACKET:
            self._next()
            return self._parse_index(left)
        if kind is TokenType.LBRACE and not in_conditional:
            return self._parse_constructor(left)
        if kind is TokenType.DOT:
            self._next()
            return self._parse_field_access(left)
        if kind in _ASSIGN_OPS:
            return self._parse_assignment(left, op_token)
        precedence = precedence_of(kind)
        self._next()
        right = self._parse_pratt(precedence, False)
        return self._binary_node(binary_op_from(kind), left, right, left.span + right.span)

    def _binary_node(
        self, kind: BinaryOp, left: NodeSpan, right: NodeSpan, span: Span
    ) -> NodeSpan:
        self._expect_expr(left)
        self._expect_expr(right)
        return Spanned(BinaryNode(kind, left, right), span)

    def _unary_operator(self, kind: UnaryOp) -> NodeSpan:
        op_span = self._peek_some().span
        right = self._parse_pratt(Precedence.UNARY, False)
        return Spanned(UnaryNode(kind, right), op_span + right.span)

    def _parse_paren(self) -> NodeSpan:
        expr = self.parse_expr(False)
        self._consume(TokenType.RPAREN)
        return expr

    # -- expression lists and calls ---------------------------------------

    def _parse_expr_list(self, token: Token, closing: TokenType) -> list[NodeSpan]:
        """Parse comma separated expressions, leaving the closing token unread."""
        params: list[NodeSpan] = []
        current = token
        while not current.is_kind(closing):
            if self._peek_is(closing):
                break
            expr = self._parse_only_expr(False)
            current = self._peek_some()
            params.append(expr)
            if current.is_kind(closing):
                break
            if current.is_kind(TokenType.COMMA):
                self._next()
                continue
            raise self._unexpected_token(current)
        return params

    def _parse_call(self, callee: NodeSpan) -> NodeSpan:
        token = self._peek_some()
        first_span = token.span
        params = self._parse_expr_list(token, TokenType.RPAREN)
        last_span = self._expect_next().span
        return Spanned(Call(callee, params), first_span + last_span)

    def _parse_index(self, target: NodeSpan) -> NodeSpan:
        first = self._peek_some()
        index = self._parse_only_expr(False)
        last = self._peek_some()
        if not last.is_kind(TokenType.RBRACKET):
            raise self._unexpected_token(last)
        self._next()
        return Spanned(Index(target, index), first.span + last.span)

    # -- variables and assignment -----------------------------------------

    def _empty_var_decl(self, first: Token, ident: Token) -> NodeSpan:
        decl = Declaration(self.text(ident), Spanned(Null(), first.span))
        return Spanned(decl, first.span + ident.span)

    def _var_decl(self, var_name: str, first: Token) -> NodeSpan:
        self._next()
        value = self._parse_pratt(Precedence.LOWEST, False)
        return Spanned(Declaration(var_name, value), first.span + value.span)

    def _parse_vardef(self, first: Token) -> NodeSpan:
        ident = self._expect(TokenType.IDENTIFIER)
        var_name = self.text(ident)
        self._next()
        if self._peek_is(TokenType.EQUAL):
            return self._var_decl(var_name, first)
        return self._empty_var_decl(first, ident)

    def _parse_assignment(self, target: NodeSpan, op_token: Token) -> NodeSpan:
        precedence = precedence_of(op_token.kind)
        self._next()
        value = self._parse_pratt(precedence, False)
        span = target.span + value.span
        op = _COMPOUND_OPS.get(op_token.kind)
        if op is None:
            return Spanned(Assignment(target, value), span)
        combined = self._binary_node(op, target, value, target.span + value.span)
        return Spanned(Assignment(target, combined), span)

    # -- functions ---------------------------------------------------------

    def _parse_func_params(self) -> list[str]:
        self._next()
        token = self._peek_some()
        params: list[str] = []
        while not token.is_kind(TokenType.RPAREN):
            if self._peek_is(TokenType.RPAREN):
                break
            params.append(self._consume_ident())
            token = self._peek_some()
            if token.is_kind(TokenType.RPAREN):
                break
            if token.is_kind(TokenType.COMMA):
                self._next()
                continue
            raise self._unexpected_token(token)
        self._next()
        return params

    def _parse_closure(self) -> NodeSpan:
        first_span = self._peek_some().span
        args = self._parse_func_params()
        if self._peek_some().is_kind(TokenType.LBRACE):
            block = self._parse_block()
            last_span = self._expect_next().span
            return Spanned(FuncDef(block, args, True), first_span + last_span)
        last_span = self._peek_some().span
        expr = self.parse_expr(False)
        block = [Spanned(ResultNode(expr), expr.span)]
        return Spanned(FuncDef(block, args, True), first_span + last_span)

    def _parse_named_func(self, name_ident: Token) -> NodeSpan:
        func_name = self.text(name_ident)
        self._next()
        params = self._parse_func_params()
        last = self._peek_some()
        block = self._parse_block()
        span = name_ident.span + last.span
        func = Spanned(FuncDef(block, params, False), span)
        return Spanned(Declaration(func_name, func), span)

    def _parse_anon_func(self, first: Token) -> NodeSpan:
        args = self._parse_func_params()
        block = self._parse_block()
        last = self._peek_some()
        return Spanned(FuncDef(block, args, False), first.span + last.span)

    def _parse_funcdef(self) -> NodeSpan:
        first = self._peek_some()
        if first.is_kind(TokenType.IDENTIFIER):
            return self._parse_named_func(first)
        if first.is_kind(TokenType.LPAREN):
            return self._parse_anon_func(first)
        raise self._unexpected_token(first)

    # -- loops -------------------------------------------------------------

    def _parse_while_loop(self) -> NodeSpan:
        first = self._peek_some()
        condition = self._parse_only_expr(True)
        last = self._peek_some()
        proc = self._parse_block()
        self._next()
        return Spanned(While(condition, proc), first.span + last.span)

    def _parse_for(self) -> NodeSpan:
        ident_span = self._peek_some().span
        ident = self._consume_ident()
        self._consume(TokenType.IN)
        items = self._parse_only_expr(True)
        last = self._peek_some()
        proc = self._parse_block()
        self._next()
        return Spanned(ForLoop(ident, items, proc), ident_span + last.span)

    def _parse_braced_block(self) -> tuple[list[NodeSpan], Span]:
        first = self._expect(TokenType.LBRACE)
        block = self._parse_block()
        last = self._expect_next()
        return block, first.span + last.span

    def _parse_do(self) -> NodeSpan:
        block, span = self._parse_braced_block()
        return Spanned(DoBlock(block), span)

    def _parse_loop(self) -> NodeSpan:
        block, span = self._parse_braced_block()
        return Spanned(Loop(block), span)

    # -- branches and return -------------------------------------------------

    def _parse_return(self, token: Token) -> NodeSpan:
        expr = self._parse_only_expr(False)
        if isinstance(expr.item, DontResult):
            expr = Spanned(Null(), expr.span)
        return Spanned(ReturnNode(expr), token.span)

    def _parse_branch(self) -> NodeSpan:
        first = self._peek_some()
        condition = self._parse_only_expr(True)
        last = self._peek_some()
        if_block = self._parse_block()
        self._next()
        span = first.span + last.span
        following = self._peek()
        if following is None or not following.is_kind(TokenType.ELSE):
            return Spanned(Branch(condition, if_block), span)
        self._next()
        if self._peek_some().is_kind(TokenType.IF):
            self._next()
            elif_branch = self._parse_branch()
            return Spanned(Branch(condition, if_block, [elif_branch]), span)
        else_block = self._parse_block()
        self._next()
        return Spanned(Branch(condition, if_block, else_block), span)

    # -- structs -----------------------------------------------------------

    @staticmethod
    def _node_to_field(node: NodeSpan) -> NodeSpan:
        if isinstance(node.item, (Declaration, StructDef)):
            return node
        raise ParseError(ParseErrorKind.UNEXPECTED_FIELD_NODE, node.span, node.item)

    def _parse_fields(self, body: dict[str, NodeSpan] | list[NodeSpan]) -> None:
        """Read ``name: expr`` pairs up to a closing brace, left unread."""
        while True:
            target = self._consume(TokenType.IDENTIFIER)
            self._consume(TokenType.COLON)
            expr = self._parse_only_expr(False)
            name = self.text(target)
            if isinstance(body, dict):
                body[name] = expr
            else:
                body.append(Spanned(Declaration(name, expr), expr.span))
            if self._peek_is(TokenType.COMMA):
                self._next()
            if self._peek_is(TokenType.RBRACE):
                return

    def _anon_struct(self) -> NodeSpan:
        token = self._peek_some()
        if token.is_kind(TokenType.RBRACE):
            self._next()
            return Spanned(StructDef(None, []), token.span + 1)
        fields: list[NodeSpan] = []
        self._parse_fields(fields)
        span = token.span + self._expect_next().span
        return Spanned(StructDef(None, fields), span)

    def _parse_struct(self) -> NodeSpan:
        first = self._peek_some()
        name_ident = self._is_expected(TokenType.IDENTIFIER)
        if name_ident is not None:
            return self._named_struct(name_ident)
        block = self._parse_block()
        fields = [self._node_to_field(node) for node in block]
        last = self._expect_next()
        return Spanned(StructDef(None, fields), first.span + last.span)

    def _named_struct(self, name_ident: Token) -> NodeSpan:
        self._next()
        block = self._parse_block()
        last = self._expect_next()
        name = self.text(name_ident)
        fields = [self._node_to_field(node) for node in block]
        return Spanned(StructDef(name, fields), name_ident.span + last.span)

    def _struct_params(self) -> dict[str, NodeSpan]:
        self._consume(TokenType.LBRACE)
        body: dict[str, NodeSpan] = {}
        if self._peek_some().is_kind(TokenType.RBRACE):
            return body
        self._parse_fields(body)
        return body

    def _parse_constructor(self, target: NodeSpan) -> NodeSpan:
        if not isinstance(target.item, Variable):
            raise ParseError(
                ParseErrorKind.UNSPECIFIED,
                target.span,
                "Unexpected expression for constructor",
            )
        params = self._struct_params()
        last = self._peek_some()
        self._next()
        return Spanned(Constructor(target.item.name, params), target.span + last.span)

    # -- field access --------------------------------------------------------

    def _parse_method(self, target: NodeSpan, requested: str, ident: Token) -> NodeSpan:
        self._expect_next()
        token = self._peek_some()
        params = self._parse_expr_list(token, TokenType.RPAREN)
        self._next()
        if params:
            arg_span = params[0].span + params[-1].span
        else:
            arg_span = Span(ident.span.stop + 1, ident.span.stop + 2)
        call = Spanned(Call(Spanned(Variable(requested), ident.span), params), arg_span)
        return Spanned(FieldAccess(target, call), ident.span + arg_span)

    def _parse_field_access(self, target: NodeSpan) -> NodeSpan:
        ident = self._expect(TokenType.IDENTIFIER)
        self._next()
        requested = self.text(ident)
        if self._is_expected(TokenType.LPAREN) is None:
            access = FieldAccess(target, Spanned(Variable(requested), ident.span))
            return Spanned(access, target.span + ident.span)
        return self._parse_method(target, requested, ident)