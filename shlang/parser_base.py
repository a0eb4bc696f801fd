"""Token-stream handling shared by the parser: lookahead, checks and blocks."""

from __future__ import annotations

from shlang.lang_errors import ParseError, ParseErrorKind
from shlang.lexer import Lexer
from shlang.nodes import DontResult, Number, NodeSpan, can_result, wrap_in_result
from shlang.spans import Span
from shlang.tokens import Token, TokenType

_UNSET = object()


class ParserBase:
    """Holds the source and a one-token lookahead over its tokens."""

    def __init__(self, source: str) -> None:
        self.source = source
        self._tokens = iter(Lexer(source))
        self._peeked: object = _UNSET

    def text(self, token: Token) -> str:
        """The source text a token covers."""
        return self.source[token.span.start : token.span.stop]

    def filtered_text(self, token: Token, filter: str) -> str:
        """The token's text with every ``filter`` character removed."""
        return self.text(token).replace(filter, "")

    def parse_num(self, token: Token) -> Number:
        """Read a number token, ignoring digit-separating underscores."""
        return Number(float(self.filtered_text(token, "_")))

    # -- lookahead -------------------------------------------------------

    def _peek(self) -> Token | None:
        if self._peeked is _UNSET:
            self._peeked = next(self._tokens, None)
        return self._peeked  # type: ignore[return-value]

    def _peek_is(self, kind: TokenType) -> bool:
        token = self._peek()
        return token is not None and token.is_kind(kind)

    def _peek_some(self) -> Token:
        token = self._peek()
        if token is None:
            raise ParseError(ParseErrorKind.UNEXPECTED_STREAM_END, Span.EMPTY)
        return token

    def _next(self) -> Token | None:
        token = self._peek()
        self._peeked = _UNSET
        return token

    def _expect_next(self) -> Token:
        token = self._peek_some()
        self._next()
        return token

    def _skip_some(self) -> Token:
        self._next()
        return self._peek_some()

    # -- checks ----------------------------------------------------------

    @staticmethod
    def _check_valid(expected: TokenType, token: Token) -> None:
        if not token.is_kind(expected):
            raise ParseError(
                ParseErrorKind.INVALID_TOKEN, token.span, expected, token.kind
            )

    def _expect(self, expected: TokenType) -> Token:
        token = self._peek_some()
        self._check_valid(expected, token)
        return token

    def _is_expected(self, expected: TokenType) -> Token | None:
        token = self._peek()
        if token is not None and token.is_kind(expected):
            return token
        return None

    def _consume(self, expected: TokenType) -> Token:
        token = self._expect(expected)
        self._next()
        return token

    def _consume_ident(self) -> str:
        return self.text(self._consume(TokenType.IDENTIFIER))

    @staticmethod
    def _unexpected_token(token: Token) -> ParseError:
        return ParseError(ParseErrorKind.UNEXPECTED_TOKEN, token.span, token.kind)

    @staticmethod
    def _expect_expr(node: NodeSpan) -> NodeSpan:
        if not can_result(node.item):
            raise ParseError(ParseErrorKind.UNEXPECTED_VOID_EXPRESSION, node.span)
        return node

    # -- blocks ----------------------------------------------------------

    @staticmethod
    def _filter_block(body: list[NodeSpan]) -> list[NodeSpan]:
        """Drop ``DontResult`` markers and wrap a trailing value as the result."""
        if not body:
            return body
        last = body[-1]
        filtered = [node for node in body if not isinstance(node.item, DontResult)]
        if not isinstance(last.item, DontResult) and can_result(last.item):
            filtered[-1] = wrap_in_result(last)
        return filtered

    def parse_expr(self, in_conditional: bool) -> NodeSpan:
        raise NotImplementedError

    def _parse_block(self) -> list[NodeSpan]:
        """Parse the expressions of a ``{ ... }`` block, leaving ``}`` unread."""
        body: list[NodeSpan] = []
        self._next()
        if self._peek_some().is_kind(TokenType.RBRACE):
            return body
        while True:
            body.append(self.parse_expr(False))
            if self._peek_is(TokenType.RBRACE):
                break
        return self._filter_block(body)