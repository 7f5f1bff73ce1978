"""Expression language for CONDITION steps.

Supports literals (numbers, quoted strings, ``true``/``false``/``null``),
``candidate.<field>`` and ``context.<key>[.<key>...]`` references, the
comparisons ``== != > < >= <=`` (``===``/``!==`` accepted as aliases), ``!``,
``&&``, ``||`` and parentheses. Expressions are tokenized and parsed here;
nothing is handed to ``eval``.
"""

from __future__ import annotations

import operator
import re
from typing import Any, List, Mapping, Optional, Tuple

_TOKEN_RE = re.compile(
    r"""
    \s*(?:
        (?P<number>-?\d+(?:\.\d+)?)
      | (?P<string>"[^"]*"|'[^']*')
      | (?P<op>===|!==|==|!=|>=|<=|&&|\|\||[<>!()])
      | (?P<name>[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*)
    )
    """,
    re.VERBOSE,
)

_LITERALS = {"true": True, "false": False, "null": None}
_ALIASES = {"===": "==", "!==": "!="}
_ORDERING = {">": operator.gt, "<": operator.lt, ">=": operator.ge, "<=": operator.le}
_COMPARISONS = {"==", "!=", *_ORDERING}

Token = Tuple[str, Any]


class ConditionError(ValueError):
    pass


def tokenize(expression: str) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    text = expression.rstrip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match or match.end() == pos:
            raise ConditionError(f"Unexpected character at position {pos}: {text[pos:pos + 10]!r}")
        kind = match.lastgroup
        raw = match.group(kind)
        if kind == "number":
            tokens.append(("value", float(raw) if "." in raw else int(raw)))
        elif kind == "string":
            tokens.append(("value", raw[1:-1]))
        elif kind == "op":
            tokens.append(("op", _ALIASES.get(raw, raw)))
        elif raw in _LITERALS:
            tokens.append(("value", _LITERALS[raw]))
        else:
            tokens.append(("ref", raw))
        pos = match.end()
    return tokens


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _align(left: Any, right: Any) -> Tuple[Any, Any]:
    """Compare "70" and 70 as numbers."""
    if _is_number(left) and isinstance(right, str):
        try:
            return left, float(right)
        except ValueError:
            return str(left), right
    if isinstance(left, str) and _is_number(right):
        try:
            return float(left), right
        except ValueError:
            return left, str(right)
    return left, right


def compare(op: str, left: Any, right: Any) -> bool:
    left, right = _align(left, right)
    if op == "==":
        return left == right
    if op == "!=":
        return left != right
    if left is None or right is None:
        return False
    try:
        return bool(_ORDERING[op](left, right))
    except TypeError:
        return False


class _Parser:
    def __init__(self, tokens: List[Token], scope: Mapping[str, Any]):
        self._tokens = tokens
        self._pos = 0
        self._scope = scope

    def parse(self) -> Any:
        if not self._tokens:
            raise ConditionError("Empty expression")
        value = self._or()
        if self._pos != len(self._tokens):
            raise ConditionError(f"Unexpected token {self._tokens[self._pos][1]!r}")
        return value

    def _peek(self) -> Optional[Token]:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _accept(self, op: str) -> bool:
        token = self._peek()
        if token == ("op", op):
            self._pos += 1
            return True
        return False

    def _or(self) -> Any:
        value = self._and()
        while self._accept("||"):
            right = self._and()
            value = bool(value) or bool(right)
        return value

    def _and(self) -> Any:
        value = self._comparison()
        while self._accept("&&"):
            right = self._comparison()
            value = bool(value) and bool(right)
        return value

    def _comparison(self) -> Any:
        left = self._unary()
        token = self._peek()
        if token and token[0] == "op" and token[1] in _COMPARISONS:
            self._pos += 1
            return compare(token[1], left, self._unary())
        return left

    def _unary(self) -> Any:
        if self._accept("!"):
            return not bool(self._unary())
        return self._primary()

    def _primary(self) -> Any:
        token = self._peek()
        if token is None:
            raise ConditionError("Unexpected end of expression")
        self._pos += 1
        kind, value = token
        if kind == "value":
            return value
        if kind == "ref":
            return self._resolve(value)
        if value == "(":
            inner = self._or()
            if not self._accept(")"):
                raise ConditionError("Missing closing parenthesis")
            return inner
        raise ConditionError(f"Unexpected token {value!r}")

    def _resolve(self, path: str) -> Any:
        root, *rest = path.split(".")
        if root not in self._scope:
            raise ConditionError(f"Unknown reference {path!r}")
        current = self._scope[root]
        for key in rest:
            if not isinstance(current, Mapping):
                return None
            current = current.get(key)
        return current


def evaluate(expression: str, context: Mapping[str, Any]) -> bool:
    """Evaluate ``expression`` against a workflow context.

    ``candidate.*`` reads ``context["candidate"]``; ``context.*`` reads the
    context itself. Unknown keys resolve to null.
    """
    scope = {"candidate": context.get("candidate") or {}, "context": context}
    return bool(_Parser(tokenize(expression), scope).parse())
