"""
Evaluator for Foundry pf2e value formulas.

Rule values are often formulas rather than numbers, e.g.
``ternary(gte(@actor.level,13),min(@actor.system.proficiencies.defenses.unarmored.rank,2),1)``.
This module tokenizes such strings and evaluates them with a small
recursive-descent parser against a character. Arithmetic follows the usual
precedence; comparisons are functions returning 1 or 0.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Callable

from .models import ABILITY_NAMES, Character

logger = logging.getLogger("pf2e-sheet")


class FormulaError(Exception):
    """Raised when a formula cannot be tokenized or parsed."""


_TOKEN_RE = re.compile(
    r"\s*(?:(?P<number>\d+(?:\.\d+)?)|(?P<ref>@[\w.]+)|(?P<name>[A-Za-z_]\w*)|(?P<op>[-+*/(),]))"
)

_ABILITY_REF_RE = re.compile(r"^@actor\.abilities\.(\w+)\.mod$")
_DEFENSE_REF_RE = re.compile(r"^@actor\.system\.proficiencies\.defenses\.(\w+)\.rank$")


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


FUNCTIONS: dict[str, Callable[..., float]] = {
    "max": max,
    "min": min,
    "floor": math.floor,
    "ceil": math.ceil,
    "abs": abs,
    "clamp": _clamp,
    "ternary": lambda cond, a, b: a if cond else b,
    "gte": lambda a, b: 1 if a >= b else 0,
    "gt": lambda a, b: 1 if a > b else 0,
    "lte": lambda a, b: 1 if a <= b else 0,
    "lt": lambda a, b: 1 if a < b else 0,
    "eq": lambda a, b: 1 if a == b else 0,
}


def tokenize(formula: str) -> list[tuple[str, str]]:
    """Split a formula into ``(kind, text)`` tokens.

    Raises:
        FormulaError: On any character that is not part of a token.
    """
    tokens: list[tuple[str, str]] = []
    pos = 0
    text = formula.strip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match or match.end() == pos:
            raise FormulaError(f"Unexpected character at {pos} in {formula!r}")
        kind = match.lastgroup
        tokens.append((kind, match.group(kind)))
        pos = match.end()
        while pos < len(text) and text[pos].isspace():
            pos += 1
    return tokens


def resolve_reference(ref: str, character: Character) -> float:
    """Value of an ``@actor...`` reference. Unknown references are 0."""
    if ref == "@actor.level":
        return character.level

    match = _ABILITY_REF_RE.match(ref)
    if match and match.group(1) in ABILITY_NAMES:
        return character.ability_scores.modifier(match.group(1))

    match = _DEFENSE_REF_RE.match(ref)
    if match:
        rank = character.armor_rank(match.group(1))
        return rank.rank_index if rank else 0

    logger.debug(f"Unknown formula reference {ref}, using 0")
    return 0


class _Parser:
    """Recursive-descent parser over a token list.

    Grammar::

        expr   := term (("+" | "-") term)*
        term   := unary (("*" | "/") unary)*
        unary  := "-" unary | atom
        atom   := number | ref | name "(" args ")" | "(" expr ")"
    """

    def __init__(self, tokens: list[tuple[str, str]], character: Character) -> None:
        self.tokens = tokens
        self.pos = 0
        self.character = character

    def peek(self) -> tuple[str, str] | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def take(self, expected: str | None = None) -> tuple[str, str]:
        token = self.peek()
        if token is None:
            raise FormulaError("Unexpected end of formula")
        if expected is not None and token[1] != expected:
            raise FormulaError(f"Expected {expected!r}, got {token[1]!r}")
        self.pos += 1
        return token

    def parse(self) -> float:
        value = self.expr()
        if self.peek() is not None:
            raise FormulaError(f"Trailing input at token {self.peek()[1]!r}")
        return value

    def expr(self) -> float:
        value = self.term()
        while (token := self.peek()) and token[1] in ("+", "-"):
            self.take()
            right = self.term()
            value = value + right if token[1] == "+" else value - right
        return value

    def term(self) -> float:
        value = self.unary()
        while (token := self.peek()) and token[1] in ("*", "/"):
            self.take()
            right = self.unary()
            if token[1] == "*":
                value = value * right
            else:
                if right == 0:
                    raise FormulaError("Division by zero")
                value = value / right
        return value

    def unary(self) -> float:
        token = self.peek()
        if token and token[1] == "-":
            self.take()
            return -self.unary()
        if token and token[1] == "+":
            self.take()
            return self.unary()
        return self.atom()

    def atom(self) -> float:
        kind, text = self.take()
        if kind == "number":
            return float(text) if "." in text else int(text)
        if kind == "ref":
            return resolve_reference(text, self.character)
        if kind == "name":
            func = FUNCTIONS.get(text)
            if func is None:
                raise FormulaError(f"Unknown function {text!r}")
            self.take("(")
            args = [self.expr()]
            while self.peek() and self.peek()[1] == ",":
                self.take()
                args.append(self.expr())
            self.take(")")
            try:
                return func(*args)
            except TypeError as e:
                raise FormulaError(f"Bad arguments for {text}: {e}") from e
        if text == "(":
            value = self.expr()
            self.take(")")
            return value
        raise FormulaError(f"Unexpected token {text!r}")


def evaluate(formula: str, character: Character) -> float:
    """Evaluate ``formula`` strictly.

    Raises:
        FormulaError: If the formula is malformed.
    """
    return _Parser(tokenize(formula), character).parse()


def evaluate_formula(formula: int | float | str | None, character: Character) -> int:
    """Evaluate a rule value to an int, never raising.

    Numbers pass through. Malformed formulas fall back to their leading
    integer, or 0, with a warning.
    """
    if formula is None or isinstance(formula, bool):
        return 0
    if isinstance(formula, (int, float)):
        return int(formula)
    try:
        return int(evaluate(str(formula), character))
    except FormulaError as e:
        match = re.match(r"\s*(-?\d+)", str(formula))
        fallback = int(match.group(1)) if match else 0
        logger.warning(f"Could not evaluate formula {formula!r} ({e}), using {fallback}")
        return fallback
