from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, List

from lark import Lark, Token, Transformer
from lark.exceptions import LarkError, UnexpectedInput, VisitError

from .exceptions import IndexParseError, NdsubError
from .specs import ALL, IndexSpec, Mask, Scalar, Vector, cat, nested, rev, rng

GRAMMAR_PATH = Path(__file__).with_name("index_grammar.lark")


@lru_cache(maxsize=1)
def _build_lark() -> Lark:
    grammar = GRAMMAR_PATH.read_text()
    return Lark(
        grammar,
        parser="earley",
        start=["index", "subscript"],
        ambiguity="resolve",
        maybe_placeholders=False,
    )


class IndexTransformer(Transformer):
    def __init__(self, text: str):
        super().__init__()
        self.text = text

    def _int(self, token: Token) -> int:
        return int(token.value)

    # ------------------------------------------------------------------ leaves
    def all_axis(self, _items: List[Any]) -> IndexSpec:
        return ALL

    def scalar(self, items: List[Token]) -> IndexSpec:
        return Scalar(self._int(items[0]))

    def vector(self, items: List[Token]) -> IndexSpec:
        return Vector(tuple(self._int(token) for token in items))

    def mask(self, items: List[Token]) -> IndexSpec:
        bits = []
        for token in items:
            value = self._int(token)
            if value not in (0, 1):
                raise IndexParseError(
                    f"Mask entries must be 0 or 1, got {value}",
                    column=token.column,
                    text=self.text,
                )
            bits.append(bool(value))
        return Mask(tuple(bits))

    # ------------------------------------------------------------------ ranges
    def range_start(self, items: List[Token]):
        return ("start", self._int(items[0]))

    def range_end(self, items: List[Token]):
        return ("end", self._int(items[0]))

    def range_step(self, items: List[Token]):
        return ("step", self._int(items[0]))

    def strict(self, _items: List[Any]):
        return ("strict", True)

    def range_spec(self, items: List[Any]) -> IndexSpec:
        parts = dict(items)
        return rng(
            parts.get("start", 0),
            parts.get("end", 0),
            parts.get("step", 1),
            parts.get("strict", False),
        )

    # ------------------------------------------------------------- combinators
    def rev(self, items: List[IndexSpec]) -> IndexSpec:
        return rev(items[0])

    def cat(self, items: List[IndexSpec]) -> IndexSpec:
        return cat(*items)

    def nested(self, items: List[IndexSpec]) -> IndexSpec:
        return nested(items[0], items[1])

    # -------------------------------------------------------------- entrypoints
    def index(self, items: List[IndexSpec]) -> IndexSpec:
        return items[0]

    def subscript(self, items: List[IndexSpec]) -> List[IndexSpec]:
        return list(items)


def _parse(text: str, start: str) -> Any:
    parser = _build_lark()
    try:
        tree = parser.parse(text, start=start)
    except UnexpectedInput as exc:
        raise IndexParseError(
            "Syntax error while parsing index expression",
            column=exc.column if isinstance(exc.column, int) and exc.column > 0 else None,
            text=text,
        ) from exc
    except LarkError as exc:  # pragma: no cover
        raise IndexParseError(str(exc), text=text) from exc
    try:
        return IndexTransformer(text).transform(tree)
    except VisitError as exc:
        if isinstance(exc.orig_exc, NdsubError):
            raise exc.orig_exc from exc
        raise


def parse_index(text: str) -> IndexSpec:
    """Parse the index expression of a single axis, e.g. ``"rev(1:-1)"``."""
    return _parse(text, "index")


def parse_subscript(text: str) -> List[IndexSpec]:
    """Parse comma-separated per-axis expressions, e.g. ``"*, cat(0:2, 2:4)"``."""
    return _parse(text, "subscript")
