"""Tree-sitter parsing layer for expression source text."""

from __future__ import annotations

from abc import ABC, abstractmethod

from . import constants


class ParserFactory(ABC):
    """Abstract factory for obtaining a tree-sitter parser."""

    @abstractmethod
    def get_parser(self, grammar: str): ...


class TreeSitterParserFactory(ParserFactory):
    """Concrete factory that delegates to tree-sitter-language-pack."""

    def get_parser(self, grammar: str):
        import tree_sitter_language_pack as tslp

        return tslp.get_parser(grammar)


class Parser:
    """Thin wrapper around a parser factory, fixed to the expression grammar."""

    def __init__(
        self,
        parser_factory: ParserFactory | None = None,
        grammar: str = constants.SOURCE_GRAMMAR,
    ):
        self._factory = parser_factory or TreeSitterParserFactory()
        self._grammar = grammar

    def parse(self, source: str):
        parser = self._factory.get_parser(self._grammar)
        return parser.parse(source.encode("utf-8"))
