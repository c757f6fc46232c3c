"""
Binding list parsing - turns the inside of a brace list into name pairs.

Used for every brace list the bundler rewrites:
- destructuring requires:  { a, b: c, d = 1, ...rest }
- import lists:            { a, b as c }
- module.exports objects:  { a, b: c }
- export lists:            { a, b as c }
"""

from lark import Lark, Transformer

from engine.grammar import binding_grammar


class Binding:
    """One entry of a brace list: `source` renamed to `target`."""

    def __init__(self, source, target=None, is_rest=False):
        self.source = source
        self.target = target if target is not None else source
        self.is_rest = is_rest

    @property
    def is_renamed(self):
        return self.source != self.target

    def as_pair(self):
        return (self.source, self.target)

    def __eq__(self, other):
        if not isinstance(other, Binding):
            return NotImplemented
        return (self.source, self.target, self.is_rest) == (other.source, other.target, other.is_rest)

    def __hash__(self):
        return hash((self.source, self.target, self.is_rest))

    def __repr__(self):
        if self.is_rest:
            return f"Binding(...{self.source})"
        if self.is_renamed:
            return f"Binding({self.source} -> {self.target})"
        return f"Binding({self.source})"


class BindingTransformer(Transformer):
    """
    Transforms a binding list parse tree into a list of Binding objects.

    Default values are parsed and discarded; they never change which name
    is imported or exposed.
    """

    def start(self, items):
        return list(items)

    def rest(self, args):
        return Binding(args[0], is_rest=True)

    def binding(self, args):
        name = args[0]
        target = None
        for part in args[1:]:
            if isinstance(part, tuple) and part[0] == 'rename':
                target = part[1]
        return Binding(name, target)

    def rename(self, args):
        return ('rename', args[0])

    def default(self, args):
        return ('default', args[0].strip())

    def NAME(self, t):
        return str(t)

    def DEFAULT_VALUE(self, t):
        return str(t)


_parser = None


def get_parser():
    """Shared LALR parser for binding lists."""
    global _parser
    if _parser is None:
        _parser = Lark(binding_grammar, parser='lalr')
    return _parser


def parse_bindings(text):
    """
    Parse the text between the braces of a binding list.

    Args:
        text: Inner text, without the surrounding braces

    Returns:
        List of Binding objects in source order

    Raises:
        lark.exceptions.LarkError: If the list is not a plain binding list
            (nested patterns, computed keys, literal values, ...)
    """
    tree = get_parser().parse(text)
    return BindingTransformer().transform(tree)
