"""
Binding List Grammar.

This module contains the Lark grammar for the text between the braces of a
destructuring require, an import/export list, or a module.exports object:

    { a, b: c, d = 1, ...rest }
    { a, b as c }
"""

binding_grammar = r"""
    start: (_entry ("," _entry)* ","?)?

    _entry: rest | binding

    rest: "..." NAME
    binding: NAME rename? default?
    rename: (":" | "as") NAME
    default: "=" DEFAULT_VALUE

    // --- Terminals ---
    NAME: /[A-Za-z_$][\w$]*/
    DEFAULT_VALUE: /[^,]+/

    COMMENT_1: /\/\/[^\n]*/
    BLOCK_COMMENT: /\/\*[\s\S]*?\*\//

    %import common.WS
    %ignore WS
    %ignore COMMENT_1
    %ignore BLOCK_COMMENT
"""
