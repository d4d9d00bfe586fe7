#!/usr/bin/env python3
##
## sexpr - s-expression builder, parser and arithmetic evaluator
## Copyright (C) 2025  Mark Hays (github:minmus-9)
##
## This program is free software: you can redistribute it and/or modify
## it under the terms of the GNU General Public License as published by
## the Free Software Foundation, either version 3 of the License, or
## (at your option) any later version.
##
## This program is distributed in the hope that it will be useful,
## but WITHOUT ANY WARRANTY; without even the implied warranty of
## MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
## GNU General Public License for more details.
##
## You should have received a copy of the GNU General Public License
## along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
sexpr.py -- parse "(+ 1 (* 2 3))" into a tree of python values and
evaluate it. values are float, str, bool and tuple (for lists). nothing
here recurses on the python stack, so nesting depth is limited by memory.
"""

## pylint: disable=invalid-name
## XXX pylint: disable=missing-docstring

import math
import sys
import traceback


NUMBER_START = "0123456789-"  ## numeric token starts; a lone "-" is the operator
PROMPT = "sexpr> "


## {{{ basics


SENTINEL = object()


class SexprError(Exception):
    pass


error = SexprError


class StackUnderflow(SexprError):
    pass


class UnbalancedParentheses(SexprError):
    pass


class NumberParseError(SexprError):
    pass


class NonNumericOperand(SexprError):
    def __init__(self, value):
        SexprError.__init__(self, f"cannot convert {render(value)} to number")
        self.value = value


class OperatorMustBeString(SexprError):
    def __init__(self, value):
        SexprError.__init__(self, f"operator must be string, got {render(value)}")
        self.value = value


class UnknownOperator(SexprError):
    def __init__(self, operator):
        SexprError.__init__(self, f"unknown operator {operator!r}")
        self.operator = operator


## }}}
## {{{ trampoline


class _Land(Exception):
    pass


def trampoline(func, *args):
    try:
        while True:
            func, args = func(*args)
    except _Land as exc:
        return exc.args[0]


def bounce(func, *args):
    return func, args


def land(value):
    raise _Land(value)


## }}}
## {{{ values


def is_number(x):
    return type(x) is float  ## pylint: disable=unidiomatic-typecheck


def is_str(x):
    return isinstance(x, str)


def is_bool(x):
    return isinstance(x, bool)


def is_arr(x):
    return isinstance(x, tuple)


## }}}
## {{{ builder


class Builder:
    """
    assemble a value one scalar at a time. open() starts a nested list
    and close() finishes it; value() hands back everything pushed at the
    top level wrapped in one more list.
    """

    __slots__ = ("current", "stack")

    def __init__(self):
        self.current = []
        self.stack = []

    def depth(self):
        return len(self.stack)

    def take(self, replacement):
        ## hand back current, leaving replacement in its place
        current, self.current = self.current, replacement
        return current

    def push(self, x):
        self.current.append(x)
        return self

    def push_str(self, s):
        return self.push(s)

    def push_bool(self, b):
        return self.push(bool(b))

    def push_number(self, n):
        return self.push(float(n))

    def open(self):
        self.stack.append(self.take([]))
        return self

    def close(self):
        if not self.stack:
            raise StackUnderflow("mismatched open/close: too many ')'")
        arr = tuple(self.take(self.stack.pop()))
        self.current.append(arr)
        return self

    def value(self):
        if self.stack:
            raise UnbalancedParentheses(f"eof expecting {len(self.stack)} ')'")
        return tuple(self.take([]))


## }}}
## {{{ parser


T_BOOL = "bool"
T_NUMBER = "number"
T_STRING = "string"


def parse_number(word):
    try:
        ## float() also takes "1_000" and non-ascii digits; we don't
        if "_" in word or not word.isascii():
            raise ValueError(f"could not convert string to float: {word!r}")
        return float(word)
    except ValueError as exc:
        raise NumberParseError(f"invalid float literal {word!r}: {exc}") from exc


def classify(word):
    if word == "T":
        return T_BOOL, True
    if word == "F":
        return T_BOOL, False
    if word == "-":
        return T_STRING, word  ## the subtraction operator
    if word[0] in NUMBER_START:
        return T_NUMBER, parse_number(word)
    return T_STRING, word


class Parser:
    def __init__(self, builder=None):
        self.builder = Builder() if builder is None else builder
        self.word = []

    def feed(self, text):
        """
        scan text into the builder. feed(None) ends the document and
        returns the builder's value.
        """
        if text is None:
            self.flush()
            return self.builder.value()
        b = self.builder
        for ch in text:
            if ch == "(":
                self.flush()
                b.open()
            elif ch == ")":
                self.flush()
                b.close()
            elif ch.isspace():
                self.flush()
            else:
                self.word.append(ch)
        return None

    def flush(self):
        if self.word:
            word, self.word = "".join(self.word), []
            self.process_token(*classify(word))

    def process_token(self, ttype, token):
        b = self.builder
        if ttype == T_BOOL:
            b.push_bool(token)
        elif ttype == T_NUMBER:
            b.push_number(token)
        else:
            b.push_str(token)


def parse(text):
    """
    parse one document. a document holding exactly one top-level item
    comes back as that item, so parse("(1 2)") is (1.0, 2.0) and
    parse("7") is 7.0; otherwise the top-level tuple is returned as is.
    """
    p = Parser()
    p.feed(text)
    ret = p.feed(None)
    if len(ret) == 1:
        return ret[0]
    return ret


## }}}
## {{{ stringify


_CLOSE = object()


def stringify_atom(x):
    if is_bool(x):
        return "T" if x else "F"
    if is_number(x):
        s = repr(x)
        return s[:-2] if s.endswith(".0") else s
    if is_str(x):
        return x
    raise TypeError(f"expected value, got {x!r}")


def stringify(x):
    parts = []
    todo = [x]
    while todo:
        x = todo.pop()
        if x is _CLOSE:
            parts.append(")")
        elif is_arr(x):
            parts.append("(")
            todo.append(_CLOSE)
            todo.extend(reversed(x))
        else:
            parts.append(stringify_atom(x) + " ")
    return "".join(parts)


def render(x):
    ## for error messages
    return stringify(x).rstrip()


## }}}
## {{{ pairs


def pairs(v):
    """
    yield (key, value) for leading children shaped like (key value ...),
    e.g. ((one 1) (two 2)) gives ("one", 1.0) and ("two", 2.0).
    """
    if not is_arr(v):
        raise TypeError(f"expected list, got {v!r}")
    return _pairs(v)


def _pairs(v):
    for item in v:
        if not (is_arr(item) and len(item) >= 2 and is_str(item[0])):
            return
        yield item[0], item[1]


## }}}
## {{{ operators


OPS = {}


def fold(name, seed):
    def wrap(func):
        OPS[name] = func
        func.seed = seed
        func.arity = None
        return func

    return wrap


def binary(name):
    def wrap(func):
        OPS[name] = func
        func.seed = SENTINEL
        func.arity = 2
        return func

    return wrap


@fold("+", 0.0)
def op_add(x, y):
    return x + y


@fold("*", 1.0)
def op_mul(x, y):
    return x * y


@binary("-")
def op_sub(x, y):
    return x - y


@binary("/")
def op_div(x, y):
    ## ieee semantics instead of ZeroDivisionError
    if y == 0.0:
        if x == 0.0 or math.isnan(x):
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)
    return x / y


## }}}
## {{{ eval


class Frame:
    ## pylint: disable=too-few-public-methods

    __slots__ = ("f", "a", "x", "i", "c")

    def __init__(self, f, x, c):
        self.f = f  ## operator
        self.a = f.seed  ## accumulator
        self.x = x  ## operands
        self.i = 0
        self.c = c

    def __repr__(self):
        return f"{self.__class__.__name__}({self.f.__name__}, {self.a}, {self.i})"


class Evaluator:
    def __init__(self):
        self.stack = []

    def eval(self, x):
        try:
            return trampoline(self.eval_, x, land)
        finally:
            self.stack.clear()

    def eval_(self, x, c):
        if is_number(x):
            return bounce(c, x)
        if is_arr(x) and len(x) > 2:
            return self.eval_op(x, c)
        raise NonNumericOperand(x)

    def eval_op(self, items, c):
        op = items[0]
        if not is_str(op):
            raise OperatorMustBeString(op)
        func = OPS.get(op)
        if func is None:
            raise UnknownOperator(op)
        args = items[1:] if func.arity is None else items[1 : 1 + func.arity]
        self.stack.append(Frame(func, args, c))
        return bounce(self.eval_, args[0], self.eval_next_arg)

    def eval_next_arg(self, value):
        frame = self.stack[-1]
        frame.a = value if frame.a is SENTINEL else frame.f(frame.a, value)
        frame.i += 1
        if frame.i < len(frame.x):
            return bounce(self.eval_, frame.x[frame.i], self.eval_next_arg)
        self.stack.pop()
        return bounce(frame.c, frame.a)


def leval(x):
    return Evaluator().eval(x)


def execute(text):
    return leval(parse(text))


## }}}
## {{{ repl and main


def process(text):
    try:
        value = parse(text)
    except SexprError as exc:
        print("error:", exc, file=sys.stderr)
        return 1
    print(stringify(value))
    try:
        result = leval(value)
    except SexprError as exc:
        print("error:", exc, file=sys.stderr)
        return 1
    print("result is", result)
    return 0


def repl():
    try:
        import readline as _  ## pylint: disable=import-outside-toplevel
    except ImportError:
        pass

    while True:
        try:
            line = input(PROMPT)
        except (EOFError, KeyboardInterrupt):
            break
        if not line.strip():
            continue
        try:
            process(line)
        except Exception:  ## pylint: disable=broad-except
            traceback.print_exception(*sys.exc_info())
    print("\nbye")
    return 0


def main(argv=None, force_repl=False):
    args = sys.argv[1:] if argv is None else argv
    if force_repl:
        return repl()
    if not args:
        return process(sys.stdin.readline())
    rc = 0
    for arg in args:
        if arg == "-":
            repl()
        elif process(arg):
            rc = 1
    return rc


if __name__ == "__main__":
    raise SystemExit(main())


## }}}

## EOF
