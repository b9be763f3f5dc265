## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import lark


class TiError(Exception):
    label = "ERR:"

    def __init__(self, message: str = "", *, ti_name=None, ti_meta=None):
        """Base class for all errors raised while running a program."""
        super().__init__(message)
        self.ti_name: str = ti_name
        self.ti_meta: dict = ti_meta

class TiParseError(TiError):
    label = "ERR:SYNTAX"

    def __init__(self, message, *, filename=None, line=None, column=None, token=None):
        super().__init__(message, ti_meta={'filename': filename, 'line': line})
        self.filename = filename
        self.line = line
        self.column = column
        self.token = token

class TiIncompleteParse(TiParseError, lark.exceptions.ParseError):
    def __init__(self, message, *, filename=None, line=None, column=None, token=None):
        super().__init__(message, filename=filename, line=line, column=column, token=token)

class TiInputSyntaxError(TiParseError):
    """Line typed at `Prompt` or `Input` that is not an expression; located at the reading statement."""

    def __init__(self, message, *, text, column=None, token=None):
        super().__init__(message, column=column, token=token)
        self.text = text
        self.ti_meta = {}

class TiNameError(TiError, NameError):
    """Variable looked up before anything was assigned to it."""
    label = "ERR:UNDEFINED"

class TiTypeError(TiError, TypeError):
    """Value of the wrong kind for a typed variable, operator or index."""
    label = "ERR:DATA TYPE"

class TiIndexError(TiError, IndexError):
    label = "ERR:INVALID DIM"

class TiLabelError(TiError, LookupError):
    label = "ERR:LABEL"

class TiStepError(TiError, ValueError):
    label = "ERR:INCREMENT"

class TiArithmeticError(TiError, ArithmeticError):
    def __init__(self, message: str = "", *, ti_name=None, ti_meta=None, label="ERR:DOMAIN"):
        super().__init__(message, ti_name=ti_name, ti_meta=ti_meta)
        self.label = label

class TiInputError(TiError, EOFError):
    label = "ERR:INPUT"


class TiLoadError(TiError, OSError):
    label = "ERR:FILE"

    def __init__(self, message, *, filename=None):
        super().__init__(message, ti_meta={'filename': filename, 'line': None})
        self.filename = filename
