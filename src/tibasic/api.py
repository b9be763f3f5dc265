## tibasic — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import TiList, Statement, Expression
from .errors import *
from .console import ScriptedConsole, TerminalConsole
from .environment import Environment
from .runtime import Runtime

_RUNTIME = Runtime()

def __getattr__(name):
    return getattr(_RUNTIME, name)
