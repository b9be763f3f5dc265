## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import os
from pathlib import Path

from .errors import TiLoadError


SOURCE_SUFFIX = '.tib'


def _resolve_tib_paths() -> list[Path]:
    parts = [p for p in os.environ.get("TIB_PATH", "").split(os.pathsep) if p]
    return [Path(os.path.expanduser(os.path.expandvars(p))) for p in parts]


def iter_program_candidates(name: str):
    """Resolution order: the name as a path, then TIB_PATH entries with and without suffix."""
    yield Path(name)
    for root in _resolve_tib_paths():
        yield root / name
        yield root / f"{name}{SOURCE_SUFFIX}"


def resolve_program(name: str) -> Path | None:
    return next((p for p in iter_program_candidates(name) if p.is_file()), None)


def trim_lines(text: str) -> str:
    return ''.join(line.strip() + '\n' for line in text.splitlines())


def load_source(path: str | Path) -> str:
    """Read a program file with every line trimmed of surrounding whitespace."""
    try:
        text = Path(path).read_text(encoding='utf-8')
    except FileNotFoundError:
        raise TiLoadError(f"Unable to locate file `{path}`.", filename=str(path)) from None
    except (OSError, UnicodeDecodeError) as exc:
        raise TiLoadError(f"Unable to read file `{path}`: {exc}", filename=str(path)) from exc
    return trim_lines(text)
