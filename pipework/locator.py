"""Resolve logical program names to absolute, executable paths."""
import os
import re
from pathlib import Path

from pipework.config import PROG_ENV_SUFFIX, SEARCH_DIRS
from pipework.errors import UnresolvedProgram
from pipework.state import RunState


def envprog(progname: str) -> str:
    """Return the override variable for progname, e.g. mkfs.vfat -> MKFS_VFAT_PROG."""
    return re.sub(r"[\W-]+", "_", progname.upper() + PROG_ENV_SUFFIX)


def is_executable(path: str | Path) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


def resolve(state: RunState, progname: str) -> str:
    """
    Return the path for progname: cache, then $<NAME>_PROG, then SEARCH_DIRS.
    Results are cached in state.programs for the life of the state.
    """
    if progname in state.programs:
        return state.programs[progname]

    var = envprog(progname)
    override = os.environ.get(var)
    if override and is_executable(override):
        return state.programs.setdefault(progname, override)

    # /usr/bin first (merged-/usr systems), then classic Unix order
    for directory in SEARCH_DIRS:
        candidate = os.path.join(directory, progname)
        if is_executable(candidate):
            return state.programs.setdefault(progname, candidate)

    raise UnresolvedProgram(progname, var)
