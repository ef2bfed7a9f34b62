from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Backend:
    name: str
    cmd: str
    requires_bootstrap: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("backend name must not be empty")
        if not self.cmd:
            raise ValueError("backend cmd must not be empty")

    def with_cmd(self, cmd: str) -> "Backend":
        return Backend(name=self.name, cmd=cmd, requires_bootstrap=self.requires_bootstrap)


PYTHON = Backend(name="python", cmd="python3", requires_bootstrap=True)
GNUPLOT = Backend(name="gnuplot", cmd="gnuplot")
NULL = Backend(name="null", cmd="cat > /dev/null")
CAT = Backend(name="cat", cmd="cat")

BUILTIN_BACKENDS = {b.name: b for b in (PYTHON, GNUPLOT, NULL, CAT)}


def backend_named(name: str) -> Backend:
    try:
        return BUILTIN_BACKENDS[name]
    except KeyError:
        known = ", ".join(sorted(BUILTIN_BACKENDS))
        raise ValueError(f"unknown backend {name!r}; expected one of: {known}") from None
