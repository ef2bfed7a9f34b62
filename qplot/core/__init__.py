from .backends import BUILTIN_BACKENDS, CAT, GNUPLOT, NULL, PYTHON, Backend, backend_named
from .channel import ProcessChannel
from .config import debug_enabled, load_config, resolve_backend, resolve_command
from .sinks import BufferSink, OutputSink, ScriptStream, StreamSink

__all__ = [
    "BUILTIN_BACKENDS",
    "Backend",
    "BufferSink",
    "CAT",
    "GNUPLOT",
    "NULL",
    "OutputSink",
    "PYTHON",
    "ProcessChannel",
    "ScriptStream",
    "StreamSink",
    "backend_named",
    "debug_enabled",
    "load_config",
    "resolve_backend",
    "resolve_command",
]
