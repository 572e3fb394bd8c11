"""chainfix: diagnostic-driven optional chaining for TypeScript."""

from chainfix._version import __version__
from chainfix.fix.engine import ConvergenceEngine, fix_in_memory_project, fix_source_text
from chainfix.fix.project import fix_project
from chainfix.frontend.tsc import CompilerConfig, DiagnosticProvider, TscDiagnosticProvider

__all__ = [
    "__version__",
    "CompilerConfig",
    "ConvergenceEngine",
    "DiagnosticProvider",
    "TscDiagnosticProvider",
    "fix_in_memory_project",
    "fix_project",
    "fix_source_text",
]
