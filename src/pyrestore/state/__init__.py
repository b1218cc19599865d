"""State layer.

Observable cells that hold resource state, and the scoped registry used
to hand a resource instance to the code that consumes it.
"""

from pyrestore.state.cell import Cell
from pyrestore.state.registry import InjectionKey, Registry, inject, with_injection

__all__ = ["Cell", "InjectionKey", "Registry", "inject", "with_injection"]
