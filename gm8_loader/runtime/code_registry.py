"""
Code registration contract.

The loader never interprets GML. Every code-bearing field is handed to a
CodeRegistry as raw bytes with an explicit length and the returned handle is
stored on the asset. Once every category is loaded the identity resolver asks
the registry to compile each handle.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List


class CodeRegistry(ABC):
    """
    Interface of the script compiler as seen by the loader.

    Subclasses must implement:
    - register(): Store a block of statements
    - register_expression(): Store a single expression (trigger conditions,
      action arguments)
    - compile(): Compile a previously registered handle
    """

    @abstractmethod
    def register(self, code: bytes) -> Any:
        """
        Register a block of statements.

        Args:
            code: Raw code bytes; may contain NUL bytes

        Returns:
            Opaque handle
        """
        pass

    @abstractmethod
    def register_expression(self, code: bytes) -> Any:
        """Register a single expression and return its handle."""
        pass

    @abstractmethod
    def compile(self, handle: Any) -> bool:
        """
        Compile registered code.

        Returns:
            True on success. Implementations may also raise CompileError
            with their own message.
        """
        pass


@dataclass
class RegisteredCode:
    """One entry of a RecordingCodeRegistry."""
    code: bytes = b""
    expression: bool = False
    compiled: bool = False


@dataclass
class RecordingCodeRegistry(CodeRegistry):
    """
    Registry that keeps the code and accepts every compile request.

    Used by the command line dumper and by tests. Handles are indices into
    ``entries``; ``compile_order`` lists handles in the order they were
    compiled.
    """
    entries: List[RegisteredCode] = field(default_factory=list)
    compile_order: List[int] = field(default_factory=list)

    def register(self, code: bytes) -> int:
        self.entries.append(RegisteredCode(code=bytes(code)))
        return len(self.entries) - 1

    def register_expression(self, code: bytes) -> int:
        self.entries.append(RegisteredCode(code=bytes(code), expression=True))
        return len(self.entries) - 1

    def compile(self, handle: int) -> bool:
        self.entries[handle].compiled = True
        self.compile_order.append(handle)
        return True
