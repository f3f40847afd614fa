from turing.errors import CompilerError, CompilerWarning, ErrorPosition, ParseError, SemanticError
from turing.instruction import Instruction, Movement
from turing.libraries import Library, LibraryRegistry, default_registry
from turing.machine import TuringMachine, build
from turing.output import Defined, TuringOutput, Undefined

__all__ = [
    "CompilerError",
    "CompilerWarning",
    "Defined",
    "ErrorPosition",
    "Instruction",
    "Library",
    "LibraryRegistry",
    "Movement",
    "ParseError",
    "SemanticError",
    "TuringMachine",
    "TuringOutput",
    "Undefined",
    "build",
    "default_registry",
]
