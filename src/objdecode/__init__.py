"""A library for parsing Wavefront OBJ files with schema-compiled element parsers."""

__all__ = [
    "SUPPORTED_ELEMENTS",
    "CompiledFSM",
    "Diagnostic",
    "DiagnosticKind",
    "Dispatcher",
    "ElementParser",
    "ElementType",
    "Failure",
    "OBJError",
    "OBJMesh",
    "OBJParseError",
    "OBJSchemaError",
    "Registry",
    "RegistryBuilder",
    "Severity",
    "Success",
    "Token",
    "TokenKind",
    "Tokenizer",
    "Warned",
    "compile_schema",
    "default_registry",
    "format_diagnostic",
    "load_obj",
    "tokenize",
]

from objdecode.compiler import CompiledFSM, compile_schema
from objdecode.diagnostics import Diagnostic, DiagnosticKind, Severity, format_diagnostic
from objdecode.dispatcher import Dispatcher
from objdecode.exceptions import OBJError, OBJParseError, OBJSchemaError
from objdecode.loader import load_obj
from objdecode.mesh import OBJMesh
from objdecode.parser import ElementParser, Failure, Success, Warned
from objdecode.registry import ElementType, Registry, RegistryBuilder, default_registry
from objdecode.schemas import SUPPORTED_ELEMENTS
from objdecode.tokenizer import Tokenizer, tokenize
from objdecode.tokens import Token, TokenKind
