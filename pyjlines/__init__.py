"""pyjlines - source file and line number lookup from Java class files."""

from .result import Result, NoSourceInfo, UnknownSourceFormat, SourceFile, SourceFileLines
from .runtime import JavaClass, JavaObject, LambdaProxy, SerializedLambda
from .classpath import ClassPath
from .linenumbers import line_numbers, for_object, for_class, for_bytes, get_info, pretty_name

__version__ = "0.1.0"
__all__ = [
    "Result",
    "NoSourceInfo",
    "UnknownSourceFormat",
    "SourceFile",
    "SourceFileLines",
    "JavaClass",
    "JavaObject",
    "LambdaProxy",
    "SerializedLambda",
    "ClassPath",
    "line_numbers",
    "for_object",
    "for_class",
    "for_bytes",
    "get_info",
    "pretty_name",
]
