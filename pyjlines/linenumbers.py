"""
Source file and line number lookup for loaded classes.

This reads the class file bytes (a potentially blocking IO operation) and
interprets the debug information they may contain. Lambdas only work when
they are serializable: the generated proxy class has no bytes of its own and
only its serialized form names the method that implements it.
"""

import io
import logging
from typing import BinaryIO, Optional

from .reader import LineNumberReader
from .result import (
    Result, NoSourceInfo, UnknownSourceFormat, SourceFile, SourceFileLines,
)
from .runtime import ResourceLoader, JavaClass, class_of, stream_for_class, stream_for_lambda
from .stream import ClassStream

logger = logging.getLogger(__name__)


def line_numbers(obj) -> Result:
    """Obtain line number information for the class defining ``obj``."""
    cls = class_of(obj)
    found = stream_for_class(cls) or stream_for_lambda(obj)
    if found is None:
        return NoSourceInfo
    stream, method_filter = found
    return get_info(stream, method_filter)


for_object = line_numbers


def for_class(name: str, loader: ResourceLoader, method_filter: Optional[str] = None) -> Result:
    """Look up a class by binary name through ``loader``."""
    found = stream_for_class(JavaClass(name, loader))
    if found is None:
        return NoSourceInfo
    return get_info(found[0], method_filter)


def for_bytes(data: bytes, method_filter: Optional[str] = None) -> Result:
    """Parse class file bytes that are already in memory."""
    return get_info(io.BytesIO(data), method_filter)


def get_info(stream: BinaryIO, method_filter: Optional[str] = None) -> Result:
    """Parse ``stream`` as a class file and close it.

    Any decoding failure becomes ``UnknownSourceFormat``; only exceptions that
    are not ``Exception`` subclasses (KeyboardInterrupt, cancellation) escape.
    """
    try:
        return LineNumberReader(ClassStream(stream), method_filter).read()
    except Exception as ex:
        logger.debug("parse failed", exc_info=True)
        return UnknownSourceFormat(f"parse error: {ex}")
    finally:
        try:
            stream.close()
        except Exception:
            logger.debug("failed to close class file stream", exc_info=True)


def pretty_name(obj) -> str:
    """Format a string identifying where the class of ``obj`` was defined.

    Includes the package name and either source file information or the
    class name.
    """
    cls = class_of(obj)
    result = line_numbers(obj)
    if result is NoSourceInfo:
        return cls.name
    if isinstance(result, (UnknownSourceFormat, SourceFile)):
        return f"{cls.name}({result})"
    if isinstance(result, SourceFileLines):
        return f"{cls.package_name}/{result}"
    return cls.name
