"""
Runtime values whose class bytes can be looked up.

A value is anything with ``get_class()`` returning a ``JavaClass``; the class
carries the loader that can hand out its ``.class`` resource.
"""

import logging
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class ResourceLoader(Protocol):
    """Supplies raw bytes for a resource name such as ``java/lang/String.class``."""

    def get_resource_as_stream(self, name: str) -> Optional[BinaryIO]:
        ...


@dataclass(frozen=True)
class JavaClass:
    """A loaded class: binary name plus the loader it came from."""
    name: str  # e.g. "com.example.Foo$Bar"
    loader: Optional[ResourceLoader] = None

    @property
    def package_name(self) -> str:
        package, _, _ = self.name.rpartition(".")
        return package

    @property
    def resource_name(self) -> str:
        return self.name.replace(".", "/") + ".class"

    def get_class(self) -> "JavaClass":
        return self


@dataclass(frozen=True)
class JavaObject:
    """Plain instance of a class."""
    java_class: JavaClass

    def get_class(self) -> JavaClass:
        return self.java_class


@dataclass(frozen=True)
class SerializedLambda:
    """Serialized form of a lambda, naming the method that implements it.

    Class names are internal names (``com/example/Foo``).
    """
    capturing_class: str
    functional_interface_class: str
    functional_interface_method_name: str
    impl_class: str
    impl_method_name: str
    impl_method_signature: str


@dataclass(frozen=True)
class LambdaProxy:
    """Instance of a synthetic lambda class.

    The proxy class has no bytes of its own; ``write_replace`` leads to the
    class and method that hold the lambda body.
    """
    java_class: JavaClass
    replacement: Optional[Callable[[], Any]] = None

    def get_class(self) -> JavaClass:
        return self.java_class

    def write_replace(self) -> Any:
        if self.replacement is None:
            raise TypeError(f"{self.java_class.name} is not serializable")
        return self.replacement()


def class_of(obj) -> JavaClass:
    return obj.get_class()


def stream_for_class(cls: JavaClass) -> Optional[tuple[BinaryIO, None]]:
    """Open the class file of ``cls`` through its loader."""
    if cls.loader is None:
        return None
    resource = cls.resource_name
    stream = cls.loader.get_resource_as_stream(resource)
    logger.debug("resource '%s' resolved to stream %r", resource, stream)
    if stream is None:
        return None
    return stream, None


def stream_for_lambda(obj) -> Optional[tuple[BinaryIO, str]]:
    """Open the class holding a serializable lambda's body.

    Returns the stream together with the implementation method name, or None
    if anything along the way fails.
    """
    try:
        cls = class_of(obj)
        write_replace = getattr(obj, "write_replace", None)
        if write_replace is None:
            return None
        serialized = write_replace()
        if not isinstance(serialized, SerializedLambda):
            return None
        logger.debug("found lambda implemented in %s:%s",
                     serialized.impl_class, serialized.impl_method_name)
        if cls.loader is None:
            return None
        stream = cls.loader.get_resource_as_stream(serialized.impl_class + ".class")
        if stream is None:
            return None
        return stream, serialized.impl_method_name
    except Exception:
        logger.debug("lambda lookup failed", exc_info=True)
        return None
