"""Shared class file fixtures."""

import pytest

from pyjlines.classfile import (
    AccessFlags, ClassFile, CodeAttribute, MethodInfo,
)


def make_class(name="Hello", source_file="Hello.src", methods=None):
    """Build a class with the given ``{method_name: [(pc, line), ...]}``."""
    cf = ClassFile(name, source_file=source_file)
    cf.add_method(MethodInfo(AccessFlags.PUBLIC, "<init>", "()V"))
    for method_name, lines in (methods or {}).items():
        cf.add_method(MethodInfo(
            AccessFlags.PUBLIC | AccessFlags.STATIC, method_name, "()V",
            code=CodeAttribute(code=b"\x00" * 10 + b"\xb1", line_numbers=lines),
        ))
    return cf


@pytest.fixture
def hello_bytes():
    return make_class(methods={"run": [(0, 10), (5, 12), (9, 11)]}).to_bytes()


@pytest.fixture
def classes_dir(tmp_path):
    """Directory class path holding com/example/Hello.class."""
    cf = make_class(name="com/example/Hello", source_file="Hello.java",
                    methods={"run": [(0, 42), (4, 47)]})
    target = tmp_path / "com" / "example" / "Hello.class"
    target.parent.mkdir(parents=True)
    cf.write(str(target))
    return tmp_path
