import numpy as np
import pytest

from reflector.core.errors import ArgumentMismatchError, SignatureError
from reflector.core.models import PrimitiveKind
from reflector.parsers.descriptor import (
    array_component,
    binary_to_internal,
    cast_to_primitive,
    internal_to_binary,
    map_descriptor,
    register_width,
    split_descriptors,
)


def test_split_mixed_parameter_list():
    assert split_descriptors("IJLjava/lang/String;[B[[Lcom/Foo;Z") == [
        "I", "J", "Ljava/lang/String;", "[B", "[[Lcom/Foo;", "Z",
    ]
    assert split_descriptors("") == []


@pytest.mark.parametrize("text", ["L;", "Ljava/lang", "[", "V", "X", "I" + "V"])
def test_split_rejects_bad_descriptors(text):
    with pytest.raises(SignatureError):
        split_descriptors(text)


def test_array_dimension_limit():
    assert array_component("[" * 255 + "I") == (255, "I")
    map_descriptor("[" * 255 + "I")
    with pytest.raises(SignatureError):
        map_descriptor("[" * 256 + "I")


def test_map_primitive_and_reference():
    long_type = map_descriptor("J")
    assert long_type.kind is PrimitiveKind.LONG
    assert long_type.name == "long"
    assert long_type.width == 2
    assert long_type.is_primitive

    string = map_descriptor("Ljava/lang/String;")
    assert string.is_reference
    assert string.name == "java.lang.String"
    assert string.width == 1
    assert not string.is_object
    assert map_descriptor("Ljava/lang/Object;").is_object
    assert map_descriptor("[Ljava/lang/String;").name == "[Ljava.lang.String;"


def test_map_rejects_more_than_one_descriptor():
    with pytest.raises(SignatureError):
        map_descriptor("II")


def test_register_widths():
    assert [register_width(d) for d in ("J", "D", "I", "Z", "Ljava/lang/Long;")] == [2, 2, 1, 1, 1]


def test_name_conversion():
    assert internal_to_binary("Lcom/example/Foo$Bar;") == "com.example.Foo$Bar"
    assert binary_to_internal("com.example.Foo$Bar") == "Lcom/example/Foo$Bar;"
    assert binary_to_internal("[Ljava.lang.String;") == "[Ljava/lang/String;"


def test_host_scalar_types():
    assert PrimitiveKind.INT.host_type is np.int32
    assert PrimitiveKind.CHAR.host_type is np.uint16
    assert PrimitiveKind.BOOLEAN.host_type is np.bool_


def test_cast_narrows_and_wraps():
    assert cast_to_primitive(300, "B") == np.int8(44)
    assert isinstance(cast_to_primitive(300, "B"), np.int8)
    assert cast_to_primitive(-1, "C") == 65535
    assert cast_to_primitive(2 ** 31, "I") == -(2 ** 31)
    assert cast_to_primitive(70000, "S") == np.int16(4464)
    assert cast_to_primitive(3.9, "I") == 3
    assert isinstance(cast_to_primitive(5, "J"), np.int64)
    assert isinstance(cast_to_primitive(1, "D"), np.float64)


def test_cast_boolean_means_non_zero():
    assert cast_to_primitive(2, "Z") == np.bool_(True)
    assert isinstance(cast_to_primitive(2, "Z"), np.bool_)
    assert not cast_to_primitive(0, "Z")
    assert cast_to_primitive(True, "I") == 1


def test_cast_single_character_string():
    assert cast_to_primitive("A", "C") == 65
    with pytest.raises(ArgumentMismatchError):
        cast_to_primitive("AB", "I")


def test_cast_rejects_non_numbers():
    with pytest.raises(ArgumentMismatchError):
        cast_to_primitive(object(), "I")


def test_cast_leaves_references_alone():
    value = ["x"]
    assert cast_to_primitive(value, "Ljava/lang/Object;") is value
