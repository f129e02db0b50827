import pytest

from reflector.core.errors import SignatureError
from reflector.parsers.signature import parse_signature


def test_parses_instance_signature():
    sig = parse_signature("Lcom/example/Foo;->bar(ILjava/lang/String;J)V")
    assert sig.class_name == "Lcom/example/Foo;"
    assert sig.class_binary_name == "com.example.Foo"
    assert sig.method_name == "bar"
    assert sig.parameter_types == ("I", "Ljava/lang/String;", "J")
    assert sig.return_type == "V"
    assert sig.returns_void
    assert not sig.is_static
    assert not sig.is_constructor


def test_register_count_includes_receiver_and_wide_slots():
    text = "Lcom/example/Foo;->bar(ILjava/lang/String;J)V"
    assert parse_signature(text).parameter_register_count == 5
    assert parse_signature(text, is_static=True).parameter_register_count == 4


def test_constructor_and_empty_parameter_list():
    sig = parse_signature("Lcom/example/Foo;-><init>()V")
    assert sig.is_constructor
    assert sig.parameters == ()


def test_array_owner_and_array_return():
    sig = parse_signature("[B->clone()Ljava/lang/Object;")
    assert sig.class_binary_name == "[B"
    sig = parse_signature("Ljava/lang/String;->getBytes()[B")
    assert sig.return_type == "[B"


def test_text_reproduces_the_reference():
    text = "Ljava/lang/Integer;->parseInt(Ljava/lang/String;I)I"
    assert str(parse_signature(text, is_static=True)) == text


@pytest.mark.parametrize(
    "text",
    [
        "Lcom/example/Foo;bar()V",
        "Lcom/example/Foo;->bar",
        "Lcom/example/Foo;->bar)(V",
        "Lcom/example/Foo;->bar((I))V",
        "Lcom/example/Foo;->()V",
        "Foo->bar()V",
        "->bar()V",
        "Lcom/example/Foo->bar()V",
        "Lcom/example/Foo;->bar(Q)V",
        "Lcom/example/Foo;->bar(V)V",
        "Lcom/example/Foo;->bar(Ljava/lang/String)V",
        "Lcom/example/Foo;->bar()",
        "Lcom/example/Foo;->bar()VV",
        "Lcom/example/Foo;->bar()Ljava/lang",
    ],
)
def test_malformed_signatures_raise(text):
    with pytest.raises(SignatureError):
        parse_signature(text)


def test_signature_error_is_a_value_error():
    with pytest.raises(ValueError):
        parse_signature("not a signature")
