import numpy as np
import pytest

from reflector.core.errors import ArgumentMismatchError, TypeResolutionError
from reflector.core.models import UnknownValue
from reflector.core.state import HeapItem, MethodState
from reflector.dispatch.resolver import TypeResolver
from reflector.marshaling.arguments import ArgumentMarshaler, is_numeric
from reflector.parsers.signature import parse_signature
from shared.config import ReflectorConfig


@pytest.fixture
def settings():
    return ReflectorConfig(import_roots=["tests"])


@pytest.fixture
def marshaler(settings):
    return ArgumentMarshaler(TypeResolver(settings), settings)


def test_static_call_starts_at_register_zero(marshaler):
    sig = parse_signature("Ltests/fixtures/Foo;->twice(I)I", is_static=True)
    arguments = marshaler.marshal(MethodState([HeapItem(21, "I")]), sig)
    assert arguments.args == (21,)
    assert arguments.parameter_types == (np.int32,)
    assert isinstance(arguments.args[0], np.int32)


def test_instance_call_skips_receiver(marshaler):
    sig = parse_signature("Ltests/fixtures/Foo;->bar(Ljava/lang/String;)Ljava/lang/String;")
    state = MethodState([HeapItem("receiver", "Ltests/fixtures/Foo;"), HeapItem("x", "Ljava/lang/String;")])
    arguments = marshaler.marshal(state, sig)
    assert arguments.args == ("x",)
    assert arguments.parameter_types == (str,)


def test_wide_parameters_consume_two_slots(marshaler):
    sig = parse_signature("Ltests/fixtures/Foo;->mix(JIDZ)Ljava/lang/String;", is_static=True)
    state = MethodState(
        [
            HeapItem(2 ** 40, "J"),
            HeapItem(UnknownValue(), "J"),
            HeapItem(7, "I"),
            HeapItem(1.5, "D"),
            HeapItem(UnknownValue(), "D"),
            HeapItem(1, "I"),
        ]
    )
    arguments = marshaler.marshal(state, sig)
    assert arguments.args == (2 ** 40, 7, 1.5, True)
    assert [type(a) for a in arguments.args] == [np.int64, np.int32, np.float64, np.bool_]


def test_narrow_kinds_are_coerced_from_int_registers(marshaler):
    sig = parse_signature("Ltests/fixtures/Foo;->kinds(ZBSC)V", is_static=True)
    state = MethodState([HeapItem(1, "I"), HeapItem(200, "I"), HeapItem(-2, "I"), HeapItem(65, "I")])
    args = marshaler.marshal(state, sig).args
    assert isinstance(args[0], np.bool_) and args[0]
    assert isinstance(args[1], np.int8) and args[1] == -56
    assert isinstance(args[2], np.int16) and args[2] == -2
    assert isinstance(args[3], np.uint16) and args[3] == 65


def test_boxed_wrapper_cells_are_narrowed(marshaler):
    sig = parse_signature("Ltests/fixtures/Foo;->twice(I)I", is_static=True)
    args = marshaler.marshal(MethodState([HeapItem(9, "Ljava/lang/Integer;")]), sig).args
    assert isinstance(args[0], np.int32)


def test_zero_for_specific_reference_becomes_null(marshaler):
    sig = parse_signature("Ltests/fixtures/Foo;->count(Ljava/lang/String;)I")
    state = MethodState([HeapItem("receiver", "Ltests/fixtures/Foo;"), HeapItem(0, "Ljava/lang/String;")])
    assert marshaler.marshal(state, sig).args == (None,)


def test_zero_for_object_parameter_passes_through(marshaler):
    sig = parse_signature("Ltests/fixtures/Foo;->describe(Ljava/lang/Object;)Ljava/lang/String;", is_static=True)
    args = marshaler.marshal(MethodState([HeapItem(0, "Ljava/lang/Object;")]), sig).args
    assert args == (0,)
    assert args[0] is not None


def test_zero_as_null_can_be_disabled(settings):
    settings.zero_as_null = False
    marshaler = ArgumentMarshaler(TypeResolver(settings), settings)
    sig = parse_signature("Ltests/fixtures/Foo;->count(Ljava/lang/String;)I")
    state = MethodState([HeapItem("receiver", "Ltests/fixtures/Foo;"), HeapItem(0, "Ljava/lang/String;")])
    assert marshaler.marshal(state, sig).args == (0,)


def test_nonzero_number_for_reference_is_untouched(marshaler):
    sig = parse_signature("Ltests/fixtures/Foo;->count(Ljava/lang/String;)I")
    state = MethodState([HeapItem("receiver", "Ltests/fixtures/Foo;"), HeapItem(3, "Ljava/lang/String;")])
    assert marshaler.marshal(state, sig).args == (3,)


def test_null_stays_null(marshaler):
    sig = parse_signature("Ltests/fixtures/Foo;->count(Ljava/lang/String;)I")
    state = MethodState([HeapItem("receiver", "Ltests/fixtures/Foo;"), HeapItem(None, "Ljava/lang/String;")])
    assert marshaler.marshal(state, sig).args == (None,)


def test_unknown_argument_is_rejected(marshaler):
    sig = parse_signature("Ltests/fixtures/Foo;->twice(I)I", is_static=True)
    with pytest.raises(ArgumentMismatchError):
        marshaler.marshal(MethodState([HeapItem(UnknownValue(), "I")]), sig)


def test_short_frame_is_rejected(marshaler):
    sig = parse_signature("Ltests/fixtures/Foo;->mix(JIDZ)Ljava/lang/String;", is_static=True)
    with pytest.raises(ArgumentMismatchError):
        marshaler.marshal(MethodState([HeapItem(1, "J"), HeapItem(1, "J"), HeapItem(2, "I")]), sig)
    with pytest.raises(ArgumentMismatchError):
        marshaler.marshal(MethodState(), parse_signature("Ltests/fixtures/Foo;->explode()V"))


def test_unresolvable_parameter_type(marshaler):
    sig = parse_signature("Ltests/fixtures/Foo;->twice(Lcom/example/Missing;)I", is_static=True)
    with pytest.raises(TypeResolutionError):
        marshaler.marshal(MethodState([HeapItem("x", "Lcom/example/Missing;")]), sig)


def test_is_numeric():
    assert is_numeric(0)
    assert is_numeric(np.int8(0))
    assert is_numeric(0.0)
    assert not is_numeric(False)
    assert not is_numeric(np.bool_(False))
    assert not is_numeric("0")


def test_method_state_for_call_duplicates_wide_values():
    sig = parse_signature("Ltests/fixtures/Foo;->mix(JIDZ)Ljava/lang/String;", is_static=True)
    state = MethodState.for_call(sig, 1, 2, 3.0, True)
    assert state.register_count == sig.parameter_register_count == 6
    assert state.peek_parameter(0) is state.peek_parameter(1)
    assert state.peek_parameter(2).type == "I"
    with pytest.raises(ValueError):
        MethodState.for_call(sig, 1)


def test_heap_item_integer_value():
    assert HeapItem(np.int16(-3), "S").integer_value() == -3
    assert HeapItem("A", "C").integer_value() == 65
    assert HeapItem("AB", "Ljava/lang/String;").integer_value() is None
    assert HeapItem(None, "Ljava/lang/Object;").integer_value() is None
    assert HeapItem(1, "Ljava/lang/Boolean;").is_primitive_or_wrapper()
    assert not HeapItem(1, "Ljava/lang/Object;").is_primitive_or_wrapper()


@pytest.mark.parametrize("value", [0.5, -0.9, np.float32(0.25)])
def test_fractional_value_is_not_treated_as_zero(marshaler, value):
    sig = parse_signature("Ltests/fixtures/Foo;->describe(Ljava/lang/Number;)Ljava/lang/String;", is_static=True)
    args = marshaler.marshal(MethodState([HeapItem(value, "Ljava/lang/Number;")]), sig).args
    assert args == (value,)
    assert HeapItem(value, "Ljava/lang/Number;").integer_value() is None


def test_float_zero_for_specific_reference_becomes_null(marshaler):
    sig = parse_signature("Ltests/fixtures/Foo;->describe(Ljava/lang/Number;)Ljava/lang/String;", is_static=True)
    args = marshaler.marshal(MethodState([HeapItem(0.0, "Ljava/lang/Number;")]), sig).args
    assert args == (None,)
