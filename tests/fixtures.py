"""Host classes reached through dynamic import in the bridge tests."""

import numpy as np

from reflector.dispatch.overloads import overloaded


class Foo:

    def __init__(self, value=0):
        self.value = value

    def count(self, text):
        return np.int32(-1 if text is None else len(text))

    def bar(self, text):
        return f"bar:{text}"

    def explode(self):
        raise RuntimeError("boom")

    def _secret(self):
        return "hidden"

    @staticmethod
    def twice(value):
        return np.int32(value * 2)

    @staticmethod
    def mix(wide, narrow, real, flag):
        return f"{wide}|{narrow}|{real}|{bool(flag)}"

    @staticmethod
    def describe(value):
        return "null" if value is None else repr(value)


class Chooser:

    @overloaded("J")
    def pick(value):
        return "long"

    @pick.variant("F")
    def _pick_float(value):
        return "float"

    @overloaded("I", "J")
    def pair(a, b):
        return "IJ"

    @pair.variant("J", "I")
    def _pair_swapped(a, b):
        return "JI"


class Outer:

    class Inner:

        def __init__(self):
            self.tag = "inner"
