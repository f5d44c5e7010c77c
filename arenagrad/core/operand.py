# arenagrad/core/operand.py
from __future__ import annotations


class Operand:
    """
    Operator overloading shared by arena handles and shared-graph values.

    Subclasses implement ``_apply(op, operands)``; the dunder methods below
    route through ``arenagrad.ops`` so both strategies use one rule table.
    Plain numbers on either side are promoted to constant leaves.
    """

    __slots__ = ()

    def _apply(self, op, operands):
        raise NotImplementedError

    def __add__(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        from ..ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        from ..ops.arithmetic import mul
        return mul(other, self)

    def __truediv__(self, other):
        from ..ops.arithmetic import div
        return div(self, other)

    def __rtruediv__(self, other):
        from ..ops.arithmetic import div
        return div(other, self)

    def __neg__(self):
        from ..ops.arithmetic import neg
        return neg(self)

    def __pow__(self, other):
        from ..ops.arithmetic import pow
        return pow(self, other)

    def __rpow__(self, other):
        from ..ops.arithmetic import pow
        return pow(other, self)

    def exp(self):
        from ..ops.transcendental import exp
        return exp(self)

    def ln(self):
        from ..ops.transcendental import ln
        return ln(self)

    log = ln

    def tanh(self):
        from ..ops.transcendental import tanh
        return tanh(self)

    def relu(self):
        from ..ops.activation import relu
        return relu(self)
