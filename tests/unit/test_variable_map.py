"""Tests for VariableMap validation and the register allocation pass."""

import pytest

from exprc.errors import ConfigurationError, PreconditionViolation
from exprc.expr import Const, Sum, Var
from exprc.variable_map import VariableMap, allocate_registers
from tests.unit.conftest import acceptance_expr


class TestConstruction:
    def test_mapping_protocol(self):
        vmap = VariableMap({"x": 2, "y": 5})
        assert vmap["x"] == 2
        assert "y" in vmap
        assert len(vmap) == 2
        assert sorted(vmap) == ["x", "y"]
        assert vmap.get("z") is None

    def test_negative_register_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            VariableMap({"x": -1})

    def test_empty_identifier_rejected(self):
        with pytest.raises(ValueError):
            VariableMap({"": 0})

    def test_source_dict_is_copied(self):
        bindings = {"x": 1}
        vmap = VariableMap(bindings)
        bindings["x"] = 9
        assert vmap["x"] == 1

    def test_as_dict(self):
        assert VariableMap({"x": 1}).as_dict() == {"x": 1}


class TestTotality:
    def test_for_expr_accepts_total_map(self):
        vmap = VariableMap.for_expr({"x": 2, "y": 5}, acceptance_expr())
        assert vmap.missing_for(acceptance_expr()) == []

    def test_for_expr_rejects_partial_map(self):
        with pytest.raises(ConfigurationError, match="y"):
            VariableMap.for_expr({"x": 2}, acceptance_expr())

    def test_missing_listed_in_occurrence_order(self):
        expr = Sum(Var("b"), Sum(Var("a"), Var("c")))
        assert VariableMap({"a": 0}).missing_for(expr) == ["b", "c"]

    def test_constant_only_expression_needs_no_bindings(self):
        VariableMap().require_total(Sum(Const(1), Const(2)))


class TestWatermark:
    def test_min_watermark_is_one_past_highest(self):
        assert VariableMap({"x": 2, "y": 5}).min_watermark() == 6

    def test_min_watermark_scoped_to_expression(self):
        vmap = VariableMap({"x": 2, "big": 40})
        assert vmap.min_watermark(Var("x")) == 3

    def test_min_watermark_without_variables_is_zero(self):
        assert VariableMap().min_watermark(Const(1)) == 0

    def test_require_below_accepts_strictly_greater(self):
        VariableMap({"x": 2, "y": 5}).require_below(6)

    def test_require_below_lists_offenders(self):
        with pytest.raises(PreconditionViolation) as exc_info:
            VariableMap({"x": 2, "y": 5}).require_below(3)
        assert exc_info.value.offending == {"y": 5}


class TestAliasing:
    def test_injective_map(self):
        assert VariableMap({"x": 0, "y": 1}).is_injective_over(Sum(Var("x"), Var("y")))

    def test_aliased_map_reported(self):
        vmap = VariableMap({"x": 3, "y": 3, "z": 4})
        assert vmap.aliases() == {3: ["x", "y"]}
        assert not vmap.is_injective_over()

    def test_aliasing_outside_expression_ignored(self):
        vmap = VariableMap({"x": 3, "y": 3})
        assert vmap.is_injective_over(Var("x"))


class TestAllocateRegisters:
    def test_first_occurrence_order_from_zero(self):
        assert allocate_registers(acceptance_expr()).as_dict() == {"x": 0, "y": 1}

    def test_base_offset(self):
        assert allocate_registers(acceptance_expr(), base=4).as_dict() == {"x": 4, "y": 5}

    def test_allocation_is_injective_and_total(self):
        expr = Sum(Sum(Var("c"), Var("a")), Sum(Var("b"), Var("a")))
        vmap = allocate_registers(expr)
        assert vmap.missing_for(expr) == []
        assert vmap.is_injective_over(expr)

    def test_negative_base_rejected(self):
        with pytest.raises(ValueError):
            allocate_registers(Var("x"), base=-1)
