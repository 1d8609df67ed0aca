"""Tests for domain models (core/models.py).

Identifiers are frozen dataclasses with a strict textual grammar —
these tests verify parsing, canonical rendering, immutability, and
equality / ordering semantics.
"""

from __future__ import annotations

import pytest

from usbipd_wsl.core.models import (
    BusId,
    DetachResult,
    HardwareId,
    Outcome,
    SelectAll,
    SelectByBus,
    SelectByHardware,
)
from usbipd_wsl.exceptions import FormatError


# ---------------------------------------------------------------------------
# BusId
# ---------------------------------------------------------------------------

class TestBusIdParse:
    @pytest.mark.parametrize("text", ["3-42", "1-1", "0-0", "10-0", "999-999", "0-7"])
    def test_round_trip(self, text: str) -> None:
        assert str(BusId.parse(text)) == text

    def test_components(self) -> None:
        bus_id = BusId.parse("3-42")
        assert bus_id.bus == 3
        assert bus_id.port == 42

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "3",
            "3-",
            "-42",
            "3:42",
            "3-42-1",
            "03-42",
            "3-042",
            "00-1",
            "1000-1",
            "1-1000",
            "a-b",
            " 3-42",
            "3-42 ",
            "not-a-busid",
            "+3-42",
        ],
    )
    def test_rejects(self, text: str) -> None:
        with pytest.raises(FormatError) as exc_info:
            BusId.parse(text)
        assert exc_info.value.text == text

    def test_rejects_unicode_digits(self) -> None:
        with pytest.raises(FormatError):
            BusId.parse("٣-42")


class TestBusIdSemantics:
    def test_equality_is_structural(self) -> None:
        assert BusId.parse("3-42") == BusId(bus=3, port=42)

    def test_hashable(self) -> None:
        assert len({BusId(3, 42), BusId.parse("3-42")}) == 1

    def test_ordering_bus_first(self) -> None:
        assert BusId(1, 99) < BusId(2, 1)
        assert BusId(2, 1) < BusId(2, 3)
        assert sorted([BusId(2, 3), BusId(1, 9), BusId(2, 1)]) == [
            BusId(1, 9),
            BusId(2, 1),
            BusId(2, 3),
        ]

    def test_frozen(self) -> None:
        bus_id = BusId(3, 42)
        with pytest.raises(AttributeError):
            bus_id.port = 1  # type: ignore[misc]


# ---------------------------------------------------------------------------
# HardwareId
# ---------------------------------------------------------------------------

class TestHardwareIdParse:
    @pytest.mark.parametrize("text", ["0123:cdef", "0000:0000", "ffff:ffff", "80ee:0021"])
    def test_round_trip(self, text: str) -> None:
        assert str(HardwareId.parse(text)) == text

    def test_uppercase_renders_lowercase(self) -> None:
        assert str(HardwareId.parse("0123:CDEF")) == "0123:cdef"

    def test_components(self) -> None:
        hardware_id = HardwareId.parse("0123:cdef")
        assert hardware_id.vendor == 0x0123
        assert hardware_id.product == 0xCDEF

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "0123",
            "0123:",
            ":cdef",
            "123:cdef",
            "0123:cdef0",
            "0123-cdef",
            "0123::cdef",
            "0123:cdeg",
            "0x12:cdef",
            "not-a-hardware-id",
            "0123:cdef\n",
        ],
    )
    def test_rejects(self, text: str) -> None:
        with pytest.raises(FormatError):
            HardwareId.parse(text)


class TestHardwareIdSemantics:
    def test_equality_ignores_input_case(self) -> None:
        assert HardwareId.parse("ABCD:0001") == HardwareId.parse("abcd:0001")

    def test_render_pads(self) -> None:
        assert str(HardwareId(vendor=1, product=2)) == "0001:0002"

    def test_frozen(self) -> None:
        hardware_id = HardwareId(1, 2)
        with pytest.raises(AttributeError):
            hardware_id.vendor = 3  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Selector / result
# ---------------------------------------------------------------------------

class TestSelector:
    def test_variants_compare_structurally(self) -> None:
        assert SelectAll() == SelectAll()
        assert SelectByBus(BusId(3, 42)) == SelectByBus(BusId.parse("3-42"))
        assert SelectByHardware(HardwareId(1, 2)) != SelectByHardware(HardwareId(1, 3))

    def test_variants_are_distinct(self) -> None:
        assert SelectAll() != SelectByBus(BusId(0, 0))

    def test_str(self) -> None:
        assert str(SelectByBus(BusId(3, 42))) == "bus id 3-42"
        assert str(SelectByHardware(HardwareId(0x123, 0xCDEF))) == "hardware id 0123:cdef"


class TestDetachResult:
    def test_reason_defaults_to_none(self) -> None:
        result = DetachResult(Outcome.SUCCEEDED)
        assert result.reason is None
        assert result.hint is None

    def test_frozen(self) -> None:
        result = DetachResult(Outcome.SUCCEEDED)
        with pytest.raises(AttributeError):
            result.outcome = Outcome.CANCELED  # type: ignore[misc]
