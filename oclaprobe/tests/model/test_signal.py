import pytest
from pydantic import ValidationError

from oclaprobe.model.signal import (
    ConstFragment,
    WireFragment,
    decompose,
    describe,
    display_name,
    render,
    total_width,
)
from oclaprobe.netlist.design import SigChunk, Wire


class TestDisplayName:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("data", "data"),
            ("\\data", "data"),
            ("u_top.u_core.data", "data"),
            ("u_top.\\data", "data"),
        ],
    )
    def test_strips_prefix_and_escape(self, name, expected):
        assert display_name(name) == expected


class TestWireFragment:
    def test_whole_bus(self):
        f = WireFragment(wire="data", width=8, offset=0, wire_width=8)
        assert render(f) == "data[7:0]"
        assert f.full_name == "data"
        assert describe(f) == ("data", 8, 0)

    def test_single_bit_of_bus(self):
        f = WireFragment(wire="data", width=1, offset=3, wire_width=8)
        assert render(f) == "data[3]"
        assert f.full_name == "data [3]"

    def test_scalar_wire_has_no_index(self):
        f = WireFragment(wire="u_a.\\flag", width=1, offset=0, wire_width=1)
        assert not f.show_index
        assert render(f) == "flag"

    def test_range(self):
        f = WireFragment(wire="\\data", width=4, offset=4, wire_width=8)
        assert render(f) == "data[7:4]"
        assert f.full_name == "\\data [7:4]"

    def test_ascending_wire_renders_msb_first(self):
        f = WireFragment(wire="data", width=4, offset=0, wire_width=8, msb_first=False)
        assert render(f) == "data[3:0]"
        assert f.full_name == "data [3:0]"

    def test_range_must_fit_wire(self):
        with pytest.raises(ValidationError):
            WireFragment(wire="data", width=4, offset=6, wire_width=8)

    def test_positive_width(self):
        with pytest.raises(ValidationError):
            WireFragment(wire="data", width=0, offset=0, wire_width=8)

    def test_frozen(self):
        f = WireFragment(wire="data", width=8, wire_width=8)
        with pytest.raises(ValidationError):
            f.width = 4


class TestConstFragment:
    def test_rendering(self):
        f = ConstFragment(bits="01x")
        assert f.width == 3
        assert f.offset == 0
        assert render(f) == "3'01x"

    @pytest.mark.parametrize("bits", ["", "012"])
    def test_invalid_bits(self, bits):
        with pytest.raises(ValidationError):
            ConstFragment(bits=bits)


class TestDecompose:
    def test_most_significant_first(self):
        data = Wire(name="data", width=8)
        chunks = [SigChunk.of_wire(data, 0, 4), SigChunk.const("10")]

        fragments = decompose(chunks)

        assert [render(f) for f in fragments] == ["2'10", "data[3:0]"]
        assert total_width(fragments) == 6

    def test_empty_signal(self):
        assert decompose([]) == []

    def test_ascending_wire_renders_msb_first(self):
        bus = Wire(name="bus", width=4, upto=True)
        (fragment,) = decompose([SigChunk.of_wire(bus, 1, 2)])
        assert not fragment.msb_first
        assert render(fragment) == "bus[2:1]"
