import pytest

from oclaprobe.model.axi import (
    AXI4_SIGNALS,
    AXI_LITE_SIGNALS,
    axi_probe_fragments,
    axi_probe_width,
    axi_signal_table,
)
from oclaprobe.model.base import AxiType
from oclaprobe.model.signal import render, total_width


class TestAxiTables:
    def test_axi_lite_table(self):
        assert len(AXI_LITE_SIGNALS) == 19
        assert axi_probe_width(AxiType.AXI_LITE) == 152

    def test_axi4_table(self):
        assert len(AXI4_SIGNALS) == 37
        assert axi_probe_width(AxiType.AXI4) == 250

    def test_axi4_extends_axi_lite(self):
        axi4_names = [s.name for s in axi_signal_table(AxiType.AXI4)]
        lite_names = [s.name for s in axi_signal_table(AxiType.AXI_LITE)]
        assert set(lite_names) <= set(axi4_names)
        assert [n for n in axi4_names if n in lite_names] == lite_names

    def test_unique_names(self):
        for table in (AXI_LITE_SIGNALS, AXI4_SIGNALS):
            names = [s.name for s in table]
            assert len(names) == len(set(names))


class TestAxiProbeFragments:
    def test_single_bus_unsuffixed(self):
        fragments = axi_probe_fragments(AxiType.AXI_LITE, 1)
        assert len(fragments) == 19
        assert fragments[0].name == "AWADDR"
        assert render(fragments[0]) == "AWADDR[31:0]"
        assert render(fragments[2]) == "AWVALID"
        assert total_width(fragments) == 152

    def test_two_buses_suffixed(self):
        fragments = axi_probe_fragments(AxiType.AXI_LITE, 2)
        assert len(fragments) == 38
        assert fragments[0].name == "AWADDR_1"
        assert fragments[18].name == "RREADY_1"
        assert fragments[19].name == "AWADDR_2"
        assert all(f.name.endswith(("_1", "_2")) for f in fragments)

    @pytest.mark.parametrize("buses", [1, 3])
    def test_axi4_width(self, buses):
        fragments = axi_probe_fragments(AxiType.AXI4, buses)
        assert len(fragments) == 37 * buses
        assert total_width(fragments) == 250 * buses
