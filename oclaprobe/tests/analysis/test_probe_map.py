import pytest

from oclaprobe.analysis.probe_map import decode_probe_map, pack_nibbles, unpack_nibbles
from oclaprobe.model.ip import ProbeSlot


class TestNibbles:
    def test_unpack_lsb_first(self):
        assert unpack_nibbles(0x321) == [1, 2, 3]
        assert unpack_nibbles(0) == []

    def test_pack(self):
        assert pack_nibbles([1, 2]) == 0x21
        assert unpack_nibbles(pack_nibbles([15, 3, 7])) == [15, 3, 7]


class TestDecodeProbeMap:
    def test_native_layout(self, log, make_subsystem):
        subsystem = make_subsystem(widths=(4, 8, 2), interfaces=((1, 2), (3,)))

        probe_map = decode_probe_map(subsystem, log)

        assert probe_map is not None
        assert subsystem.calculated_core_width == [12, 2] + [0] * 13
        assert subsystem.probe_to_core[:3] == [
            ProbeSlot(core=0, offset=0),
            ProbeSlot(core=0, offset=4),
            ProbeSlot(core=1, offset=0),
        ]
        assert subsystem.probe_to_core[3:] == [None] * 12
        assert probe_map.probe_order[:2] == [[0, 1], [2]]
        assert probe_map.probe_count == 3
        assert not log.errors

    def test_probe_order_follows_nibbles(self, log, make_subsystem):
        subsystem = make_subsystem(widths=(4, 8, 2), interfaces=((3, 1, 2),))
        probe_map = decode_probe_map(subsystem, log)
        assert probe_map.probe_order[0] == [2, 0, 1]
        assert subsystem.probe_to_core[0] == ProbeSlot(core=0, offset=2)

    def test_duplicate_probe_rejected(self, log, make_subsystem):
        subsystem = make_subsystem(widths=(4, 8, 2), interfaces=((1, 2), (2,)))

        assert decode_probe_map(subsystem, log) is None
        assert log.contains("Duplicated Probe02")
        assert not subsystem.is_mapped

    def test_probe_number_out_of_range(self, log, make_subsystem):
        subsystem = make_subsystem(widths=(4, 8), interfaces=((1, 2), (3,)))
        assert decode_probe_map(subsystem, log) is None
        assert log.contains("invalid probe number 3")

    def test_zero_width_probe(self, log, make_subsystem):
        subsystem = make_subsystem(widths=(4, 0, 2), interfaces=((1, 2), (3,)))
        assert decode_probe_map(subsystem, log) is None
        assert log.contains("Probe02_Width must not be zero")

    def test_missing_probe(self, log, make_subsystem):
        subsystem = make_subsystem(widths=(4, 8, 2), interfaces=((1,), (3,)))
        assert decode_probe_map(subsystem, log) is None
        assert log.contains("Decoded probe count 2 does not match No_Probes=3")

    def test_native_interface_must_not_be_null(self, log, make_subsystem):
        subsystem = make_subsystem(
            widths=(4, 8, 2), interfaces=((1, 2, 3), ()), overrides={"Probes_Sum": 14}
        )
        assert decode_probe_map(subsystem, log) is None
        assert log.contains("IF02_Probes must not be null")

    def test_unused_interface_must_be_null(self, log, make_subsystem):
        subsystem = make_subsystem(overrides={"IF05_Probes": 1})
        assert decode_probe_map(subsystem, log) is None
        assert log.contains("IF05_Probes (0x0000000000000001) must be null")

    def test_axi_interface_must_be_null(self, log, make_subsystem):
        subsystem = make_subsystem(mode="NATIVE_AXI", overrides={"IF03_Probes": 3})
        assert decode_probe_map(subsystem, log) is None

    def test_axi_mode_records_empty_map(self, log, make_subsystem):
        subsystem = make_subsystem(mode="AXI", widths=(), interfaces=())

        probe_map = decode_probe_map(subsystem, log)

        assert probe_map.probe_count == 0
        assert subsystem.calculated_core_width == [0] * 15
        assert subsystem.is_mapped

    def test_decoded_once(self, log, make_subsystem):
        subsystem = make_subsystem()
        assert decode_probe_map(subsystem, log) is not None
        assert decode_probe_map(subsystem, log) is None
        assert log.contains("Probe mapping had already been decoded")

    @pytest.mark.parametrize("mode,native", [("NATIVE", 2), ("NATIVE_AXI", 2)])
    def test_native_core_count(self, make_subsystem, mode, native):
        subsystem = make_subsystem(mode=mode)
        assert subsystem.native_core_count == native
        assert subsystem.cores == native + (mode == "NATIVE_AXI")
