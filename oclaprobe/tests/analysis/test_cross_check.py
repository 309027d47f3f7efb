import pytest

from oclaprobe.analysis.cross_check import CrossValidator

SUBSYSTEM = "ocla_debug_subsystem"


@pytest.fixture
def native_setup(make_subsystem, make_core):
    """Consistent NATIVE subsystem with two cores (probes {1, 2} and {3})."""

    def _build(sub_overrides=None, core_overrides=None, indexes=(0, 1)):
        subsystem = make_subsystem(overrides=sub_overrides)
        widths = {0: 12, 1: 2}
        cores = [
            make_core(i, widths.get(i, 2), (core_overrides or {}).get(i)) for i in indexes
        ]
        return subsystem, cores

    return _build


class TestCrossValidator:
    def test_consistent_design(self, log, native_setup):
        subsystem, cores = native_setup()

        validator = CrossValidator(subsystem, cores, [SUBSYSTEM, SUBSYSTEM], log)

        assert validator.validate_all()
        assert log.messages[0] == "Sanity Check"
        assert not log.errors
        assert [c.base_address for c in cores] == [0x1000, 0x2000]
        assert [c.probe_order for c in cores] == [[0, 1], [2]]
        assert not any(c.is_axi_bridge for c in cores)
        assert validator.probe_map.probe_count == 3

    def test_instantiator_count(self, log, native_setup):
        subsystem, cores = native_setup()
        assert not CrossValidator(subsystem, cores, [SUBSYSTEM], log).validate_all()
        assert log.contains("found the instantiator (count=1)")

    def test_core_count(self, log, native_setup):
        subsystem, cores = native_setup(indexes=(0,))
        assert not CrossValidator(subsystem, cores, [SUBSYSTEM], log).validate_all()
        assert log.contains("Cores=2 does not match with detected OCLA module count=1")

    def test_index_sequence(self, log, native_setup):
        subsystem, cores = native_setup(indexes=(0, 2))
        assert not CrossValidator(subsystem, cores, [SUBSYSTEM, SUBSYSTEM], log).validate_all()
        assert log.contains("expectation=1, but found 2")

    def test_instantiator_name(self, log, native_setup):
        subsystem, cores = native_setup()
        validator = CrossValidator(subsystem, cores, [SUBSYSTEM, "other_wrapper"], log)
        assert not validator.validate_all()
        assert "Error: Found unexpected instantiator: other_wrapper" in log.errors

    @pytest.mark.parametrize(
        "overrides",
        [{"IP_ID": 1}, {"IP_VERSION": 2}, {"IP_TYPE": '"OCLA"', "IP_VERSION": 0}],
    )
    def test_ip_identity(self, log, native_setup, overrides):
        subsystem, cores = native_setup(core_overrides={1: overrides})
        assert not CrossValidator(subsystem, cores, [SUBSYSTEM, SUBSYSTEM], log).validate_all()
        assert log.contains("has mismatch parameter IP_TYPE=OCLA")

    def test_axi_widths(self, log, native_setup):
        subsystem, cores = native_setup(core_overrides={1: {"AXI_DATA_WIDTH": 64}})
        assert not CrossValidator(subsystem, cores, [SUBSYSTEM, SUBSYSTEM], log).validate_all()
        assert log.contains("AXI_ADDR_WIDTH=32, AXI_DATA_WIDTH=64")

    def test_probe_map_failure_stops_checks(self, log, make_subsystem, make_core):
        subsystem = make_subsystem(interfaces=((1, 2), (2,)))
        cores = [make_core(0, 12), make_core(1, 8)]

        assert not CrossValidator(subsystem, cores, [SUBSYSTEM, SUBSYSTEM], log).validate_all()
        assert log.contains("Duplicated Probe02")
        assert not log.contains("Parameter NO_OF_PROBES must match")

    def test_no_of_probes(self, log, native_setup):
        subsystem, cores = native_setup(core_overrides={0: {"NO_OF_PROBES": 11}})
        assert not CrossValidator(subsystem, cores, [SUBSYSTEM, SUBSYSTEM], log).validate_all()
        assert log.contains("NO_OF_PROBES=11, calculated probe width=12")

    def test_declared_probes_sum(self, log, native_setup):
        subsystem, cores = native_setup(sub_overrides={"Probes_Sum": 15})
        assert not CrossValidator(subsystem, cores, [SUBSYSTEM, SUBSYSTEM], log).validate_all()
        assert log.contains("Probes_Sum by declared width (14)")

    def test_calculated_probes_sum(self, log, native_setup):
        # Probe04 is declared but never routed to an interface
        subsystem, cores = native_setup(sub_overrides={"Probe04_Width": 5, "Probes_Sum": 19})
        assert not CrossValidator(subsystem, cores, [SUBSYSTEM, SUBSYSTEM], log).validate_all()
        assert log.contains("Probes_Sum by calculated width (14)")

    def test_base_address_conflict(self, log, native_setup):
        subsystem, cores = native_setup(sub_overrides={"IF02_BaseAddress": 0x1000})
        assert not CrossValidator(subsystem, cores, [SUBSYSTEM, SUBSYSTEM], log).validate_all()
        assert log.contains("has conflict base address 0x00001000")


class TestAxiBridge:
    def test_native_axi(self, log, make_subsystem, make_core):
        subsystem = make_subsystem(mode="NATIVE_AXI", no_axi_bus=2)
        cores = [make_core(0, 12), make_core(1, 2), make_core(2, 304)]

        assert CrossValidator(subsystem, cores, [SUBSYSTEM] * 3, log).validate_all()
        assert [c.is_axi_bridge for c in cores] == [False, False, True]
        assert cores[2].probe_order == []
        assert cores[2].base_address == 0x3000

    def test_axi_core_width(self, log, make_subsystem, make_core):
        subsystem = make_subsystem(mode="NATIVE_AXI")
        cores = [make_core(0, 12), make_core(1, 2), make_core(2, 150)]

        assert not CrossValidator(subsystem, cores, [SUBSYSTEM] * 3, log).validate_all()
        assert log.contains("expected AXI probe width=152")

    def test_axi_only(self, log, make_subsystem, make_core):
        subsystem = make_subsystem(mode="AXI", axi_type="AXI4", widths=(), interfaces=())
        cores = [make_core(0, 250)]

        assert CrossValidator(subsystem, cores, [SUBSYSTEM], log).validate_all()
        assert cores[0].is_axi_bridge
