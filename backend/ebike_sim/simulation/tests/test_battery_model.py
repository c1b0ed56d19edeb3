from ebike_sim.services.translation_service import Language, StaticTranslator
from ebike_sim.simulation import battery_model
import pytest

class TestBatteryModel:

    @pytest.fixture
    def battery(self):
        return battery_model.Battery(
            capacity_ah=10.0,
            nominal_voltage_v=48.0,
            max_current_a=30.0,
            weight_kg=3.8
        )

    def test_starts_full(self, battery):
        assert battery.charge_ah == 10.0
        assert battery.soc == pytest.approx(100.0)
        assert battery.has_charge()
        assert battery.energy_wh == 480.0

    def test_charge_never_negative(self, battery):
        """
        Draining far beyond capacity floors charge at zero.
        """
        for _ in range(10):
            battery.use(30.0, 1.0, 20.0)
        assert battery.charge_ah == 0.0
        assert battery.soc == 0.0
        assert not battery.has_charge()

    def test_current_clamped_to_discharge_limit(self, battery):
        drawn = battery.use(100.0, 0.001, 20.0)
        assert drawn == pytest.approx(30.0)

    def test_negative_current_draws_nothing(self, battery):
        drawn = battery.use(-5.0, 0.1, 20.0)
        assert drawn == 0.0
        assert battery.charge_ah == 10.0

    def test_charge_accounting_includes_resistive_loss(self, battery):
        battery.use(10.0, 0.1, 20.0)
        # 1 Ah of current plus a small I^2R equivalent
        used = 10.0 - battery.charge_ah
        assert used > 1.0
        assert used < 1.01

    def test_temperature_clamped(self, battery):
        battery.force_temperature(100.0)
        assert battery.temperature_c == 60.0
        battery.force_temperature(-50.0)
        assert battery.temperature_c == -20.0

    def test_cold_reduces_capacity_and_current(self, battery):
        battery.force_temperature(-15.0)
        assert battery.effective_capacity() == pytest.approx(4.0)
        assert battery.max_discharge_current() == pytest.approx(9.0)
        assert battery.internal_resistance() == pytest.approx(0.15)
        assert battery.temperature_impact_on_range() == pytest.approx(60.0)

    def test_voltage_floor_under_heavy_load(self, battery):
        assert battery.voltage_under_load(10000.0) == pytest.approx(48.0 * 0.7)

    def test_open_circuit_voltage_follows_charge(self, battery):
        full = battery.open_circuit_voltage()
        battery.use(30.0, 0.25, 20.0)
        assert battery.open_circuit_voltage() < full

    def test_reset_restores_initial_state(self, battery):
        battery.use(20.0, 0.2, 35.0)
        battery.force_temperature(45.0)
        battery.reset()
        assert battery.charge_ah == 10.0
        assert battery.temperature_c == 20.0
        assert battery.voltage_v == 48.0

    def test_clone_with_soak_temperature(self, battery):
        cold = battery.clone(initial_temperature_c=-10.0)
        assert cold.temperature_c == -10.0
        cold.use(5.0, 0.1, -10.0)
        cold.reset()
        assert cold.temperature_c == -10.0
        # Original untouched
        assert battery.temperature_c == 20.0

    def test_range_estimates(self, battery):
        assert battery.estimate_range(0.0) == 0.0
        assert battery.estimate_range(480.0) == pytest.approx(0.9)
        assert battery.remaining_time(5.0) == pytest.approx(2.0)
        assert battery.remaining_time(0.0) == 0.0
        assert battery.available_energy() == pytest.approx(480.0)

    @pytest.mark.parametrize("temperature, key", [
        (-15.0, "criticalCold"),
        (-5.0, "veryCold"),
        (5.0, "cold"),
        (25.0, "optimal"),
        (40.0, "hot"),
        (50.0, "criticalHot"),
    ])
    def test_temperature_status_keys(self, battery, temperature, key):
        battery.force_temperature(temperature)
        assert battery.temperature_status() == key

    def test_temperature_status_translated(self, battery):
        assert battery.temperature_status(StaticTranslator(), Language.SECONDARY) == "Optimal"
        assert battery.is_safe_temperature()
