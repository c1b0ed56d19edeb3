from ebike_sim.services.translation_service import Language, StaticTranslator
from ebike_sim.simulation.motor import Motor
import pytest

class TestMotor:

    @pytest.fixture
    def motor(self):
        return Motor(power_w=750.0, max_power_w=1200.0, voltage_v=48.0, efficiency=0.87, weight_kg=5.3)

    def test_output_power_clamps_throttle(self, motor):
        assert motor.output_power(0.5) == pytest.approx(375.0)
        assert motor.output_power(2.0) == pytest.approx(750.0)
        assert motor.output_power(-1.0) == 0.0

    def test_hot_motor_is_derated(self, motor):
        motor.temperature_c = 90.0
        assert motor.thermal_limit_factor() == 0.5
        assert motor.output_power(1.0) == pytest.approx(375.0)
        assert motor.efficiency() == pytest.approx(0.87 * 0.9)
        assert motor.is_overheating()

    def test_required_current(self, motor):
        assert motor.required_current(480.0) == pytest.approx(480.0 / (48.0 * 0.87))
        assert motor.max_current() == pytest.approx(25.0)
        no_voltage = Motor(power_w=500.0, max_power_w=750.0, voltage_v=0.0)
        assert no_voltage.required_current(100.0) == 0.0

    def test_torque(self, motor):
        assert motor.torque(0.0) == 0.0
        assert motor.torque(300.0) > motor.torque(600.0)

    def test_temperature_stays_within_limits(self, motor):
        for _ in range(10000):
            motor.update_temperature(1200.0, 20.0, 1.0)
        assert motor.temperature_c <= 120.0
        motor.reset(20.0)
        motor.update_temperature(0.0, 25.0, 1.0)
        assert motor.temperature_c >= 25.0

    def test_temperature_status(self, motor):
        assert motor.temperature_status() == "standard"
        motor.temperature_c = 85.0
        assert motor.temperature_status() == "criticalOverheating"
        assert motor.temperature_status(StaticTranslator(), Language.SECONDARY) == "Critical overheating"

    def test_clone_is_independent(self, motor):
        motor.temperature_c = 70.0
        copy = motor.clone()
        assert copy.temperature_c == 20.0
        assert copy.power_w == motor.power_w
