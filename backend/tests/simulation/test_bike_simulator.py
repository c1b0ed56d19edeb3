from ebike_sim.simulation.battery_model import Battery
from ebike_sim.simulation.bike_simulator import BikeSimulator
from ebike_sim.simulation.component_selector import ComponentSelector
from ebike_sim.simulation.constants import RANGE_TEST_HORIZON_S
from ebike_sim.simulation.controller import Controller
from ebike_sim.simulation.environment import Environment, Wind, WindDirection
from ebike_sim.simulation.motor import Motor
from ebike_sim.simulation.schemas import BikeSpecifications
import pytest

class TestBikeSimulator:

    @pytest.fixture
    def specs(self):
        return BikeSpecifications(
            rider_weight_kg=80,
            bike_weight_kg=25,
            wheel_diameter_in=26,
            desired_max_speed_kmh=35,
            desired_max_range_km=50
        )

    @pytest.fixture
    def simulator(self, specs):
        selection = ComponentSelector().select_components(specs)
        return BikeSimulator.from_selection(specs, selection, Environment())

    def test_total_mass_includes_drivetrain(self, simulator, specs):
        drivetrain = simulator.motor.weight_kg + simulator.battery.weight_kg + simulator.controller.weight_kg
        assert simulator.total_mass_kg == pytest.approx(specs.total_weight_kg + drivetrain)

    def test_acceleration_run(self, simulator):
        """
        Full throttle from standstill: monotone distance, speed below the analytic limit.
        """
        result = simulator.test_acceleration()
        assert result.data

        times = [d.time_s for d in result.data]
        distances = [d.distance_km for d in result.data]
        assert times[0] == pytest.approx(0.05)
        assert all(b > a for a, b in zip(times, times[1:]))
        assert all(b >= a for a, b in zip(distances, distances[1:]))
        assert result.total_time <= 30.0 + 1e-9

        assert result.max_speed > 20.0
        assert result.max_speed <= simulator.theoretical_top_speed() + 1e-6

    def test_current_never_exceeds_controller(self, simulator):
        result = simulator.test_acceleration()
        assert all(d.current_a <= simulator.controller.max_current_a + 1e-9 for d in result.data)
        assert all(0.0 <= d.battery_soc <= 100.0 for d in result.data)

    def test_rerun_is_identical(self, simulator):
        first = simulator.simulate(0.7, 20.0, 0.1)
        second = simulator.simulate(0.7, 20.0, 0.1)
        assert first.data == second.data

    def test_theoretical_top_speed(self, simulator):
        assert 40.0 < simulator.theoretical_top_speed() < 55.0

    def test_no_power_no_top_speed(self, specs):
        simulator = BikeSimulator(
            specs,
            Motor(power_w=0.0, max_power_w=0.0, voltage_v=48.0),
            Battery(10.0, 48.0, 30.0),
            Controller(30.0)
        )
        assert simulator.theoretical_top_speed() == 0.0

    def test_zero_throttle_stalls(self, simulator):
        result = simulator.simulate(0.0, 30.0, 0.1)
        assert result.max_speed == 0.0
        assert 10.0 < result.total_time < 10.5

        full = simulator.simulate(0.0, 30.0, 0.1, early_stop=False)
        assert len(full.data) == 300

    def test_headwind_slows_the_bike(self, simulator):
        calm = simulator.test_acceleration()
        windy = simulator.clone(environment=Environment(wind=Wind(speed_mps=8.0, direction=WindDirection.HEADWIND)))
        assert windy.test_acceleration().max_speed < calm.max_speed

    def test_depleted_battery_ends_run(self, specs):
        simulator = BikeSimulator(
            specs,
            Motor(power_w=750.0, max_power_w=1200.0, voltage_v=48.0, efficiency=0.87, weight_kg=5.3),
            Battery(capacity_ah=0.05, nominal_voltage_v=48.0, max_current_a=30.0, weight_kg=1.0),
            Controller(max_current_a=30.0, weight_kg=0.6)
        )
        result = simulator.simulate(1.0, 600.0, 0.1, early_stop=False)

        assert result.battery_empty
        assert result.total_time < 600.0
        assert all(0.0 <= d.battery_soc <= 100.0 for d in result.data)

    def test_throttle_search(self, simulator):
        assert simulator.find_throttle_for_speed(200.0) == 1.0

        throttle = simulator.find_throttle_for_speed(25.0)
        assert 0.1 <= throttle < 1.0
        probe = simulator.simulate(throttle, 60.0, 0.1)
        assert probe.data[-1].speed_kmh == pytest.approx(25.0, abs=1.0)

    def test_range_run(self, simulator):
        result = simulator.test_range(25.0)

        assert result.total_distance > 0
        assert result.battery_empty or result.total_time >= RANGE_TEST_HORIZON_S - 1e-6

    def test_wiring_from_ride(self, simulator):
        result = simulator.test_acceleration()
        analysis = simulator.analyze_wiring(result)

        assert len(analysis.segments) == 3
        assert analysis.max_battery_current_a == pytest.approx(result.peak_current())
        assert analysis.system_voltage_v == simulator.battery.nominal_voltage_v

    def test_clone_shares_nothing_mutable(self, simulator):
        copy = simulator.clone()
        assert copy.battery is not simulator.battery
        assert copy.motor is not simulator.motor
        assert copy.environment is not simulator.environment
        copy.simulate(1.0, 5.0, 0.1)
        assert simulator.battery.charge_ah == simulator.battery.capacity_ah

    def test_invalid_time_step(self, simulator):
        with pytest.raises(ValueError):
            simulator.simulate(1.0, 10.0, 0.0)
