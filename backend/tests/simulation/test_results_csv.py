from ebike_sim.simulation.bike_simulator import BikeSimulator
from ebike_sim.simulation.component_selector import ComponentSelector
from ebike_sim.simulation.environment import Environment, Wind, WindDirection
from ebike_sim.simulation.results import CSV_HEADER, SimulationResult
from ebike_sim.simulation.schemas import BikeSpecifications, ComponentType, SimulationData
import pytest


def sample(time_s, speed_kmh=20.0, power_w=360.0, soc=90.0, motor_temp_c=30.0, **extra):
    values = dict(
        time_s=time_s, speed_kmh=speed_kmh, distance_km=time_s * speed_kmh / 3600.0,
        motor_temp_c=motor_temp_c, controller_temp_c=25.0, battery_temp_c=20.0,
        battery_soc=soc, current_a=power_w / 48.0, power_w=power_w
    )
    values.update(extra)
    return SimulationData(**values)


class TestSimulationResult:

    def test_energy_by_trapezoid(self):
        # 360 W for 10 s
        result = SimulationResult(data=[sample(float(t)) for t in range(11)])
        assert result.total_energy_consumed() == pytest.approx(1.0)
        assert result.energy_efficiency() == pytest.approx(result.total_distance / 0.001)

    def test_aggregates_are_reductions(self):
        result = SimulationResult(data=[sample(1.0, speed_kmh=10.0), sample(2.0, speed_kmh=25.0), sample(3.0, speed_kmh=20.0)])
        assert result.total_time == 3.0
        assert result.max_speed == 25.0
        assert result.final_battery_temp == 20.0
        assert result.acceleration_time(24.0) == 2.0
        assert result.acceleration_time(30.0) is None
        assert result.has_reached_speed(26.0)
        assert not result.has_reached_speed(30.0)

    def test_empty_result(self):
        result = SimulationResult()
        assert result.total_distance == 0.0
        assert not result.battery_empty
        assert result.total_energy_consumed() == 0.0
        assert result.summary().total_time_s == 0.0
        assert result.to_csv() == ""

    def test_battery_empty_flag(self):
        assert SimulationResult(data=[sample(1.0, soc=0.96)]).battery_empty
        assert not SimulationResult(data=[sample(1.0, soc=1.5)]).battery_empty
        # Still has charge, though the written column shows 1.0
        assert not SimulationResult(data=[sample(1.0, soc=1.04)]).battery_empty

    def test_find_points(self):
        result = SimulationResult(data=[
            sample(1.0, soc=80.0, motor_temp_c=40.0),
            sample(2.0, soc=60.0, motor_temp_c=70.0),
            sample(3.0, soc=40.0, motor_temp_c=90.0),
        ])
        assert result.find_point_at_soc(50.0).time_s == 3.0
        assert result.find_point_at_soc(10.0) is None
        assert result.find_point_at_temperature(65.0, ComponentType.MOTOR).time_s == 2.0
        assert result.max_motor_temperature() == 90.0

    def test_thermal_time_split(self):
        result = SimulationResult(data=[
            sample(0.0), sample(1.0), sample(2.0, motor_temp_c=85.0), sample(3.0, motor_temp_c=105.0)
        ])
        assert result.thermal_operating_times() == (1.0, 1.0, 1.0)
        percentages = result.summary().thermal_time_percentages()
        assert sum(percentages) == pytest.approx(100.0)

    def test_profiles_keep_last_point(self):
        result = SimulationResult(data=[sample(float(t)) for t in range(1, 201)])
        profile = result.speed_profile(max_points=50)
        assert len(profile) <= 51
        assert profile[-1][0] == 200.0


class TestCsvInterchange:

    @pytest.fixture(scope="class")
    def ride(self):
        specs = BikeSpecifications(rider_weight_kg=80, bike_weight_kg=25, desired_max_speed_kmh=35, desired_max_range_km=50)
        selection = ComponentSelector().select_components(specs)
        environment = Environment(temperature_c=5.0, wind=Wind(speed_mps=3.0, direction=WindDirection.HEADWIND))
        return BikeSimulator.from_selection(specs, selection, environment).test_acceleration()

    def test_header(self, ride):
        lines = ride.to_csv().split("\n")
        assert lines[0] == ",".join(CSV_HEADER)
        assert len(lines) == len(ride.data) + 1
        assert not ride.to_csv().endswith("\n")

    def test_round_trip_preserves_samples(self, ride):
        parsed = SimulationResult.from_csv(ride.to_csv())

        assert len(parsed.data) == len(ride.data)
        for original, restored in zip(ride.data, parsed.data):
            assert restored.time_s == pytest.approx(original.time_s, abs=0.0051)
            assert restored.speed_kmh == pytest.approx(original.speed_kmh, abs=0.051)
            assert restored.distance_km == pytest.approx(original.distance_km, abs=0.00051)
            assert restored.battery_soc == pytest.approx(original.battery_soc, abs=0.051)
            assert restored.wind_effect == pytest.approx(original.wind_effect, abs=0.051)

    def test_round_trip_preserves_aggregates(self, ride):
        parsed = SimulationResult.from_csv(ride.to_csv())

        assert parsed.total_time == pytest.approx(ride.total_time, abs=0.0051)
        assert parsed.total_distance == pytest.approx(ride.total_distance, abs=0.00051)
        assert parsed.max_speed == pytest.approx(ride.max_speed, abs=0.051)
        assert parsed.battery_empty == ride.battery_empty
        assert parsed.average_wind_impact == pytest.approx(ride.average_wind_impact, abs=0.051)
        assert parsed.average_temp_impact == pytest.approx(ride.average_temp_impact, abs=0.051)
        assert parsed.final_battery_temp == pytest.approx(ride.final_battery_temp, abs=0.051)

    def test_short_rows_skipped_and_effects_default(self):
        csv_data = "\n".join([
            ",".join(CSV_HEADER),
            "0.10,5.0,0.000,20.0,20.0,20.0,100.0,10.0,300.0",
            "0.20,1.0,2.0",
            "0.30,9.0,0.001,20.1,20.0,20.0,99.9,12.0,320.0,4.5,0.0",
        ])
        parsed = SimulationResult.from_csv(csv_data)

        assert len(parsed.data) == 2
        assert parsed.data[0].wind_effect == 0.0
        assert parsed.data[0].temp_effect == 0.0
        assert parsed.data[1].wind_effect == 4.5

    def test_empty_input(self):
        assert SimulationResult.from_csv("").data == []
        assert SimulationResult.from_csv(",".join(CSV_HEADER)).data == []
