import unittest
from datetime import datetime, timezone

from src.data_sources.base import precipitation_type_label, solar_radiation, vegetation_health_label
from src.data_sources.models import Provenance
from src.data_sources.synthetic import SyntheticEnvironmentGenerator, climate_band, seasonal_phase


class TestSyntheticEnvironment(unittest.TestCase):

    def setUp(self):
        self.generator = SyntheticEnvironmentGenerator()
        self.when = datetime(2024, 7, 15, 14, 30, tzinfo=timezone.utc)

    def test_same_place_same_hour_is_deterministic(self):
        a = self.generator.generate(42.03, -93.63, self.when)
        b = self.generator.generate(42.03, -93.63, self.when.replace(minute=5))
        self.assertEqual(a, b)

    def test_seed_changes_the_draw(self):
        a = SyntheticEnvironmentGenerator(seed=1).generate(42.03, -93.63, self.when)
        b = SyntheticEnvironmentGenerator(seed=2).generate(42.03, -93.63, self.when)
        self.assertNotEqual(a, b)

    def test_every_record_is_tagged_synthetic(self):
        bundle = self.generator.generate(-33.9, 151.2, self.when)
        for domain in ("weather", "soil", "vegetation", "precipitation"):
            self.assertIs(bundle.record(domain).provenance, Provenance.SYNTHETIC)

    def test_values_stay_in_range(self):
        for lat in (-80, -45, -10, 0, 10, 30, 50, 75):
            for month in (1, 4, 7, 10):
                bundle = self.generator.generate(lat, 20.0, datetime(2024, month, 1, 6, tzinfo=timezone.utc))
                self.assertTrue(0.1 <= bundle.soil.surface_moisture <= 0.8)
                self.assertTrue(0.1 <= bundle.soil.fertility_index <= 1.0)
                self.assertTrue(0.1 <= bundle.vegetation.ndvi <= 0.9)
                self.assertTrue(0 <= bundle.weather.cloud_cover <= 100)
                self.assertTrue(10 <= bundle.weather.humidity <= 100)
                self.assertGreaterEqual(bundle.precipitation.daily_precipitation, 0.0)
                self.assertGreaterEqual(bundle.weather.solar_radiation, 0.0)
                self.assertIsInstance(bundle.weather.temperature, float)

    def test_labels_follow_values(self):
        bundle = self.generator.generate(5.0, 100.0, self.when)
        self.assertEqual(bundle.vegetation.vegetation_health, vegetation_health_label(bundle.vegetation.ndvi))
        self.assertEqual(
            bundle.precipitation.precipitation_type,
            precipitation_type_label(bundle.precipitation.daily_precipitation),
        )

    def test_climate_band(self):
        self.assertEqual(climate_band(5), "tropical")
        self.assertEqual(climate_band(-29.9), "tropical")
        self.assertEqual(climate_band(42), "temperate")
        self.assertEqual(climate_band(-70), "polar")

    def test_seasons_are_opposite_across_hemispheres(self):
        july = datetime(2024, 7, 1).timetuple().tm_yday
        self.assertGreater(seasonal_phase(45, july), 0.9)
        self.assertLess(seasonal_phase(-45, july), -0.9)


class TestDerivedLabels(unittest.TestCase):

    def test_vegetation_health_label(self):
        self.assertEqual(vegetation_health_label(0.2), "Poor")
        self.assertEqual(vegetation_health_label(0.3), "Fair")
        self.assertEqual(vegetation_health_label(0.6), "Good")
        self.assertEqual(vegetation_health_label(0.7), "Excellent")

    def test_precipitation_type_label(self):
        self.assertEqual(precipitation_type_label(0), "No Precipitation")
        self.assertEqual(precipitation_type_label(1.5), "Drizzle")
        self.assertEqual(precipitation_type_label(5), "Light Rain")
        self.assertEqual(precipitation_type_label(10), "Heavy Rain")

    def test_solar_radiation_is_attenuated_by_cloud(self):
        when = datetime(2024, 6, 21, tzinfo=timezone.utc)
        clear = solar_radiation(23.45, 0, when)
        overcast = solar_radiation(23.45, 100, when)
        self.assertGreater(clear, 990)
        self.assertAlmostEqual(overcast, round(clear * 0.3, 1), delta=0.2)

    def test_solar_radiation_never_negative(self):
        when = datetime(2024, 12, 21, tzinfo=timezone.utc)
        self.assertEqual(solar_radiation(89.9, 0, when), 0.0)


if __name__ == '__main__':
    unittest.main()
