import os
import unittest
from unittest.mock import patch

from src.farm.catalog import crop_catalog, location_catalog, tutorials, weather_events
from src.utils.config import Settings, get_settings


class TestSettings(unittest.TestCase):

    def test_development_yaml_is_loaded(self):
        settings = get_settings("development")
        self.assertEqual(settings.logging.level, "DEBUG")
        self.assertEqual(settings.simulation.default_location, "iowa")

    def test_missing_environment_uses_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = get_settings("no-such-env")
        self.assertEqual(settings, Settings())

    def test_environment_overrides(self):
        env = {
            "FARM_SOURCES_ENABLED": "false",
            "FARM_SOURCE_TIMEOUT": "2.5",
            "FARM_TICK_INTERVAL": "1",
            "FARM_LOCATION": "kansas",
        }
        with patch.dict(os.environ, env):
            settings = get_settings("development")
        self.assertFalse(settings.sources.enabled)
        self.assertEqual(settings.sources.timeout_seconds, 2.5)
        self.assertEqual(settings.simulation.tick_interval_seconds, 1.0)
        self.assertEqual(settings.simulation.default_location, "kansas")


class TestCatalogs(unittest.TestCase):

    def test_crops(self):
        crops = crop_catalog()
        self.assertEqual(set(crops), {"corn", "wheat", "soybean", "tomato", "coverCrop"})
        self.assertEqual(crops["corn"].cost, 50)
        self.assertEqual(crops["wheat"].growth_days, 120)
        self.assertEqual(crops["wheat"].base_yield, 80)

    def test_catalogs_are_read_only(self):
        with self.assertRaises(TypeError):
            crop_catalog()["rice"] = None
        self.assertIs(crop_catalog(), crop_catalog())

    def test_locations_and_reference_tables(self):
        self.assertEqual(location_catalog()["iowa"].region, "Iowa Corn Belt")
        self.assertEqual({e.event_type for e in weather_events()},
                         {"drought", "flood", "heatwave", "frost", "hail"})
        self.assertEqual([t.step for t in tutorials()], [1, 2, 3, 4, 5, 6])


if __name__ == '__main__':
    unittest.main()
