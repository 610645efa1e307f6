import unittest

from src.core.sustainability import (
    biodiversity,
    carbon_sequestration,
    recommendations,
    soil_health,
    sustainability_report,
    water_efficiency,
)
from src.farm.catalog import crop_catalog
from tests.factories import make_state


class TestSustainability(unittest.TestCase):

    def setUp(self):
        self.crops = crop_catalog()
        self.state = make_state(plot_count=4, fertility=0.8)

    def test_empty_farm(self):
        self.assertEqual(carbon_sequestration(self.state, self.crops), 0)
        self.assertEqual(water_efficiency(self.state), 1.0)
        self.assertAlmostEqual(soil_health(self.state), 0.8)
        self.assertEqual(biodiversity(self.state), 0.0)

    def test_planted_farm(self):
        self.state.plots[0].crop = "soybean"
        self.state.plots[0].health = 0.5
        self.state.plots[1].crop = "coverCrop"
        self.state.plots[2].crop = "coverCrop"
        self.state.plots[3].fertility = 0.4
        self.state.score = 150
        self.state.water_usage = 300

        self.assertAlmostEqual(carbon_sequestration(self.state, self.crops), 0.8 * 0.5 + 1.2 + 1.2)
        self.assertAlmostEqual(water_efficiency(self.state), 0.5)
        self.assertAlmostEqual(soil_health(self.state), (0.8 * 3 + 0.4) / 4)
        self.assertAlmostEqual(biodiversity(self.state), 0.4)

    def test_biodiversity_caps_at_one(self):
        state = make_state(plot_count=7)
        for plot, crop in zip(state.plots, ["corn", "wheat", "soybean", "tomato", "coverCrop", "corn", "wheat"]):
            plot.crop = crop
        self.assertEqual(biodiversity(state), 1.0)

    def test_recommendations(self):
        tips = recommendations(carbon=0.5, water=0.2, diversity=0.2)
        self.assertEqual(len(tips), 3)
        self.assertIn("cover crops", tips[0])
        self.assertIn("drip irrigation", tips[1])

        tips = recommendations(carbon=3.0, water=1.0, diversity=0.8)
        self.assertEqual(tips, ["Great job! Your farm is operating sustainably"])

    def test_report_serializes(self):
        data = sustainability_report(self.state, self.crops).to_dict()
        self.assertEqual(
            set(data), {"carbonSequestration", "waterEfficiency", "soilHealth", "biodiversity", "recommendations"}
        )
        self.assertEqual(data["waterEfficiency"], 1.0)


if __name__ == '__main__':
    unittest.main()
