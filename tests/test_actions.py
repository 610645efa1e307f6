import math
import unittest
from datetime import datetime, timezone

from src.core.actions import Action, ActionHandler, ActionRejected, RejectionReason
from src.farm.models import FarmStateStore
from tests.factories import make_state


class TestActionHandler(unittest.TestCase):

    def setUp(self):
        self.store = FarmStateStore(make_state(moisture=0.5, fertility=0.9))
        self.handler = ActionHandler(self.store)

    def assertRejected(self, action, reason):
        before = self.store.snapshot()
        with self.assertRaises(ActionRejected) as ctx:
            self.handler.apply(action)
        self.assertEqual(ctx.exception.reason, reason)
        self.assertEqual(self.store.snapshot(), before)

    def test_plant_corn_debits_cost(self):
        before = self.store.snapshot()
        state = self.handler.apply(Action("plant", plot_id=0, crop="corn"))

        self.assertEqual(state.budget, 9950)
        self.assertEqual(state.plots[0].crop, "corn")
        self.assertEqual(state.plots[0].planted_day, state.day)
        self.assertEqual(state.plots[1:], before.plots[1:])

    def test_plant_rejections(self):
        self.handler.apply(Action("plant", plot_id=0, crop="corn"))

        self.assertRejected(Action("plant", plot_id=0, crop="wheat"), RejectionReason.PLOT_OCCUPIED)
        self.assertRejected(Action("plant", plot_id=1, crop="cactus"), RejectionReason.UNKNOWN_CROP)
        self.assertRejected(Action("plant", plot_id=99, crop="corn"), RejectionReason.UNKNOWN_PLOT)
        self.assertRejected(Action("plant", plot_id=-1, crop="corn"), RejectionReason.UNKNOWN_PLOT)
        self.assertRejected(Action("plant", crop="corn"), RejectionReason.UNKNOWN_PLOT)

    def test_plant_without_budget(self):
        self.store = FarmStateStore(make_state(budget=40))
        self.handler = ActionHandler(self.store)
        self.assertRejected(Action("plant", plot_id=0, crop="corn"), RejectionReason.INSUFFICIENT_BUDGET)

    def test_irrigate(self):
        with self.store.transaction() as state:
            state.plots[0].needs_water = True

        state = self.handler.apply(Action("irrigate", plot_id=0))

        self.assertAlmostEqual(state.plots[0].soil_moisture, 0.8)
        self.assertFalse(state.plots[0].needs_water)
        self.assertEqual(state.budget, 9980)
        self.assertEqual(state.score, 10)
        self.assertEqual(state.water_usage, 100)

    def test_irrigate_caps_moisture(self):
        self.handler.apply(Action("irrigate", plot_id=0))
        state = self.handler.apply(Action("irrigate", plot_id=0))
        self.assertEqual(state.plots[0].soil_moisture, 1.0)

    def test_irrigate_with_insufficient_budget(self):
        self.store = FarmStateStore(make_state(budget=10, moisture=0.5))
        self.handler = ActionHandler(self.store)

        self.assertRejected(Action("irrigate", plot_id=0), RejectionReason.INSUFFICIENT_BUDGET)
        state = self.store.snapshot()
        self.assertEqual(state.budget, 10)
        self.assertEqual(state.plots[0].soil_moisture, 0.5)

    def test_fertilize(self):
        with self.store.transaction() as state:
            state.plots[2].needs_fertilizer = True

        state = self.handler.apply(Action("fertilize", plot_id=2))

        self.assertEqual(state.plots[2].fertility, 1.0)
        self.assertFalse(state.plots[2].needs_fertilizer)
        self.assertEqual(state.budget, 9970)
        self.assertEqual(state.score, 15)
        self.assertEqual(state.carbon_footprint, 0.5)

    def test_harvest_requires_mature_crop(self):
        self.handler.apply(Action("plant", plot_id=0, crop="corn"))
        self.assertRejected(Action("harvest", plot_id=0), RejectionReason.NOT_MATURE)
        self.assertRejected(Action("harvest", plot_id=1), RejectionReason.NOT_MATURE)

    def test_harvest_mature_crop_resets_plot(self):
        with self.store.transaction() as state:
            plot = state.plots[0]
            plot.crop = "corn"
            plot.growth_stage = "mature"
            plot.growth_progress = 1.0
            plot.health = 0.8
            plot.yield_amount = 86

        state = self.handler.apply(Action("harvest", plot_id=0))

        harvested = math.floor(120 * 0.8 * 0.9)
        self.assertEqual(state.budget, 10000 + 2 * harvested)
        self.assertEqual(state.score, harvested)
        plot = state.plots[0]
        self.assertIsNone(plot.crop)
        self.assertEqual(plot.growth_stage, "empty")
        self.assertEqual(plot.growth_progress, 0.0)
        self.assertEqual(plot.health, 1.0)
        self.assertEqual(plot.yield_amount, 0)
        self.assertEqual(plot.fertility, 0.9)

    def test_rotate_to_legume(self):
        state = self.handler.apply(Action("rotateToLegume", plot_id=3))
        self.assertEqual(state.plots[3].fertility, 1.0)
        self.assertEqual(state.sustainability_score, 55)

        self.handler.apply(Action("plant", plot_id=3, crop="soybean"))
        self.assertRejected(Action("rotateToLegume", plot_id=3), RejectionReason.PLOT_NOT_EMPTY)

    def test_install_drip_irrigation(self):
        state = self.handler.apply(Action("installDripIrrigation"))
        self.assertEqual(state.budget, 9800)
        self.assertEqual(state.sustainability_score, 60)

        self.store = FarmStateStore(make_state(budget=150))
        self.handler = ActionHandler(self.store)
        self.assertRejected(Action("installDripIrrigation"), RejectionReason.INSUFFICIENT_BUDGET)

    def test_feed_and_water_livestock(self):
        state = self.handler.apply(Action("feedLivestock", livestock="cattle", count=2))
        self.assertEqual(state.budget, 9980)
        self.assertAlmostEqual(state.herd("cattle").health, 0.9)

        state = self.handler.apply(Action("waterLivestock", livestock="chickens", count=3))
        self.assertEqual(state.budget, 9965)
        self.assertAlmostEqual(state.herd("chickens").productivity, 0.85)

    def test_livestock_rejections(self):
        self.assertRejected(Action("feedLivestock", livestock="goats", count=1), RejectionReason.UNKNOWN_LIVESTOCK)
        self.assertRejected(Action("waterLivestock", livestock="cattle", count=0), RejectionReason.INVALID_COUNT)
        self.assertRejected(
            Action("feedLivestock", livestock="cattle", count=2000), RejectionReason.INSUFFICIENT_BUDGET
        )

    def test_unknown_action(self):
        self.assertRejected(Action("sellFarm"), RejectionReason.UNKNOWN_ACTION)

    def test_successful_action_touches_last_updated(self):
        old = datetime(2020, 1, 1, tzinfo=timezone.utc)
        with self.store.transaction() as state:
            state.last_updated = old

        state = self.handler.apply(Action("irrigate", plot_id=0))

        self.assertGreater(state.last_updated, old)

    def test_result_is_a_copy(self):
        state = self.handler.apply(Action("irrigate", plot_id=0))
        state.budget = 0
        state.plots[0].crop = "corn"

        stored = self.store.snapshot()
        self.assertEqual(stored.budget, 9980)
        self.assertIsNone(stored.plots[0].crop)


if __name__ == '__main__':
    unittest.main()
