import unittest
from croroi.forecasting.assumptions import ForecastInputs, InvalidInput, ValueMode, validate_inputs
from croroi.forecasting.curves import DISCRETE_LIFT_CURVE, DiscreteCurve, LinearRampCurve, get_curve, CURVES
from croroi.forecasting.engine import project, project_inputs, project_scenarios, validate_series


class TestCurves(unittest.TestCase):
    def test_endpoints_both_policies(self):
        for name in CURVES:
            c = get_curve(name)
            for months in (2, 3, 6, 12, 24):
                self.assertEqual(c.fraction(1, months), 0.0, f"{name}/{months}")
                self.assertAlmostEqual(c.fraction(months, months), 1.0, msg=f"{name}/{months}")

    def test_monotone_both_policies(self):
        for name in CURVES:
            c = get_curve(name)
            for months in (2, 5, 7, 12, 18):
                fr = [c.fraction(m, months) for m in range(1, months + 1)]
                for a, b in zip(fr, fr[1:]):
                    self.assertLessEqual(a, b, f"{name}/{months}: {fr}")

    def test_discrete_reads_table_for_twelve_months(self):
        c = DiscreteCurve()
        for m in range(1, 13):
            self.assertEqual(c.fraction(m, 12), DISCRETE_LIFT_CURVE[m])
        self.assertEqual(c.fraction(15, 18), 1.0)

    def test_discrete_resamples_short_horizon(self):
        c = DiscreteCurve()
        # month 2 of 3 sits halfway along the table: between month 6 (0.63) and 7 (0.73)
        self.assertAlmostEqual(c.fraction(2, 3), 0.68)

    def test_linear_ramp(self):
        c = LinearRampCurve()
        self.assertAlmostEqual(c.fraction(2, 12), 1 / 11)
        self.assertAlmostEqual(c.fraction(7, 12), 6 / 11)

    def test_single_month_is_research(self):
        for name in CURVES:
            self.assertEqual(get_curve(name).fraction(1, 1), 0.0)

    def test_unknown_curve(self):
        with self.assertRaises(InvalidInput):
            get_curve("sigmoid")
        self.assertIsInstance(get_curve(None), DiscreteCurve)
        self.assertEqual(get_curve(" Linear ").name, "linear")


class TestProjection(unittest.TestCase):
    def test_validate_inputs(self):
        validate_inputs(ForecastInputs(revenue=1000, margin_percent=40, investment=100, target_lift_percent=20))
        for bad in (
            ForecastInputs(revenue=-1, margin_percent=40, investment=0, target_lift_percent=20),
            ForecastInputs(revenue=1, margin_percent=40, investment=-5, target_lift_percent=20),
            ForecastInputs(revenue=1, margin_percent=40, investment=0, target_lift_percent=20, months=0),
            ForecastInputs(revenue=1, margin_percent=40, investment=0, target_lift_percent=float("nan")),
        ):
            with self.assertRaises(InvalidInput):
                validate_inputs(bad)

    def test_linear_concrete_scenario(self):
        r = project(420000, 45, 0, 20, 12, ValueMode.PROFIT, curve="linear")
        self.assertEqual(len(r.points), 12)
        self.assertEqual(r.points[0].incremental_revenue, 0.0)
        self.assertAlmostEqual(r.points[-1].incremental_revenue, 84000.0)
        expected = sum(420000 * 20 / 100 * (m - 1) / 11 * 0.45 for m in range(1, 13))
        self.assertAlmostEqual(r.year1_net_value, expected, places=6)
        self.assertAlmostEqual(r.year1_net_value, 226800.0, places=6)
        self.assertEqual(r.year1_roi_percent, 0.0)

    def test_discrete_matches_table(self):
        r = project(100000, 50, 1000, 10, 12)
        self.assertAlmostEqual(r.points[4].incremental_revenue, 100000 * 0.10 * 0.50)
        total = sum(100000 * 0.10 * f * 0.5 for f in DISCRETE_LIFT_CURVE.values())
        self.assertAlmostEqual(r.points[-1].cumulative_value, total)
        self.assertAlmostEqual(r.year1_net_value, total - 12000)
        self.assertAlmostEqual(r.year1_roi_percent, (total - 12000) / 12000 * 100)

    def test_investment_and_monotone_series(self):
        r = project(50000, 30, 750, 15, 18, curve="linear")
        self.assertEqual(len(r.points), 18)
        for i, p in enumerate(r.points, start=1):
            self.assertEqual(p.month, i)
            self.assertAlmostEqual(p.cumulative_investment, i * 750)
            self.assertAlmostEqual(p.net_value, p.cumulative_value - p.cumulative_investment)
        for a, b in zip(r.points, r.points[1:]):
            self.assertLessEqual(a.cumulative_value, b.cumulative_value)
        self.assertTrue(all(validate_series(r, months=18).values()))

    def test_zero_investment_roi_zero(self):
        for curve in CURVES:
            r = project(250000, 60, 0, 35, curve=curve)
            self.assertEqual(r.year1_roi_percent, 0.0)

    def test_zero_revenue(self):
        r = project(0, 45, 0, 20)
        self.assertTrue(all(p.cumulative_value == 0 and p.net_value == 0 for p in r.points))

    def test_no_margin_forces_revenue_mode(self):
        r = project(10000, 0, 100, 20, value_mode=ValueMode.PROFIT, curve="linear")
        self.assertIs(r.value_mode, ValueMode.REVENUE)
        for p in r.points:
            self.assertEqual(p.value, p.incremental_revenue)
        neg = project(10000, -5, 100, 20, value_mode="profit")
        self.assertIs(neg.value_mode, ValueMode.REVENUE)

    def test_revenue_mode_ignores_margin(self):
        r = project(10000, 40, 0, 20, value_mode="revenue")
        self.assertIs(r.value_mode, ValueMode.REVENUE)
        self.assertAlmostEqual(r.points[-1].value, 2000.0)

    def test_linear_in_lift(self):
        a = project(80000, 40, 500, 12, curve="discrete")
        b = project(80000, 40, 500, 36, curve="discrete")
        for pa, pb in zip(a.points, b.points):
            self.assertAlmostEqual(pb.incremental_revenue, 3 * pa.incremental_revenue)

    def test_negative_lift_models_decline(self):
        r = project(10000, 50, 0, -10, curve="linear")
        self.assertAlmostEqual(r.points[-1].incremental_revenue, -1000.0)
        self.assertLess(r.year1_net_value, 0)

    def test_fixed_baseline_not_compounded(self):
        r = project(1000, 100, 0, 50, 24)
        # months past the table hold the full lift on the same baseline
        self.assertAlmostEqual(r.points[12].incremental_revenue, 500.0)
        self.assertAlmostEqual(r.points[23].incremental_revenue, 500.0)

    def test_points_are_immutable(self):
        r = project_inputs(ForecastInputs(revenue=1000, margin_percent=10, investment=0, target_lift_percent=5))
        self.assertIsInstance(r.points, tuple)
        with self.assertRaises(Exception):
            r.points[0].net_value = 1.0

    def test_invalid_months(self):
        with self.assertRaises(InvalidInput):
            project(1000, 10, 0, 5, months=0)
        with self.assertRaises(InvalidInput):
            project(1000, 10, 0, 5, months=2.5)

    def test_scenarios(self):
        s = project_scenarios(420000, 45, 5000, curve="linear")
        self.assertEqual(list(s), ["conservative", "target", "best_case"])
        self.assertEqual([r.target_lift_percent for r in s.values()], [10.0, 20.0, 40.0])
        self.assertLess(s["conservative"].year1_net_value, s["target"].year1_net_value)
        self.assertLess(s["target"].year1_net_value, s["best_case"].year1_net_value)

    def test_break_even_month(self):
        r = project(100000, 50, 1000, 10, 12)
        # cumulative profit 3150 < 4000 spent by month 4, 5650 >= 5000 by month 5
        self.assertEqual(r.break_even_month, 5)
        self.assertLess(r.points[3].net_value, 0)
        self.assertGreaterEqual(r.points[4].net_value, 0)

    def test_break_even_month_absent_or_immediate(self):
        self.assertIsNone(project(100000, 50, 100000, 10, 12).break_even_month)
        self.assertEqual(project(100000, 50, 0, 10, 12).break_even_month, 1)


if __name__ == '__main__':
    unittest.main()
