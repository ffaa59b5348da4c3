import unittest
import csv
import io
from croroi.api.calculator import CalculatorInputs
from croroi.exports.formatting import format_cac, format_currency, format_profit
from croroi.exports.reports import forecast_md, results_text, validation_report_md
from croroi.exports.share import build_share_query, build_share_url, load_shared_inputs
from croroi.exports.writers import SCHEMAS, write_forecast, write_scenarios, write_summary
from croroi.forecasting.engine import project, project_scenarios
from croroi.forecasting.assumptions import InvalidInput


class TestFormatting(unittest.TestCase):
    def test_formats(self):
        self.assertEqual(format_currency(420000), "$420,000")
        self.assertEqual(format_currency(1234.5), "$1,235")
        self.assertEqual(format_cac(20.8333), "$20.83")
        self.assertEqual(format_profit(1234567), "$1.23M")
        self.assertEqual(format_profit(84000), "$84k")
        self.assertEqual(format_profit(950), "$950")


class TestWriters(unittest.TestCase):
    def test_forecast_csv(self):
        txt = write_forecast(project(420000, 45, 5000, 20))
        reader = csv.DictReader(io.StringIO(txt))
        recs = list(reader)
        self.assertEqual(len(recs), 12)
        self.assertEqual(reader.fieldnames, SCHEMAS["forecast"])
        self.assertEqual(recs[0]["month"], "1")
        self.assertAlmostEqual(float(recs[-1]["cumulative_investment"]), 60000)

    def test_scenarios_csv(self):
        txt = write_scenarios(project_scenarios(420000, 45, 5000))
        recs = list(csv.DictReader(io.StringIO(txt)))
        self.assertEqual(len(recs), 36)
        self.assertEqual({r["scenario"] for r in recs}, {"conservative", "target", "best_case"})
        self.assertTrue(txt.startswith("scenario,target_lift_percent,value_mode,month"))

    def test_summary_csv(self):
        txt = write_summary({"incremental_revenue": 84000, "roi_percent": 656.0})
        self.assertEqual(txt.splitlines()[0], "metric,value")
        self.assertIn("incremental_revenue,84000", txt)


class TestReports(unittest.TestCase):
    def test_results_text(self):
        txt = results_text(420000, 84000, 37800)
        self.assertEqual(txt.splitlines(), [
            "Current Monthly Revenue: $420,000",
            "Projected Monthly Revenue: $504,000",
            "Incremental Monthly Revenue: +$84,000",
            "Incremental Monthly Profit: $37,800",
        ])
        yearly = results_text(420000, 84000, 37800, yearly=True)
        self.assertIn("Current Yearly Revenue: $5,040,000", yearly)

    def test_forecast_md(self):
        md = forecast_md(project_scenarios(420000, 45, 5000), notes=["Lift adoption curve: discrete"])
        self.assertIn("# 12-Month Forecast", md)
        self.assertIn("## Conservative Scenario", md)
        self.assertIn("## Best Case Scenario", md)
        self.assertIn("| 12 |", md)
        self.assertIn("## Notes", md)
        self.assertIn("- Break-even: month", md)

    def test_validation_md(self):
        v = validation_report_md({"target.length": True, "target.net_identity": False}, details={"months": 12})
        self.assertIn("# Validation Report", v)
        self.assertIn("- target.net_identity: FAIL", v)


class TestShare(unittest.TestCase):
    def test_build_query(self):
        q = build_share_query(CalculatorInputs())
        self.assertEqual(q, "sessions=350000&cr=2&lift=20&revenue=420000&sales=7000&margin=45&cac=25&investment=0")
        url = build_share_url("https://example.com/calc?old=1", CalculatorInputs(investment=2500.5))
        self.assertTrue(url.startswith("https://example.com/calc?sessions=350000"))
        self.assertIn("investment=2500.5", url)

    def test_round_trip(self):
        inputs = CalculatorInputs(sessions=120000, conversion_rate_percent=1.5, lift_percent=12.5, revenue=90000,
                                  sales=1800, margin_percent=38, cac=41.2, investment=3000)
        self.assertEqual(load_shared_inputs(build_share_query(inputs)), inputs)

    def test_load_rederives_sales(self):
        loaded = load_shared_inputs("?sessions=200000&cr=3&sales=1")
        self.assertEqual(loaded.sales, 6000)

    def test_load_ignores_bad_values(self):
        loaded = load_shared_inputs("https://example.com/?lift=abc&margin=&cac=30")
        self.assertEqual(loaded.lift_percent, 20.0)
        self.assertEqual(loaded.margin_percent, 45.0)
        self.assertEqual(loaded.cac, 30.0)

    def test_load_nothing_returns_defaults(self):
        d = CalculatorInputs(sales=1)
        self.assertIs(load_shared_inputs({}, defaults=d), d)

    def test_load_rejects_negative(self):
        with self.assertRaises(InvalidInput):
            load_shared_inputs("sessions=-1000&cac=-3")
        with self.assertRaises(InvalidInput):
            load_shared_inputs({"investment": "-1"})


if __name__ == '__main__':
    unittest.main()
