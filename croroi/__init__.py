"""CRO ROI calculator: lift forecasting, companion metrics and exports.

- forecasting/: lift adoption curves and the 12-month projection engine
- metrics/: incremental value, CAC impact, break-even lift, returns
- funnel/: sessions / conversion rate / sales sync
- exports/: CSV writers, text and Markdown reports, shareable links
- api/: calculator composition and the Flask app
"""

__version__ = "0.1.0"
