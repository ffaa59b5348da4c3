"""Companion metrics computed alongside the forecast.

- incremental.py: incremental revenue / profit from traffic and lift
- cac.py: customer acquisition cost improvement
- breakeven.py: lift needed to cover the monthly investment
- returns.py: net profit, ROI and payback for a monthly or yearly period
"""
