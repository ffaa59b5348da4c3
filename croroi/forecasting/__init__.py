"""Lift forecasting.

- assumptions.py: ForecastInputs, ValueMode, InvalidInput, scenario lifts
- curves.py: lift adoption curves (discrete table, linear ramp)
- engine.py: month-by-month projection of investment, value and ROI
"""
