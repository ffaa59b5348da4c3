"""Exports & reporting: CSV writers, text/Markdown reports and shareable links.

- formatting.py: currency / CAC / profit display strings
- writers.py: CSV emitters with fixed schemas
- reports.py: copy-results text, forecast and validation Markdown
- share.py: encode / load calculator inputs as URL query parameters
"""
