"""Keeps sessions, conversion rate, sales, revenue and AOV consistent."""
