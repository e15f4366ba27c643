"""Workday: employee attendance, leave and permission accounting."""
