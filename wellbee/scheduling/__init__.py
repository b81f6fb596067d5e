"""Appointment scheduling: slot generation, availability checks and the booking service."""
