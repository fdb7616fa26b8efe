"""Test helpers for botscript."""
