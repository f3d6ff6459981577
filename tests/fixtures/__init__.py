"""Test fixtures for touchswitch."""
