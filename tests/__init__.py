"""Tests for touchswitch."""
