"""Tests for the Energy Planner integration."""
