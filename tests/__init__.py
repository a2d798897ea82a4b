"""Tests for Leviton Decora Smart integration."""
