"""Test fixtures for signalcoach."""
