"""Lets pytest import the top-level packages (core, data_prep, ...) from a source checkout."""
