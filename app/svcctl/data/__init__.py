"""Bundled data files for svcctl."""
