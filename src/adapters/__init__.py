"""Adapters that connect the core to hosts, files and terminals."""
