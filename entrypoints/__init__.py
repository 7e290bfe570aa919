"""Per-platform application entrypoints"""
