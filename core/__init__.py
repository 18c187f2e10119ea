"""Stopwatch engine, clocks and journal."""
