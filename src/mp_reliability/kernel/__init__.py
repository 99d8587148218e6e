"""Kernel – errors, time and collection primitives shared by every layer."""
