"""Adapters layer for Bundle-Sentinel.

This module contains the adapters that interface with external systems.
Adapters implement Port interfaces defined in the domain layer and translate
between external protocols and domain models.
"""
