"""Households, health cards, plans and benefit records."""
