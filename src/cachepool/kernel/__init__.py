"""Kernel – errors, clock, key rules, codecs and the storage port."""
