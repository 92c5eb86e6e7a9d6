"""Brocante: second-hand marketplace catalog backend."""
