"""Core ranking and content-safety logic.

Everything in this package is synchronous, pure computation: no I/O after
the keyword dictionary has been loaded, and no shared mutable state.
"""
