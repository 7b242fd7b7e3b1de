"""Compile-cycle orchestration: type-check rendezvous, merge, gated stage action."""
