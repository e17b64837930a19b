"""
Shared Kernel

Base classes and utilities shared by every domain app: entity, aggregate
and event primitives, value objects, the domain error hierarchy, the unit
of work and the message bus.
"""
