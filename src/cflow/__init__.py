"""
cflow: Control-Flow Combinators

Runtime combinators extending Python's binding, iteration and
accumulation primitives:

    - ranges:     directional, nested numeric loops with step inference
    - binding:    short-circuit when_let / if_let (parallel and sequential)
    - lookup:     when_found / if_found on explicit (value, found) pairs
    - accumulate: scoped collectors exposing a single push capability
    - scanning:   sequence scans and resource scans with guaranteed release

ARCHITECTURAL GUARANTEE:
------------------------
Every combinator is synchronous and single-threaded.
No combinator keeps state between calls.
No combinator swallows an exception raised by a body.
"""

__version__ = "0.1.0"
