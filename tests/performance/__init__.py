"""
Performance testing package (Locust-based).

Contains the Locust entrypoint for the Users API load test plus the
pieces it is assembled from: the staged traffic profile, the custom
``errors`` rate and check tallies, the per-iteration script and the
threshold evaluation that decides whether a run passes.

Only :mod:`.locustfile` imports Locust; every other module is plain
Python so the unit suite can exercise it directly.

Key Concepts Demonstrated:
- ``LoadTestShape`` driven by linear ramp / hold stages
- A custom error-rate metric separate from Locust's request failures
- Worker → master aggregation of custom counters
- Threshold gates that set the Locust process exit code
"""
