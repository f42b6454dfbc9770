"""
Edge collector package for the Fronius-to-InfluxDB pipeline.

Reads telemetry from a Fronius inverter installation via the local Solar API
(HTTP/JSON), normalizes every data category into a fixed-schema metric record,
and writes each record to an InfluxDB v2 bucket.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""
