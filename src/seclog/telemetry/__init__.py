"""Telemetry domain: operational system events.

Structure:
    models/         Pydantic models for system log events
    system/         System operational logs (system.jsonl)
                    - archive runs, lock timeouts, read failures, scheduler events
"""

__all__: list[str] = []
