"""Known-normal log lines that make up the detection baseline.

Verdicts are only reproducible across deployments if this list and its
order stay fixed: a seed's position is its point ID.
"""

SEED_LOGS: tuple[str, ...] = (
    "INFO: User 'admin' logged in successfully from IP 192.168.1.10",
    "INFO: Service 'database-connector' started successfully on port 5432",
    "DEBUG: Cache cleared for user session 'user123'",
    "INFO: GET /api/v1/users request processed in 25ms",
    "INFO: Scheduled backup job 'daily-backup' completed successfully.",
)
