"""Diagnostic queries sampled on every pass.

Each query returns a single count and feeds exactly one gauge.  When the
query cannot be answered the gauge receives ``sentinel`` instead, a value no
healthy cluster can report.  The 1000 sentinels are relied on by existing
alert rules and must not change.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class DiagnosticQuery:
    """A single-value query mapped to one gauge."""

    name: str
    sql: str
    description: str
    sentinel: float


DOWN_SEGMENTS = DiagnosticQuery(
    name="down_segments",
    sql="SELECT count(*) FROM gp_segment_configuration WHERE status <> 'u'",
    description="Shows the number of down segments in our cluster",
    sentinel=1000,
)

CHANGE_SEGMENTS = DiagnosticQuery(
    name="change_segments",
    sql="SELECT count(*) FROM gp_segment_configuration WHERE mode = 'c'",
    description=(
        "Shows the number of mirror segments in our change tracking indicating down segment"
    ),
    sentinel=1000,
)

RESYNC_SEGMENTS = DiagnosticQuery(
    name="resync_segments",
    sql="SELECT count(*) FROM gp_segment_configuration WHERE mode = 'r'",
    description="Shows the number of segments currently resynchronizing with their mirror",
    sentinel=1000,
)

# Higher is healthier for the next two, so the sentinel sits below zero.
RESPONSIVE_SEGMENTS = DiagnosticQuery(
    name="responsive_segments",
    sql="SELECT count(DISTINCT gp_segment_id) FROM gp_dist_random('pg_class')",
    description="Shows the number of segments answering a dispatched catalog query",
    sentinel=-1,
)

REPLICATION_STREAMS = DiagnosticQuery(
    name="replication_streams",
    sql="SELECT count(*) FROM pg_stat_replication WHERE state = 'streaming'",
    description="Shows the number of replication connections in streaming state",
    sentinel=-1,
)

DIAGNOSTIC_QUERIES: tuple[DiagnosticQuery, ...] = (
    DOWN_SEGMENTS,
    CHANGE_SEGMENTS,
    RESYNC_SEGMENTS,
    RESPONSIVE_SEGMENTS,
    REPLICATION_STREAMS,
)

# content = -1 restricts the lookup to the master and standby rows; segment hosts
# carry one row per segment instance and are never the master.
ROLE_QUERY = (
    "SELECT role FROM gp_segment_configuration WHERE address = :address AND content = -1"
)
PRIMARY_ROLE = "p"
