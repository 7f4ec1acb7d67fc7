from prometheus_client import Counter, CollectorRegistry, Info, generate_latest


registry = CollectorRegistry()


allocations_total = Counter(
    'planner_allocations_total',
    'Allocation attempts by outcome',
    ['outcome'],
    registry=registry
)

allocation_cancellations_total = Counter(
    'planner_allocation_cancellations_total',
    'Allocations cancelled',
    registry=registry
)

executions_recorded_total = Counter(
    'planner_executions_recorded_total',
    'Executions recorded by outcome',
    ['outcome'],
    registry=registry
)

execution_followup_failures_total = Counter(
    'planner_execution_followup_failures_total',
    'Post-write steps of an execution that failed and were left for reconciliation',
    ['step'],
    registry=registry
)

reconciliation_repairs_total = Counter(
    'planner_reconciliation_repairs_total',
    'Inconsistencies repaired by the reconciler',
    ['kind'],
    registry=registry
)

app_info = Info(
    'planner_app',
    'Application information',
    registry=registry
)


def track_allocation(outcome: str):
    allocations_total.labels(outcome=outcome).inc()


def track_allocation_cancelled():
    allocation_cancellations_total.inc()


def track_execution(outcome: str):
    executions_recorded_total.labels(outcome=outcome).inc()


def track_followup_failure(step: str):
    execution_followup_failures_total.labels(step=step).inc()


def track_reconciliation_repair(kind: str, count: int = 1):
    if count:
        reconciliation_repairs_total.labels(kind=kind).inc(count)


def get_metrics() -> bytes:
    return generate_latest(registry)


def set_app_info(version: str, environment: str):
    app_info.info({'version': version, 'environment': environment})
