"""Planning feature for contract naming.

This module provides:
- Network adapters that build the naming calls per network family
- The step planner turning batches and probe results into ordered steps
- A service that validates, probes and plans a run end to end
"""

from contract_naming.features.planning.adapters import (
    BaseAdapter,
    ContractCall,
    EnsL1Adapter,
    L2ReverseAdapter,
    NetworkAdapter,
    PlanningError,
    UnsupportedOperationError,
    adapter_for,
)
from contract_naming.features.planning.service import (
    BatchNamingService,
    ExecutionContext,
    NamingPlan,
    PlanningOptions,
    StepPlanner,
    level_suffix,
)

__all__ = [
    "BaseAdapter",
    "BatchNamingService",
    "ContractCall",
    "EnsL1Adapter",
    "ExecutionContext",
    "L2ReverseAdapter",
    "NamingPlan",
    "NetworkAdapter",
    "PlanningError",
    "PlanningOptions",
    "StepPlanner",
    "UnsupportedOperationError",
    "adapter_for",
    "level_suffix",
]
