"""Feature modules for contract naming.

- batching: Turning naming requests into dependency-ordered batches
- ownership: Probing target contracts on each network
- planning: Building the ordered steps of a run
- execution: Running steps and reporting the outcome
"""

from contract_naming.features import batching
from contract_naming.features import ownership
from contract_naming.features import planning
from contract_naming.features import execution

__all__ = ["batching", "ownership", "planning", "execution"]
