from .model import Job, Step, Workflow, WorkflowOn
from .variants import Matrix, Secrets, StringOrInt
from .jobs import new_job, JobInput, CommitChangesInput
from .river import build, River
from .service import Service, DestinationGroup, Destination

__all__ = [
    "Job", "Step", "Workflow", "WorkflowOn",
    "Matrix", "Secrets", "StringOrInt",
    "new_job", "JobInput", "CommitChangesInput",
    "build", "River",
    "Service", "DestinationGroup", "Destination",
]
