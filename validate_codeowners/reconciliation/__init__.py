from validate_codeowners.reconciliation.interface import GroupMemberSource, MemberRelation, UserMemberSource
from validate_codeowners.reconciliation.reconciler import reconcile, subtract

__all__ = [
    "GroupMemberSource",
    "MemberRelation",
    "UserMemberSource",
    "reconcile",
    "subtract",
]
