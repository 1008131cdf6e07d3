"""Team permission table.

Every team operation is described by an action, the acting member's role and
the role of the row being acted upon. The table below is the single source of
truth for who may do what; services only look it up.
"""

from enum import Enum

from src.saas.core.exceptions import PermissionDenied
from src.saas.models.enums import TeamRole


class TeamAction(str, Enum):
    VIEW_TEAM = "view_team"
    UPDATE_TEAM = "update_team"
    DELETE_TEAM = "delete_team"
    ADD_MEMBER = "add_member"
    UPDATE_MEMBER = "update_member"
    REMOVE_MEMBER = "remove_member"
    LEAVE_TEAM = "leave_team"


ANY_ROLE = frozenset(TeamRole)
NON_OWNER = frozenset({TeamRole.ADMIN, TeamRole.MEMBER, TeamRole.VIEWER})
MEMBER_OR_VIEWER = frozenset({TeamRole.MEMBER, TeamRole.VIEWER})

# action -> actor role -> target roles the actor may act on.
# For team-level actions the target role is irrelevant (ANY_ROLE).
# A missing actor role means the action is refused.
PERMISSIONS: dict[TeamAction, dict[TeamRole, frozenset[TeamRole]]] = {
    TeamAction.VIEW_TEAM: {role: ANY_ROLE for role in TeamRole},
    TeamAction.UPDATE_TEAM: {TeamRole.OWNER: ANY_ROLE, TeamRole.ADMIN: ANY_ROLE},
    TeamAction.DELETE_TEAM: {TeamRole.OWNER: ANY_ROLE},
    # target = role being granted
    TeamAction.ADD_MEMBER: {TeamRole.OWNER: ANY_ROLE, TeamRole.ADMIN: NON_OWNER},
    # target = current role and requested role, both must pass
    TeamAction.UPDATE_MEMBER: {TeamRole.OWNER: ANY_ROLE, TeamRole.ADMIN: MEMBER_OR_VIEWER},
    TeamAction.REMOVE_MEMBER: {TeamRole.OWNER: ANY_ROLE, TeamRole.ADMIN: MEMBER_OR_VIEWER},
    # removing your own membership; the last-owner rule still applies
    TeamAction.LEAVE_TEAM: {role: ANY_ROLE for role in TeamRole},
}

_DENIED_MESSAGES = {
    TeamAction.VIEW_TEAM: "You are not a member of this team",
    TeamAction.UPDATE_TEAM: "Only team owners and admins can update the team",
    TeamAction.DELETE_TEAM: "Only team owners can delete the team",
    TeamAction.ADD_MEMBER: "You do not have permission to add this member",
    TeamAction.UPDATE_MEMBER: "You do not have permission to change this member's role",
    TeamAction.REMOVE_MEMBER: "You do not have permission to remove this member",
    TeamAction.LEAVE_TEAM: "You cannot leave this team",
}


def is_allowed(
    action: TeamAction,
    actor_role: TeamRole | None,
    target_role: TeamRole | None = None,
) -> bool:
    """Look up (action, actor_role, target_role) in the permission table.

    ``actor_role`` None means the actor is not a member: always refused.
    """
    if actor_role is None:
        return False
    allowed_targets = PERMISSIONS[action].get(actor_role)
    if allowed_targets is None:
        return False
    if target_role is None:
        return True
    return target_role in allowed_targets


def require(
    action: TeamAction,
    actor_role: TeamRole | None,
    *target_roles: TeamRole,
) -> None:
    """Raise PermissionDenied unless every target role is allowed."""
    targets = target_roles or (None,)
    if not all(is_allowed(action, actor_role, target) for target in targets):
        raise PermissionDenied(_DENIED_MESSAGES[action])
