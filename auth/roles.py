# auth/roles.py
"""
User roles and the one capability check the dashboard enforces.
"""
from enum import Enum


class Role(str, Enum):
    SCIENTIST = 'scientist'
    POLICY_MAKER = 'policy-maker'
    RESEARCHER = 'researcher'


ROLE_DESCRIPTIONS = {
    Role.SCIENTIST: 'Enter samples, manage projects and respond to alerts.',
    Role.POLICY_MAKER: 'Review reports and act on alerts.',
    Role.RESEARCHER: 'Read-only access to projects, samples, alerts and reports.',
}


def parse_role(value):
    """Returns the Role for a stored string, or None if it is not one of ours."""
    try:
        return Role(value)
    except ValueError:
        return None


def can_mutate(role):
    """Every known role except researcher may create data and change alert status."""
    role = parse_role(role) if not isinstance(role, Role) else role
    return role is not None and role is not Role.RESEARCHER
