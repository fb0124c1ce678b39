from collections import namedtuple

from confreg.services.errors import PermissionDeniedError, TransitionNotAllowed

ANY_STATUS = '*'

# from_statuses: tuple of source statuses (or ANY_STATUS)
# owner: the owning user may perform it regardless of role
Transition = namedtuple(
    'Transition', ['from_statuses', 'to_status', 'roles', 'action', 'owner'])


def transition(from_statuses, to_status, roles=(), action=None, owner=False):
    if isinstance(from_statuses, str):
        from_statuses = (from_statuses,)
    return Transition(tuple(from_statuses), to_status, frozenset(roles), action, owner)


class TransitionTable:
    """Role-gated status transitions for one entity type.

    Permission is checked before legality: a caller without rights for the
    target status gets PermissionDeniedError even when the source status
    would not allow the move anyway.
    """

    def __init__(self, entity, rows):
        self.entity = entity
        self.rows = list(rows)

    def _matches_from(self, row, from_status):
        return ANY_STATUS in row.from_statuses or from_status in row.from_statuses

    @staticmethod
    def _permitted(row, role, owner):
        return role in row.roles or (owner and row.owner)

    def targets(self):
        return {row.to_status for row in self.rows}

    def allowed_targets(self, from_status, role, owner=False):
        return sorted({
            row.to_status for row in self.rows
            if self._matches_from(row, from_status) and self._permitted(row, role, owner)
        })

    def check(self, from_status, to_status, role, owner=False):
        """Validate ``from_status -> to_status`` for ``role``; returns the row."""
        candidates = [row for row in self.rows if row.to_status == to_status]
        if not candidates:
            raise TransitionNotAllowed(
                f'{self.entity} cannot be moved to status {to_status}')

        if not any(self._permitted(row, role, owner) for row in candidates):
            raise PermissionDeniedError(
                f'Role {role} cannot set {self.entity} status to {to_status}')

        for row in candidates:
            if self._matches_from(row, from_status) and self._permitted(row, role, owner):
                return row

        if any(self._matches_from(row, from_status) for row in candidates):
            raise PermissionDeniedError(
                f'Role {role} cannot move {self.entity} from {from_status} to {to_status}')
        raise TransitionNotAllowed(
            f'{self.entity} cannot move from {from_status} to {to_status}')

    def check_action(self, action, from_status, role, owner=False):
        """Validate a named action; returns the target status."""
        rows = [row for row in self.rows if row.action == action]
        if not rows:
            raise ValueError(f'Unknown {self.entity} action: {action}')

        if not any(self._permitted(row, role, owner) for row in rows):
            raise PermissionDeniedError(
                f'Role {role} cannot perform {action} on {self.entity}')

        for row in rows:
            if self._matches_from(row, from_status) and self._permitted(row, role, owner):
                return row.to_status

        raise TransitionNotAllowed(
            f'Cannot {action} a {self.entity} in status {from_status}')
