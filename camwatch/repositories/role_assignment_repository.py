"""Repository for RoleAssignment model operations."""

from sqlalchemy.orm import Session
from camwatch.models.role_assignment import RoleAssignment


class RoleAssignmentRepository:
    """Repository for RoleAssignment model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_principal(self, principal_id: int) -> list[RoleAssignment]:
        """
        Get all assignments for a principal, oldest first.

        Args:
            principal_id: Principal ID

        Returns:
            List of RoleAssignment objects (empty if the principal has no role)
        """
        return (
            self.db.query(RoleAssignment)
            .filter(RoleAssignment.user_id == principal_id)
            .order_by(RoleAssignment.id)
            .all()
        )

    def add(self, assignment: RoleAssignment) -> RoleAssignment:
        """
        Stage an assignment without committing (for atomic provisioning).

        Raises:
            ValidationException: If the role/tenant pairing is invalid
        """
        assignment.validate_scope()
        self.db.add(assignment)
        self.db.flush()
        return assignment

