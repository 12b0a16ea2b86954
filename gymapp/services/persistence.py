"""Session commit helpers shared by the domain services."""

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from gymapp import db
from gymapp.errors import ConflictError, DependencyError


def commit(action: str, conflict_message: str = None):
    """
    Commit the current session.

    IntegrityError becomes ConflictError when conflict_message is given;
    any other datastore failure is rolled back and raised as DependencyError.
    Nothing is retried.
    """
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if conflict_message:
            raise ConflictError(conflict_message)
        current_app.logger.error(f"Integrity error during {action}: {e}")
        raise DependencyError(f"Datastore rejected {action}")
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Datastore error during {action}: {e}")
        raise DependencyError(f"Datastore unavailable during {action}")


def run(action: str, statement):
    """Execute a statement, mapping datastore failures to DependencyError."""
    try:
        return db.session.execute(statement)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Datastore error during {action}: {e}")
        raise DependencyError(f"Datastore unavailable during {action}")
