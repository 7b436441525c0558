"""
Post-load foreign key constraints.

After the MovR tables have been bulk loaded, the foreign keys between them are
added with ``ALTER TABLE`` statements. Re-running the hook against a database that
already has the constraints is a no-op; any other failure aborts the load.
"""

import logging
from typing import Any, Iterable, List, Optional

from movr_datagen.python_libs.common.exceptions import PostLoadConstraintError
from movr_datagen.python_libs.common.movr_schema import FOREIGN_KEY_STATEMENTS

logger = logging.getLogger(__name__)

DUPLICATE_CONSTRAINT_MESSAGES = (
    "columns cannot be used by multiple foreign key constraints",
    "already exists",
)


def is_duplicate_constraint_error(error: BaseException) -> bool:
    message = str(error).lower()
    return any(pattern in message for pattern in DUPLICATE_CONSTRAINT_MESSAGES)


def apply_foreign_keys(
    connection: Any, statements: Optional[Iterable[str]] = None
) -> List[str]:
    """Execute the foreign key statements on a DB-API 2.0 connection.

    Returns the statements that were applied; statements skipped because the
    constraint already exists are left out.

    Raises:
        PostLoadConstraintError: a statement failed for any other reason. The
            message is the driver's error message, unchanged.
    """
    applied = []
    cursor = connection.cursor()
    try:
        for statement in statements if statements is not None else FOREIGN_KEY_STATEMENTS:
            try:
                cursor.execute(statement)
            except Exception as e:
                if is_duplicate_constraint_error(e):
                    logger.info(f"Foreign key already present, skipping: {statement}")
                    continue
                logger.error(f"Failed to add foreign key: {statement}: {e}")
                raise PostLoadConstraintError(str(e), statement=statement) from e
            logger.debug(f"Applied: {statement}")
            applied.append(statement)
        connection.commit()
    finally:
        cursor.close()

    logger.info(f"Applied {len(applied)} foreign key constraint(s)")
    return applied
