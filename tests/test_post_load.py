from unittest.mock import MagicMock

import pytest

from movr_datagen.python_libs.common.exceptions import PostLoadConstraintError
from movr_datagen.python_libs.common.movr_schema import FOREIGN_KEY_STATEMENTS
from movr_datagen.python_libs.python.post_load import (
    apply_foreign_keys,
    is_duplicate_constraint_error,
)


class DriverError(Exception):
    pass


def _connection(side_effect=None):
    cursor = MagicMock()
    cursor.execute.side_effect = side_effect
    connection = MagicMock()
    connection.cursor.return_value = cursor
    return connection, cursor


def test_five_foreign_keys():
    assert len(FOREIGN_KEY_STATEMENTS) == 5
    assert all(s.startswith("ALTER TABLE") for s in FOREIGN_KEY_STATEMENTS)


def test_applies_all_statements():
    connection, cursor = _connection()
    applied = apply_foreign_keys(connection)

    assert applied == list(FOREIGN_KEY_STATEMENTS)
    assert [c.args[0] for c in cursor.execute.call_args_list] == list(FOREIGN_KEY_STATEMENTS)
    connection.commit.assert_called_once()
    cursor.close.assert_called_once()


def test_duplicate_constraint_skipped():
    duplicate = DriverError(
        "pq: columns cannot be used by multiple foreign key constraints"
    )
    connection, cursor = _connection([None, duplicate, None, None, None])

    applied = apply_foreign_keys(connection)

    assert len(applied) == 4
    assert FOREIGN_KEY_STATEMENTS[1] not in applied
    connection.commit.assert_called_once()


def test_other_failure_raises_with_statement():
    failure = DriverError("relation \"rides\" does not exist")
    connection, cursor = _connection([None, None, failure])

    with pytest.raises(PostLoadConstraintError) as exc_info:
        apply_foreign_keys(connection)

    assert exc_info.value.message == 'relation "rides" does not exist'
    assert exc_info.value.statement == FOREIGN_KEY_STATEMENTS[2]
    assert exc_info.value.__cause__ is failure
    connection.commit.assert_not_called()
    cursor.close.assert_called_once()


def test_custom_statements():
    connection, cursor = _connection()
    assert apply_foreign_keys(connection, ["SELECT 1"]) == ["SELECT 1"]


@pytest.mark.parametrize(
    "message, expected",
    [
        ("columns cannot be used by multiple foreign key constraints", True),
        ('constraint "fk_city_ref_users" already exists', True),
        ("Already Exists", True),
        ("permission denied", False),
    ],
)
def test_is_duplicate_constraint_error(message, expected):
    assert is_duplicate_constraint_error(DriverError(message)) is expected
