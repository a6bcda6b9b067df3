"""
Test suite for nearmiss.membership — contains / contains_key / contains_value.
"""

import sys
import os
from dataclasses import dataclass

import pytest

# Add parent to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from nearmiss.config import DiagnosticsConfig
from nearmiss.core import FieldDiff
from nearmiss.membership import (
    ContainResult, MapContainResult,
    contains, contains_key, contains_value,
)


@dataclass
class Employee:
    name: str
    dept: str
    age: int


@dataclass
class Contractor:
    name: str
    dept: str
    age: int


class Account:
    def __init__(self, account_id, owner):
        self._id = account_id
        self.owner = owner


USERS = [
    "user-one", "user_two", "UserThree", "user-3",
    "userThree", "user-003", "user-four", "user_five",
]

FIELDS = {"mail": 1, "e_mail": 2, "emailAddress": 3, "id": 4, "name": 5}


# ═══════════════════════════════════════════════════════════════════
#  §1  MAP KEYS
# ═══════════════════════════════════════════════════════════════════

class TestContainsKey:

    def test_found(self):
        result = contains_key(FIELDS, "mail")
        assert result.found and result.exact
        assert result.total == 5
        assert result.similar == ()
        assert result.context == ()

    def test_similar_keys(self):
        result = contains_key(FIELDS, "email")
        assert not result.found
        assert [s.value for s in result.similar] == ["emailAddress", "mail", "e_mail"]
        assert [s.index for s in result.similar] == [2, 0, 1]
        assert result.context == ("mail", "e_mail", "emailAddress", "id", "name")
        assert result.total == 5

    def test_none_mapping(self):
        result = contains_key(None, "anything")
        assert result == MapContainResult()
        assert result.total == 0

    def test_numeric_keys(self):
        result = contains_key({1: "a", 5: "b", 100: "c"}, 2)
        assert [s.value for s in result.similar] == [1, 5]
        assert [s.details for s in result.similar] == ["differs by 1", "differs by 3"]

    def test_bool_keys_are_not_numbers(self):
        result = contains_key({True: "a", 3: "b"}, 2)
        assert [(s.value, s.index) for s in result.similar] == [(3, 1)]

    def test_context_is_bounded(self):
        mapping = {f"key{i}": i for i in range(8)}
        result = contains_key(mapping, "zzz")
        assert len(result.context) == 5
        assert result.total == 8
        assert result.max_show == 5

    def test_configured_context(self):
        result = contains_key(FIELDS, "zzz", config=DiagnosticsConfig(max_context=2))
        assert result.context == ("mail", "e_mail")
        assert result.max_show == 2

    def test_huge_int_key(self):
        result = contains_key({10**400: "x", 4: "y"}, 5)
        assert [(s.value, s.index) for s in result.similar] == [(4, 1)]

    def test_unrelated_key_type_has_no_suggestions(self):
        result = contains_key(FIELDS, (1, 2))
        assert not result.found
        assert result.similar == ()


# ═══════════════════════════════════════════════════════════════════
#  §2  MAP VALUES
# ═══════════════════════════════════════════════════════════════════

class TestContainsValue:

    def test_string_values(self):
        result = contains_value({"a": "apple", "b": "banana"}, "aple")
        assert [(s.value, s.index) for s in result.similar] == [("apple", 0)]
        assert result.similar[0].details == "1 extra character"

    def test_index_counts_every_value(self):
        result = contains_value({"a": 1, "b": [2], "c": "apple"}, "aple")
        assert [(s.value, s.index) for s in result.similar] == [("apple", 2)]

    def test_found_struct(self):
        staff = {"e1": Employee("Ann", "ops", 30)}
        result = contains_value(staff, Employee("Ann", "ops", 30))
        assert result.found and result.exact
        assert result.close_matches == ()

    def test_struct_close_matches(self):
        staff = {
            "e1": Employee("Ann", "ops", 30),
            "e2": Employee("Bob", "dev", 40),
            "e3": Employee("Ann", "dev", 30),
        }
        result = contains_value(staff, Employee("Ann", "ops", 31))
        assert not result.found
        assert [m.value for m in result.close_matches] == [staff["e1"], staff["e3"]]
        assert result.close_matches[0].differences == (FieldDiff("age", 31, 30),)
        assert [d.path for d in result.close_matches[1].differences] == ["dept", "age"]
        assert result.similar == ()

    def test_other_types_are_not_close_matches(self):
        staff = {
            "c1": Contractor("Ann", "ops", 30),
            "s": "Ann",
            "n": 30,
        }
        result = contains_value(staff, Employee("Ann", "ops", 30))
        assert not result.found
        assert result.close_matches == ()
        assert result.total == 3

    def test_none_mapping(self):
        assert contains_value(None, "x") == MapContainResult()

    def test_exceptions_compared_by_args(self):
        errors = {"k": ValueError("a")}
        assert not contains_value(errors, ValueError("b")).found
        assert contains_value(errors, ValueError("a")).found

    def test_private_state_counts(self):
        accounts = {"a": Account(1, "ann")}
        assert not contains_value(accounts, Account(2, "ann")).found
        assert contains_value(accounts, Account(1, "ann")).found


# ═══════════════════════════════════════════════════════════════════
#  §3  SEQUENCES
# ═══════════════════════════════════════════════════════════════════

class TestContains:

    def test_found(self):
        result = contains(USERS, "user-3")
        assert result == ContainResult(found=True, exact=True, total=8)

    def test_suggestions(self):
        result = contains(USERS, "user3")
        assert [s.value for s in result.similar] == ["user-3", "user-003"]
        assert result.context == tuple(USERS[:5])
        assert result.total == 8

    def test_unhashable_elements(self):
        assert contains([[1, 2], {"a": 1}], {"a": 1}).found

    def test_numbers(self):
        result = contains([3, 7, 12], 8)
        assert [s.value for s in result.similar] == [7, 3, 12]

    @pytest.mark.parametrize("collection", [[], ()])
    def test_empty(self, collection):
        result = contains(collection, "x")
        assert not result.found
        assert result.total == 0
        assert result.similar == ()

    def test_nested_bool_is_not_an_int(self):
        assert not contains([[1], (1, 2)], [True]).found
        assert contains([[1], (1, 2)], [1]).found
