"""
Tests for method name parsing and invocation parameters.
"""

import pytest

from odataproxy.core.invocation import MethodInvocation, RequestKind, parse_method_name
from odataproxy.exceptions import MalformedMethodNameError, UnsupportedMethodError


class TestParseMethodName:
    @pytest.mark.parametrize("name,kind", [
        ("Create", RequestKind.CREATE),
        ("Update", RequestKind.UPDATE),
        ("Delete", RequestKind.DELETE),
    ])
    def test_bare_verbs(self, name, kind):
        parsed = parse_method_name(name)
        assert parsed.kind is kind
        assert parsed.qualifier is None

    def test_action(self):
        parsed = parse_method_name("Action:Discontinue:Product")
        assert parsed.kind is RequestKind.ACTION
        assert parsed.qualifier == "Discontinue"
        assert parsed.target == "Product"

    def test_association_create(self):
        parsed = parse_method_name("Association:Create:Category")
        assert parsed.kind is RequestKind.ASSOCIATION_CREATE
        assert parsed.kind.is_association
        assert parsed.target == "Category"

    def test_association_delete(self):
        assert parse_method_name("Association:Delete:Category").kind is RequestKind.ASSOCIATION_DELETE

    def test_unknown_bare_verb(self):
        with pytest.raises(UnsupportedMethodError):
            parse_method_name("Patch")

    def test_bare_verbs_are_case_sensitive(self):
        with pytest.raises(UnsupportedMethodError):
            parse_method_name("create")

    @pytest.mark.parametrize("name", [
        "Action:Discontinue",
        "Action:a:b:c",
        "Association:Update:Category",
        "Function:Find:Product",
    ])
    def test_malformed_compound_names(self, name):
        with pytest.raises(MalformedMethodNameError):
            parse_method_name(name)


class TestMethodInvocation:
    def test_keys_and_non_keys(self):
        # Qualified names other than Name:Key are neither keys nor ordinary parameters
        invocation = MethodInvocation(
            "Update",
            {"Id:Key": 7, "Name": "apple", "Price": 3, "Category:Id:Key": 1},
        )
        assert invocation.keys() == [("Id", 7)]
        assert invocation.non_keys() == [("Name", "apple"), ("Price", 3)]

    def test_present_parameters_skip_none(self):
        invocation = MethodInvocation("Create", {"Id:Key": 7, "Name": None})
        assert invocation.present_parameters() == [("Id:Key", 7)]

    def test_force_parameter_lifted(self):
        invocation = MethodInvocation.from_parameters("Delete", {"Id:Key": 7, "Force": True})
        assert invocation.force is True
        assert "Force" not in invocation.parameters

    def test_force_flag_kept(self):
        invocation = MethodInvocation.from_parameters("Delete", {"Id:Key": 7}, force=True)
        assert invocation.force is True

    def test_bound_objects_copied(self):
        bound = {"System": {"@odata.id": "/redfish/v1/Systems/1"}}
        invocation = MethodInvocation.from_parameters("Delete", {}, bound_objects=bound)
        bound["Other"] = {}
        assert list(invocation.bound_objects) == ["System"]
