"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Tests for the request-kind dispatcher.
"""

import json

import pytest

from odataproxy.core.invocation import MethodInvocation, parse_method_name
from odataproxy.core.query import QueryBuilder
from odataproxy.core.serialization import JSON_CONTENT_TYPE
from odataproxy.exceptions import (
    MalformedMethodNameError,
    MissingMetadataError,
    NavigationError,
    NullKeyValueError,
    UnsupportedMethodError,
)


SYSTEMS_URI = "https://bmc/redfish/v1/Systems"

SYSTEM_METADATA = {
    "EntityTypeName": "ComputerSystem",
    "EntitySetName": "Systems",
    "CreateRequestMethod": "POST",
    "UpdateRequestMethod": "PATCH",
    "Namespace": "ComputerSystem",
    "ActionTargets": "ComputerSystem.Reset=System",
    "NavigationLinkComputerSystemCollection": "Systems|Collection|Members|ComputerSystem|Collection",
}

SYSTEM = {
    "@odata.id": "/redfish/v1/Systems/1",
    "Actions": {
        "#ComputerSystem.Reset": {
            "target": "/redfish/v1/Systems/1/Actions/ComputerSystem.Reset",
        },
    },
}


def single(reads):
    assert len(reads) == 1
    return reads[0]


class TestReads:
    def test_collection_read_base(self, make_dispatcher):
        read = single(make_dispatcher().build_reads(QueryBuilder()))
        assert read.request.verb == "GET"
        assert read.request.uri == "http://h/s.svc/Product?$format=json"
        assert read.single_instance is False

    def test_keyed_read_base(self, make_dispatcher):
        query = QueryBuilder().filter_by_property("Id", [7])
        read = single(make_dispatcher().build_reads(query))
        assert read.request.uri == "http://h/s.svc/Product(Id=7)?$format=json"
        assert read.single_instance is True

    def test_filtered_read_base(self, make_dispatcher):
        query = QueryBuilder().filter_by_property("Filter", ["Price gt 10"])
        read = single(make_dispatcher().build_reads(query))
        assert read.request.uri == "http://h/s.svc/Product?$format=json&$filter=Price gt 10"

    def test_filtered_read_v4(self, make_dispatcher):
        query = QueryBuilder().filter_by_property("Filter", ["Price gt 10"])
        read = single(make_dispatcher("odatav4").build_reads(query))
        assert read.request.uri == "http://h/s.svc/Product?$filter=Price gt 10"

    def test_separate_keys_v4(self, make_dispatcher):
        dispatcher = make_dispatcher("odatav4", UriResourcePathKeyFormat="SeparateKey")
        query = QueryBuilder().filter_by_property("Id", [7]).filter_by_property("Name", ["apple"])
        read = single(dispatcher.build_reads(query))
        assert read.request.uri == "http://h/s.svc/Product/7/apple"

    def test_singleton_v4(self, make_dispatcher):
        dispatcher = make_dispatcher("odatav4", IsSingleton="true")
        assert single(dispatcher.build_reads(QueryBuilder())).single_instance is True

    def test_singleton_flag_ignored_by_base(self, make_dispatcher):
        dispatcher = make_dispatcher("odata", IsSingleton="true")
        assert single(dispatcher.build_reads(QueryBuilder())).single_instance is False

    def test_connection_override(self, make_dispatcher):
        dispatcher = make_dispatcher(connection_uri="https://other/svc")
        read = single(dispatcher.build_reads(QueryBuilder()))
        assert read.request.uri == "https://other/svc/Product?$format=json"

    def test_association_read_base(self, make_dispatcher):
        query = QueryBuilder().filter_by_property("Category:Id:Key", [3])
        read = single(make_dispatcher().build_reads(query))
        assert read.request.uri == "http://h/s.svc/Category(Id=3)/Product?$format=json"
        assert read.single_instance is False

    def test_association_read_v4(self, make_dispatcher):
        query = QueryBuilder().filter_by_property("Category:Id:Key", [3])
        read = single(make_dispatcher("odatav4").build_reads(query))
        assert read.request.uri == "http://h/s.svc/Product(Id=3)/Category"
        assert read.single_instance is False

    def test_reads_carry_no_body(self, make_dispatcher):
        read = single(make_dispatcher().build_reads(QueryBuilder()))
        assert read.request.body is None
        assert read.request.content_type is None

    def test_null_key_rejected(self, make_dispatcher):
        dispatcher = make_dispatcher()
        query = QueryBuilder()
        query.keys.append(("Id", None))
        with pytest.raises(NullKeyValueError):
            dispatcher.build_reads(query)


class TestHeaders:
    def test_base_forwards_caller_headers(self, make_dispatcher):
        dispatcher = make_dispatcher(headers={"X-Client": "tests"})
        read = single(dispatcher.build_reads(QueryBuilder()))
        assert read.request.headers == {"X-Client": "tests"}

    def test_v4_adds_defaults_without_mutating_caller_headers(self, make_dispatcher):
        headers = {"X-Client": "tests"}
        dispatcher = make_dispatcher("odatav4", headers=headers)
        read = single(dispatcher.build_reads(QueryBuilder()))
        assert read.request.headers == {
            "X-Client": "tests",
            "Accept": "application/json",
            "OData-Version": "4.0",
        }
        assert headers == {"X-Client": "tests"}


class TestCrud:
    def test_create(self, make_dispatcher):
        invocation = MethodInvocation("Create", {"Id:Key": 7, "Name": "apple", "Price": None})
        request = make_dispatcher().dispatch(invocation)
        assert request.verb == "POST"
        assert request.uri == "http://h/s.svc/Product"
        assert request.content_type == JSON_CONTENT_TYPE
        assert json.loads(request.body) == {
            "Id": 7,
            "Name": "apple",
            "__metadata": {"type": "ODataDemo.Product"},
        }

    def test_update(self, make_dispatcher):
        invocation = MethodInvocation("Update", {"Id:Key": 7, "Price": 12})
        request = make_dispatcher().dispatch(invocation)
        assert request.verb == "PATCH"
        assert request.uri == "http://h/s.svc/Product(Id=7)?$format=json"
        assert json.loads(request.body) == {"Price": 12, "__metadata": {"type": "ODataDemo.Product"}}

    def test_update_v4_has_no_format(self, make_dispatcher):
        invocation = MethodInvocation("Update", {"Id:Key": 7, "Price": 12})
        request = make_dispatcher("odatav4").dispatch(invocation)
        assert request.uri == "http://h/s.svc/Product(Id=7)"

    def test_delete(self, make_dispatcher):
        request = make_dispatcher().dispatch(MethodInvocation("Delete", {"Id:Key": 7}))
        assert request.verb == "DELETE"
        assert request.uri == "http://h/s.svc/Product(Id=7)?$format=json"
        assert request.body is None
        assert request.content_type is None

    def test_declined_operation_builds_nothing(self, make_dispatcher, host):
        host.process = False
        assert make_dispatcher().dispatch(MethodInvocation("Delete", {"Id:Key": 7})) is None

    def test_declined_continue_unless_forced(self, make_dispatcher, host):
        host.proceed = False
        dispatcher = make_dispatcher()
        assert dispatcher.dispatch(MethodInvocation("Delete", {"Id:Key": 7})) is None
        assert dispatcher.dispatch(MethodInvocation("Delete", {"Id:Key": 7}, force=True)) is not None

    def test_null_key(self, make_dispatcher):
        with pytest.raises(NullKeyValueError):
            make_dispatcher().dispatch(MethodInvocation("Update", {"Id:Key": None}))

    def test_malformed_name(self, make_dispatcher):
        with pytest.raises(MalformedMethodNameError):
            make_dispatcher().dispatch(MethodInvocation("Action:Only"))

    def test_unsupported_name(self, make_dispatcher):
        with pytest.raises(UnsupportedMethodError):
            make_dispatcher().dispatch(MethodInvocation("Merge"))

    def test_missing_verb_metadata(self, make_dispatcher):
        dispatcher = make_dispatcher(private_data={
            "EntityTypeName": "ODataDemo.Product",
            "EntitySetName": "Products",
        })
        with pytest.raises(MissingMetadataError):
            dispatcher.dispatch(MethodInvocation("Create", {"Id:Key": 7}))


class TestActions:
    def test_bound_action_base(self, make_dispatcher):
        invocation = MethodInvocation("Action:Discontinue:Product", {"Id:Key": 7, "Reason": "old"})
        request = make_dispatcher().dispatch(invocation)
        assert request.verb == "POST"
        assert request.uri == "http://h/s.svc/Product(Id=7)/Discontinue?$format=json"
        assert json.loads(request.body) == {"Reason": "old"}

    def test_bound_action_v4(self, make_dispatcher):
        invocation = MethodInvocation("Action:Discontinue:Product", {"Id:Key": 7})
        request = make_dispatcher("odatav4").dispatch(invocation)
        assert request.uri == "http://h/s.svc/Product(Id=7)/Discontinue"

    def test_unbound_action_v4_inlines_parameters(self, make_dispatcher):
        invocation = MethodInvocation(
            "Action:Discontinue:Product", {"Reason": "old", "Days": 3, "Note": None}
        )
        request = make_dispatcher("odatav4").dispatch(invocation)
        assert request.uri == "http://h/s.svc/ProductDiscontinue(Reason=old,Days=3)"

    def test_unbound_action_base_uses_path(self, make_dispatcher):
        invocation = MethodInvocation("Action:Discontinue:Product", {"Reason": "old"})
        request = make_dispatcher().dispatch(invocation)
        assert request.uri == "http://h/s.svc/Product/Discontinue?$format=json"

    def test_action_prompt_names_namespace(self, make_dispatcher, host):
        make_dispatcher().dispatch(MethodInvocation("Action:Discontinue:Product", {"Id:Key": 7}))
        assert "namespace 'ODataDemo'" in host.prompts[0]


class TestAssociations:
    def test_create_link(self, make_dispatcher):
        invocation = MethodInvocation("Association:Create:Category", {"Id:Key": 7, "Id": 3})
        request = make_dispatcher().dispatch(invocation)
        assert request.verb == "POST"
        assert request.uri == "http://h/s.svc/Category(Id=7)/$links/Product"
        assert json.loads(request.body) == {"url": "http://h/s.svc/Product(Id=3)"}

    def test_delete_link(self, make_dispatcher):
        invocation = MethodInvocation("Association:Delete:Category", {"Id:Key": 7, "Id": 3})
        request = make_dispatcher().dispatch(invocation)
        assert request.verb == "DELETE"
        assert request.uri == "http://h/s.svc/Category(Id=7)/$links/Product(Id=3)"
        assert request.body is None

    def test_declined_link(self, make_dispatcher, host):
        host.process = False
        invocation = MethodInvocation("Association:Create:Category", {"Id:Key": 7, "Id": 3})
        assert make_dispatcher().dispatch(invocation) is None


class TestResponseEntityType:
    def test_defaults_to_entity_type(self, make_dispatcher):
        assert make_dispatcher().response_entity_type() == "ODataDemo.Product"

    def test_v4_action_result_type(self, make_dispatcher):
        dispatcher = make_dispatcher("odatav4", private_data={"Namespace": "ODataDemo"})
        name = parse_method_name("Action:Discontinue:ODataDemo.Receipt")
        assert dispatcher.response_entity_type(name) == "ODataDemo.Receipt"

    def test_v4_declared_type_wins(self, make_dispatcher):
        name = parse_method_name("Action:Discontinue:ODataDemo.Receipt")
        assert make_dispatcher("odatav4").response_entity_type(name) == "ODataDemo.Product"

    def test_base_requires_entity_type(self, make_dispatcher):
        dispatcher = make_dispatcher(private_data={"Namespace": "ODataDemo"})
        name = parse_method_name("Action:Discontinue:ODataDemo.Receipt")
        with pytest.raises(MissingMetadataError):
            dispatcher.response_entity_type(name)


class TestRedfish:
    @pytest.fixture
    def redfish(self, make_dispatcher):
        return make_dispatcher("redfish", resource_uri=SYSTEMS_URI, private_data=SYSTEM_METADATA)

    def test_collection_read(self, redfish):
        read = single(redfish.build_reads(QueryBuilder()))
        assert read.request.uri == SYSTEMS_URI
        assert read.request.headers["OData-Version"] == "4.0"
        assert read.single_instance is False

    def test_connection_override_replaces_endpoint(self, make_dispatcher):
        dispatcher = make_dispatcher(
            "redfish",
            resource_uri=SYSTEMS_URI,
            private_data=SYSTEM_METADATA,
            connection_uri="https://bmc2/redfish/v1/Systems",
        )
        read = single(dispatcher.build_reads(QueryBuilder()))
        assert read.request.uri == "https://bmc2/redfish/v1/Systems"

    def test_navigation_reads_one_request_per_member(self, redfish):
        parent = {"Members": [
            {"@odata.id": "/redfish/v1/Systems/1"},
            {"@odata.id": "/redfish/v1/Systems/2"},
        ]}
        query = QueryBuilder().filter_by_property("Select", ["Name"])
        reads = redfish.build_reads(
            query, "ComputerSystemCollection", {"ComputerSystemCollection": parent}
        )
        assert [r.request.uri for r in reads] == [
            "https://bmc/redfish/v1/Systems/1?$select=Name",
            "https://bmc/redfish/v1/Systems/2?$select=Name",
        ]
        assert all(r.single_instance for r in reads)

    def test_navigation_over_several_parents(self, redfish):
        parents = [
            {"Members": [{"@odata.id": "/redfish/v1/Systems/1"}]},
            {"Members": [{"@odata.id": "/redfish/v1/Systems/2"}]},
        ]
        reads = redfish.build_reads(
            QueryBuilder(), "ComputerSystemCollection", {"ComputerSystemCollection": parents}
        )
        assert len(reads) == 2

    def test_navigation_without_parent_objects(self, redfish):
        with pytest.raises(NavigationError):
            redfish.build_reads(QueryBuilder(), "ComputerSystemCollection", {})

    def test_unknown_parent_type_reads_endpoint(self, redfish):
        read = single(redfish.build_reads(QueryBuilder(), "Chassis", {}))
        assert read.request.uri == SYSTEMS_URI

    def test_association_read_follows_value(self, redfish):
        query = QueryBuilder().filter_by_property("Chassis:Id:Key", [1])
        bound = {"Value": {"@odata.id": "/redfish/v1/Chassis/1/Systems"}}
        read = single(redfish.build_reads(query, bound_objects=bound))
        assert read.request.uri == "https://bmc/redfish/v1/Chassis/1/Systems"
        assert read.single_instance is False

    def test_update_by_odata_id(self, redfish):
        invocation = MethodInvocation("Update", {"OdataId": "/redfish/v1/Systems/1", "AssetTag": "rack-4"})
        request = redfish.dispatch(invocation)
        assert request.verb == "PATCH"
        assert request.uri == "https://bmc/redfish/v1/Systems/1"
        assert json.loads(request.body) == {"AssetTag": "rack-4"}

    def test_create_by_odata_id(self, redfish):
        invocation = MethodInvocation("Create", {"OdataId": "/redfish/v1/Systems", "Name": "new"})
        request = redfish.dispatch(invocation)
        assert request.verb == "POST"
        assert json.loads(request.body) == {"Name": "new"}

    def test_delete_by_resource_object(self, redfish):
        invocation = MethodInvocation("Delete", bound_objects={"Resource": SYSTEM})
        request = redfish.dispatch(invocation)
        assert request.verb == "DELETE"
        assert request.uri == "https://bmc/redfish/v1/Systems/1"
        assert request.body is None

    def test_action_by_target(self, redfish):
        invocation = MethodInvocation(
            "Action:ComputerSystem.Reset:ComputerSystem",
            {"System": SYSTEM, "ResetType": "ForceRestart"},
        )
        request = redfish.dispatch(invocation)
        assert request.verb == "POST"
        assert request.uri == "https://bmc/redfish/v1/Systems/1/Actions/ComputerSystem.Reset"
        assert json.loads(request.body) == {"ResetType": "ForceRestart"}

    def test_missing_target(self, redfish):
        with pytest.raises(NavigationError):
            redfish.dispatch(MethodInvocation("Update", {"AssetTag": "x"}))

    def test_associations_unsupported(self, redfish):
        with pytest.raises(UnsupportedMethodError):
            redfish.dispatch(MethodInvocation("Association:Create:Chassis", {"Id:Key": 1}))

    def test_declined(self, redfish, host):
        host.process = False
        invocation = MethodInvocation("Update", {"OdataId": "/redfish/v1/Systems/1"})
        assert redfish.dispatch(invocation) is None
