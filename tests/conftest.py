"""
Pytest configuration and shared fixtures for ODataProxy tests.
"""

import tempfile
from pathlib import Path
from typing import Dict, Generator

import pytest

from odataproxy.core.confirmation import ConfirmationGate
from odataproxy.core.dispatcher import RequestDispatcher
from odataproxy.core.metadata import EntityMetadata
from odataproxy.core.policy import get_policy
from odataproxy.sdk.host import CollectingHost


PRODUCT_URI = "http://h/s.svc/Product"
SYSTEMS_URI = "https://bmc/redfish/v1/Systems"


def create_test_config_content(temp_dir: Path, **overrides) -> str:
    """
    Generate test configuration YAML content with two entities.

    Args:
        temp_dir: Temporary directory for the log file.
        **overrides: ``connection_uri`` or ``protocol`` replacements.

    Returns:
        YAML configuration content as string.
    """
    connection_uri = overrides.get("connection_uri", "")
    protocol = overrides.get("protocol", "odata")
    return f"""
connection:
  connection_uri: "{connection_uri}"
  allow_unsecure_connection: true
  headers:
    X-Client: tests

logging:
  level: INFO
  file: {temp_dir}/odataproxy.log
  format: console

entities:
  Product:
    resource_uri: {PRODUCT_URI}
    protocol: {protocol}
    private_data:
      EntityTypeName: ODataDemo.Product
      EntitySetName: Products
      CreateRequestMethod: POST
      UpdateRequestMethod: PATCH
      Namespace: ODataDemo
  System:
    resource_uri: {SYSTEMS_URI}
    protocol: redfish
    private_data:
      EntityTypeName: ComputerSystem
      EntitySetName: Systems
      CreateRequestMethod: POST
      UpdateRequestMethod: PATCH
      Namespace: ComputerSystem
      ActionTargets: Reset=System
"""


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_path(temp_dir: Path) -> Path:
    """
    Create a sample configuration file for testing.

    Returns:
        Path to sample config file.
    """
    config_path = temp_dir / "config.yaml"
    config_path.write_text(create_test_config_content(temp_dir))
    return config_path


@pytest.fixture
def product_private_data() -> Dict[str, str]:
    """Metadata table of the OData demo Product entity."""
    return {
        "EntityTypeName": "ODataDemo.Product",
        "EntitySetName": "Products",
        "CreateRequestMethod": "POST",
        "UpdateRequestMethod": "PATCH",
        "Namespace": "ODataDemo",
    }


@pytest.fixture
def host() -> CollectingHost:
    return CollectingHost()


@pytest.fixture
def make_dispatcher(product_private_data, host):
    """
    Factory fixture building a dispatcher for one protocol.

    Usage:
        def test_something(make_dispatcher):
            dispatcher = make_dispatcher("odatav4", UriResourcePathKeyFormat="SeparateKey")
    """
    def _make(protocol: str = "odata", resource_uri: str = PRODUCT_URI,
              connection_uri=None, headers=None, private_data=None, **metadata_overrides):
        data = dict(product_private_data if private_data is None else private_data)
        data.update(metadata_overrides)
        metadata = EntityMetadata(data, command="Product")
        return RequestDispatcher(
            policy=get_policy(protocol),
            metadata=metadata,
            resource_uri=resource_uri,
            gate=ConfirmationGate(host, metadata, "Product"),
            connection_uri=connection_uri,
            headers=headers,
        )
    return _make
