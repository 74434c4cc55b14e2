"""
Module: conftest.py
Description: Shared pytest fixtures for Q&A API tests.

Provides storage backends for tests: an empty LocalStore, a LocalStore
seeded from the packaged fixture, and a DynamoDBStore running against
moto's in-memory DynamoDB. The `store` fixture is parametrized over both
backends so behavioural tests run against each of them.
"""

import itertools

import boto3
import pytest
from moto import mock_aws
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from qanda.storage.dynamodb import DynamoDBStore
from qanda.storage.local import LocalStore
from scripts.create_tables import create_tables

FIXED_TIME = 1_700_000_000


class TestSettings(BaseSettings):
    """Test settings that don't require environment variables."""

    __test__ = False

    model_config = SettingsConfigDict(
        env_file=None,
        case_sensitive=False,
        extra="ignore"
    )

    app_version: str = Field(default="0.1.0-test")
    stage: str = Field(default="test")
    aws_region: str = Field(default="us-east-1")
    events_table_name: str = Field(default="test-events")
    questions_table_name: str = Field(default="test-questions")


@pytest.fixture
def test_settings():
    """
    Provide test configuration settings.

    Disables environment variable loading for predictable tests.
    """
    return TestSettings()


@pytest.fixture
def clock():
    """A clock that ticks one second per call, starting at FIXED_TIME."""
    ticks = itertools.count(FIXED_TIME)
    return lambda: float(next(ticks))


@pytest.fixture
def aws_credentials(monkeypatch, test_settings):
    """Fake credentials so boto3 never reaches for real ones."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", test_settings.aws_region)


@pytest.fixture
def dynamodb_tables(aws_credentials, test_settings):
    """
    Create mock events and questions tables.

    Uses moto to mock AWS DynamoDB; the mock stays active until the test
    using this fixture finishes.
    """
    with mock_aws():
        create_tables(
            test_settings.events_table_name,
            test_settings.questions_table_name,
            region_name=test_settings.aws_region
        )
        dynamodb = boto3.resource('dynamodb', region_name=test_settings.aws_region)
        yield (
            dynamodb.Table(test_settings.events_table_name),
            dynamodb.Table(test_settings.questions_table_name),
        )


@pytest.fixture
def dynamo_store(dynamodb_tables, test_settings, clock):
    """Provide a DynamoDBStore bound to the mock tables."""
    return DynamoDBStore(
        events_table_name=test_settings.events_table_name,
        questions_table_name=test_settings.questions_table_name,
        region_name=test_settings.aws_region,
        clock=clock
    )


@pytest.fixture
def local_store(clock):
    """Provide an empty LocalStore."""
    return LocalStore(clock=clock)


@pytest.fixture
def seeded_store():
    """Provide a LocalStore seeded from the packaged fixture."""
    return LocalStore.from_fixture()


@pytest.fixture(params=["local", "dynamodb"])
def store(request):
    """Provide each storage backend in turn."""
    if request.param == "local":
        return request.getfixturevalue("local_store")
    return request.getfixturevalue("dynamo_store")
