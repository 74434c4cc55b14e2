#!/usr/bin/env python3
"""
Script: create_tables.py
Description: Provision the DynamoDB tables used by the Q&A API.

Creates the events and questions tables (string partition key "id",
on-demand billing) if they do not exist yet. Table names come from
settings (EVENTS_TABLE_NAME / QUESTIONS_TABLE_NAME) unless overridden.

Usage:
    python scripts/create_tables.py
    python scripts/create_tables.py --endpoint-url http://localhost:8001
"""

import argparse
import sys
from typing import Optional

import boto3
from botocore.exceptions import ClientError

from qanda.config.settings import settings
from qanda.utils.logger import get_logger

logger = get_logger(__name__)


def create_table(dynamodb, table_name: str) -> bool:
    """
    Create one table keyed by "id".

    Args:
        dynamodb: boto3 DynamoDB resource
        table_name: Table to create

    Returns:
        True if the table was created, False if it already existed
    """
    try:
        table = dynamodb.create_table(
            TableName=table_name,
            KeySchema=[{'AttributeName': 'id', 'KeyType': 'HASH'}],
            AttributeDefinitions=[{'AttributeName': 'id', 'AttributeType': 'S'}],
            BillingMode='PAY_PER_REQUEST'
        )
        table.wait_until_exists()
    except ClientError as e:
        if e.response['Error']['Code'] == 'ResourceInUseException':
            logger.info("Table already exists", table_name=table_name)
            return False
        raise

    logger.info("Table created", table_name=table_name)
    return True


def create_tables(
    events_table_name: str,
    questions_table_name: str,
    region_name: Optional[str] = None,
    endpoint_url: Optional[str] = None
) -> None:
    """Create both tables, skipping any that already exist."""
    dynamodb = boto3.resource('dynamodb', region_name=region_name, endpoint_url=endpoint_url)
    for table_name in (events_table_name, questions_table_name):
        create_table(dynamodb, table_name)


def main():
    parser = argparse.ArgumentParser(description="Create the Q&A DynamoDB tables")
    parser.add_argument("--events-table", default=settings.events_table_name)
    parser.add_argument("--questions-table", default=settings.questions_table_name)
    parser.add_argument("--region", default=settings.aws_region)
    parser.add_argument("--endpoint-url", default=settings.dynamodb_endpoint_url)
    args = parser.parse_args()

    try:
        create_tables(args.events_table, args.questions_table, args.region, args.endpoint_url)
    except ClientError as e:
        print(f"ERROR: {e.response['Error']['Message']}", file=sys.stderr)
        sys.exit(1)

    print(f"Tables ready: {args.events_table}, {args.questions_table}")


if __name__ == "__main__":
    main()
