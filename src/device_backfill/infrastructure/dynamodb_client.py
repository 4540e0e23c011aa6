"""DynamoDB client wrapper for AWS operations."""

import logging
from typing import Any

from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


class ItemNotFoundError(Exception):
    """Raised when a conditional update targets an item that does not exist."""


class DynamoDBClient:
    """Handles DynamoDB operations."""

    def __init__(self, client: Any):
        """
        Initialize DynamoDB client wrapper.

        Args:
            client: boto3 DynamoDB client instance.
        """
        self._client = client

    def update_item(
        self,
        table_name: str,
        key: dict[str, str],
        updates: dict[str, str],
        require_existing: bool = True,
    ) -> None:
        """
        Set string attributes on a single item.

        Args:
            table_name: DynamoDB table name.
            key: Primary key attributes (pk/sk).
            updates: Attribute name -> new string value.
            require_existing: Only update an item that already exists.

        Raises:
            ItemNotFoundError: If require_existing is set and the item is missing.
            ClientError: On any other store error.
        """
        names = {}
        values = {}
        assignments = []
        for i, (attribute, value) in enumerate(updates.items()):
            names[f"#a{i}"] = attribute
            values[f":v{i}"] = {"S": value}
            assignments.append(f"#a{i} = :v{i}")

        params: dict[str, Any] = {
            "TableName": table_name,
            "Key": {name: {"S": value} for name, value in key.items()},
            "UpdateExpression": "SET " + ", ".join(assignments),
            "ExpressionAttributeNames": names,
            "ExpressionAttributeValues": values,
        }
        if require_existing:
            partition_attribute = next(iter(key))
            names["#pk"] = partition_attribute
            params["ConditionExpression"] = "attribute_exists(#pk)"

        try:
            self._client.update_item(**params)
        except ClientError as e:
            if e.response["Error"]["Code"] == CONDITIONAL_CHECK_FAILED:
                raise ItemNotFoundError(f"No item in {table_name} for key {key}") from e
            raise

    def count_items(
        self,
        table_name: str,
        filter_expression: str,
        names: dict[str, str],
        values: dict[str, str],
    ) -> int:
        """
        Count items matching a filter with a paginated scan.

        Args:
            table_name: DynamoDB table name.
            filter_expression: Scan FilterExpression.
            names: ExpressionAttributeNames.
            values: Placeholder -> string value for ExpressionAttributeValues.

        Returns:
            Total number of matching items across all pages.
        """
        paginator = self._client.get_paginator("scan")

        total = 0
        for page in paginator.paginate(
            TableName=table_name,
            FilterExpression=filter_expression,
            ExpressionAttributeNames=names,
            ExpressionAttributeValues={
                placeholder: {"S": value} for placeholder, value in values.items()
            },
            Select="COUNT",
        ):
            total += page.get("Count", 0)

        logger.info("Counted %d matching item(s) in %s", total, table_name)
        return total
