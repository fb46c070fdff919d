"""DynamoDB store gateway."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import ConditionFailedError, ItemNotFoundError, StoreUnavailableError
from .protocol import Item, Key, ScanPage

logger = logging.getLogger(__name__)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


class DynamoDBStore:
    """Store gateway on top of the boto3 DynamoDB resource API.

    Every table is expected to have a single hash key (``id`` by default).
    boto3 errors are translated to the taskboard store errors; nothing is
    retried here beyond what botocore itself does.
    """

    def __init__(
        self,
        resource: Any = None,
        *,
        region: str | None = None,
        endpoint_url: str | None = None,
        key_attribute: str = "id",
    ) -> None:
        """Initialize the gateway.

        Args:
            resource: A boto3 DynamoDB service resource (created if omitted)
            region: AWS region, used when creating the resource
            endpoint_url: Custom endpoint (DynamoDB Local), used when creating the resource
            key_attribute: Name of the hash key attribute of every table
        """
        if resource is None:
            resource = boto3.resource("dynamodb", region_name=region, endpoint_url=endpoint_url)
        self._resource = resource
        self.key_attribute = key_attribute
        self._tables: dict[str, Any] = {}

    def _table(self, name: str) -> Any:
        if name not in self._tables:
            self._tables[name] = self._resource.Table(name)
        return self._tables[name]

    def get(self, table: str, key: Key) -> Item | None:
        try:
            response = self._table(table).get_item(Key=key)
        except (ClientError, BotoCoreError) as e:
            raise _unavailable("get", table, e) from e
        item = response.get("Item")
        return _from_dynamo(item) if item is not None else None

    def put(self, table: str, item: Item) -> None:
        try:
            self._table(table).put_item(Item=_to_dynamo(item))
        except (ClientError, BotoCoreError) as e:
            raise _unavailable("put", table, e) from e

    def update(
        self,
        table: str,
        key: Key,
        fields: Mapping[str, Any],
        *,
        expected: Mapping[str, Any] | None = None,
    ) -> None:
        if not fields:
            return

        names: dict[str, str] = {}
        values: dict[str, Any] = {}
        assignments: list[str] = []
        # "#f"/":f" placeholders; boto3 uses "#n"/":v" for the condition it builds
        for i, (name, value) in enumerate(fields.items()):
            names[f"#f{i}"] = name
            values[f":f{i}"] = _to_dynamo(value)
            assignments.append(f"#f{i} = :f{i}")

        condition = Attr(self.key_attribute).exists()
        for name, value in (expected or {}).items():
            condition = condition & Attr(name).eq(_to_dynamo(value))

        try:
            self._table(table).update_item(
                Key=key,
                UpdateExpression="SET " + ", ".join(assignments),
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ConditionExpression=condition,
                ReturnValuesOnConditionCheckFailure="ALL_OLD",
            )
        except ClientError as e:
            if _error_code(e) == CONDITIONAL_CHECK_FAILED:
                # The old item is only returned when it exists
                if e.response.get("Item"):
                    raise ConditionFailedError(
                        f"Item {key!r} in {table} does not match {dict(expected or {})!r}"
                    ) from e
                raise ItemNotFoundError(f"No item {key!r} in table {table}") from e
            raise _unavailable("update", table, e) from e
        except BotoCoreError as e:
            raise _unavailable("update", table, e) from e

    def delete(self, table: str, key: Key) -> None:
        try:
            self._table(table).delete_item(Key=key)
        except (ClientError, BotoCoreError) as e:
            raise _unavailable("delete", table, e) from e

    def scan(
        self,
        table: str,
        *,
        start_key: Key | None = None,
        attributes: list[str] | None = None,
    ) -> ScanPage:
        kwargs: dict[str, Any] = {}
        if start_key:
            kwargs["ExclusiveStartKey"] = start_key
        if attributes:
            kwargs["ProjectionExpression"] = ", ".join(f"#p{i}" for i in range(len(attributes)))
            kwargs["ExpressionAttributeNames"] = {
                f"#p{i}": name for i, name in enumerate(attributes)
            }

        try:
            response = self._table(table).scan(**kwargs)
        except (ClientError, BotoCoreError) as e:
            raise _unavailable("scan", table, e) from e

        return ScanPage(
            items=[_from_dynamo(item) for item in response.get("Items", [])],
            last_key=response.get("LastEvaluatedKey"),
        )


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


def _unavailable(operation: str, table: str, error: Exception) -> StoreUnavailableError:
    logger.error("DynamoDB %s on %s failed: %s", operation, table, error)
    return StoreUnavailableError(f"DynamoDB {operation} on {table} failed: {error}")


def _to_dynamo(value: Any) -> Any:
    """Convert floats to Decimal, which is the only number type boto3 accepts."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_dynamo(v) for v in value]
    return value


def _from_dynamo(value: Any) -> Any:
    """Convert Decimal back to int or float, recursively."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_from_dynamo(v) for v in value]
    if isinstance(value, set):
        return {_from_dynamo(v) for v in value}
    return value
