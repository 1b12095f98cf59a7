"""DynamoDB-backed transient store."""
import json
import logging
import math
import time
from typing import Any, Callable, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from route_creator.core.config import Settings, settings
from route_creator.db.transient import TransientStore

logger = logging.getLogger(__name__)


class DynamoDBClient:
    """DynamoDB client wrapper."""

    def __init__(self, config: Optional[Settings] = None):
        config = config or settings
        boto_config = Config(
            retries={"max_attempts": 3, "mode": "standard"},
            connect_timeout=config.dynamodb_timeout,
            read_timeout=config.dynamodb_timeout,
        )

        client_kwargs = {
            "service_name": "dynamodb",
            "region_name": config.aws_region,
            "config": boto_config,
        }

        if config.dynamodb_endpoint_url:
            client_kwargs["endpoint_url"] = config.dynamodb_endpoint_url

        if config.aws_access_key_id and config.aws_secret_access_key:
            client_kwargs["aws_access_key_id"] = config.aws_access_key_id
            client_kwargs["aws_secret_access_key"] = config.aws_secret_access_key

        self.client = boto3.client(**client_kwargs)


class DynamoDBTransientStore(TransientStore):
    """Store entries as items with a TTL attribute.

    DynamoDB deletes expired items lazily, so ``get`` also checks
    ``expires_at`` itself.
    """

    KEY_ATTRIBUTE = "cache_key"
    TTL_ATTRIBUTE = "expires_at"

    def __init__(
        self,
        dynamodb_client: DynamoDBClient,
        table_name: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.client = dynamodb_client.client
        self.table_name = table_name or settings.dynamodb_transient_table
        self._clock = clock

    def _key(self, key: str) -> Dict[str, Dict[str, str]]:
        return {self.KEY_ATTRIBUTE: {"S": key}}

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            response = self.client.get_item(
                TableName=self.table_name,
                Key=self._key(key),
                ConsistentRead=True,
            )
        except ClientError as e:
            logger.error("Failed to read %s from %s: %s", key, self.table_name, e)
            raise

        item = response.get("Item")
        if not item:
            return None

        expires_at = int(item.get(self.TTL_ATTRIBUTE, {}).get("N", "0"))
        if expires_at <= self._clock():
            return None

        return json.loads(item["value"]["S"])

    def set(self, key: str, value: Dict[str, Any], ttl: int) -> None:
        expires_at = math.ceil(self._clock() + ttl)
        try:
            self.client.put_item(
                TableName=self.table_name,
                Item={
                    **self._key(key),
                    "value": {"S": json.dumps(value)},
                    self.TTL_ATTRIBUTE: {"N": str(expires_at)},
                },
            )
        except ClientError as e:
            logger.error("Failed to write %s to %s: %s", key, self.table_name, e)
            raise

    def delete(self, key: str) -> None:
        self.client.delete_item(TableName=self.table_name, Key=self._key(key))
