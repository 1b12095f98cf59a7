"""Setup the DynamoDB transient table for local development."""
import os

import boto3


def create_tables():
    endpoint_url = os.environ.get("DYNAMODB_ENDPOINT_URL", "http://localhost:8001")
    region = os.environ.get("AWS_REGION", "us-west-2")
    table_name = os.environ.get("DYNAMODB_TRANSIENT_TABLE", "route-creator-transient")

    client = boto3.client(
        "dynamodb",
        endpoint_url=endpoint_url,
        region_name=region,
        aws_access_key_id=os.environ.get("AWS_ACCESS_KEY_ID", "local"),
        aws_secret_access_key=os.environ.get("AWS_SECRET_ACCESS_KEY", "local"),
    )

    try:
        client.describe_table(TableName=table_name)
        print(f"Table {table_name} already exists")
    except client.exceptions.ResourceNotFoundException:
        client.create_table(
            TableName=table_name,
            KeySchema=[{"AttributeName": "cache_key", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "cache_key", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        client.get_waiter("table_exists").wait(TableName=table_name)
        print(f"Created table {table_name}")

    ttl = client.describe_time_to_live(TableName=table_name)["TimeToLiveDescription"]
    if ttl.get("TimeToLiveStatus") in ("ENABLED", "ENABLING"):
        print(f"TTL already enabled on {table_name}")
    else:
        client.update_time_to_live(
            TableName=table_name,
            TimeToLiveSpecification={"Enabled": True, "AttributeName": "expires_at"},
        )
        print(f"TTL enabled on {table_name}.expires_at")


if __name__ == "__main__":
    create_tables()
