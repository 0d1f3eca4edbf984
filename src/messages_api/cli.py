# cli.py
import asyncio
import logging
import os
import uuid

import click

from messages_api.adapters.queue import QueueFactory
from messages_api.adapters.storage import ObjectStore
from messages_api.aws.clients import AWSClientManager
from messages_api.config.settings import (
    VALID_DEPLOYMENT_MODES,
    VALID_RELAY_MODES,
    get_settings,
)
from messages_api.consumer import MessageConsumer

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def _apply_overrides(mode=None, relay_mode=None):
    """Push command line overrides into the environment and reload settings."""
    if mode:
        os.environ["DEPLOYMENT_MODE"] = mode
    if relay_mode:
        os.environ["RELAY_MODE"] = relay_mode
    get_settings.cache_clear()
    settings = get_settings()
    configure_logging(settings.log_level)
    return settings


@click.group()
def cli():
    """CLI commands for the Messages API and its queue consumer"""
    pass


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    print("Current Configuration:")
    print(f"  Deployment Mode: {settings.deployment_mode}")
    print(f"  Relay Mode: {settings.relay_mode}")
    print(f"  In-process Consumer: {settings.consumer_enabled}")
    print(f"  AWS Region: {settings.aws_region}")
    print(f"  AWS Endpoint: {settings.aws_endpoint_url}")
    print(f"  S3 Bucket: {settings.s3_bucket_name}")
    print(f"  SQS Queue Name: {settings.sqs_queue_name}")
    print(f"  SQS Queue URL: {settings.sqs_queue_url}")
    print(f"  Log Level: {settings.log_level}")


@cli.command()
@click.option("--mode",
              type=click.Choice(VALID_DEPLOYMENT_MODES),
              default=None,
              help="Deployment mode (defaults to DEPLOYMENT_MODE)")
@click.option("--relay-mode",
              type=click.Choice(VALID_RELAY_MODES),
              default=None,
              help="Relay mode (defaults to RELAY_MODE)")
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
def serve(mode, relay_mode, host, port):
    """Run the HTTP API with uvicorn"""
    import uvicorn

    from messages_api.main import create_app

    settings = _apply_overrides(mode, relay_mode)
    print(f"Starting Messages API in {settings.deployment_mode} mode ({settings.relay_mode} relay)...")
    app = create_app(settings)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


@cli.command()
@click.option("--mode",
              type=click.Choice(VALID_DEPLOYMENT_MODES),
              default=None,
              help="Deployment mode (defaults to DEPLOYMENT_MODE)")
def consumer(mode):
    """Start the queue consumer that stores published messages"""
    settings = _apply_overrides(mode)
    print("Configuration loaded:")
    print(f"  Deployment mode: {settings.deployment_mode}")
    print(f"  S3 bucket: {settings.s3_bucket_name}")
    print(f"  SQS queue: {settings.sqs_queue_name}")
    print(f"  AWS endpoint: {settings.aws_endpoint_url}")

    clients = AWSClientManager(settings)
    queue = QueueFactory.get_queue_handler(settings, clients)
    store = ObjectStore(clients.get_s3_client())
    consumer_instance = MessageConsumer(queue=queue, store=store, config=settings.relay_config)

    try:
        print("Consumer ready to process messages")
        asyncio.run(consumer_instance.listen_for_messages())
    except KeyboardInterrupt:
        print("Received shutdown signal...")
        consumer_instance.stop()
    finally:
        print("Consumer shutdown complete")


@cli.command()
@click.option("--bucket", default=None, help="Bucket name (random uuid if omitted)")
@click.option("--queue", default=None, help="Queue name (random uuid if omitted)")
def provision(bucket, queue):
    """Create a bucket and a queue on the configured endpoint"""
    settings = _apply_overrides()
    bucket = bucket or str(uuid.uuid4())
    queue = queue or str(uuid.uuid4())

    clients = AWSClientManager(settings)
    s3_client = clients.get_s3_client()
    sqs_client = clients.get_sqs_client()

    # us-east-1 rejects an explicit LocationConstraint
    if settings.aws_region == "us-east-1":
        s3_client.create_bucket(Bucket=bucket)
    else:
        s3_client.create_bucket(
            Bucket=bucket,
            CreateBucketConfiguration={"LocationConstraint": settings.aws_region},
        )
    queue_url = sqs_client.create_queue(QueueName=queue)["QueueUrl"]
    logger.info(f"Provisioned bucket '{bucket}' and queue '{queue}'")

    print(f"export S3_BUCKET_NAME={bucket}")
    print(f"export SQS_QUEUE_NAME={queue}")
    print(f"export SQS_QUEUE_URL={queue_url}")


if __name__ == "__main__":
    cli()
